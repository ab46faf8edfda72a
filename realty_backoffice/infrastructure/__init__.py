"""Storage adapters."""

from .memory import InMemoryMarketStudyRepository

__all__ = [
    "InMemoryMarketStudyRepository",
]
