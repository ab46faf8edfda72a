"""Immutable value types."""

from .area import Area
from .money import Money
from .percentage import Percentage

__all__ = [
    "Area",
    "Money",
    "Percentage",
]
