"""Application services."""

from .exporter import StudyExporter
from .market_study_service import MarketStudyService
from .valuation_service import ValuationOutcome, ValuationService

__all__ = [
    "MarketStudyService",
    "StudyExporter",
    "ValuationOutcome",
    "ValuationService",
]
