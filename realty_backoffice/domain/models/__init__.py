"""Data models for realty_backoffice."""

from .analysis import StatisticalAnalysis
from .factors import FactorScores
from .property import PropertyAddress, PropertyCharacteristics
from .sample import MarketSample, SampleStatus
from .study import EvaluationType, MarketStudy, generate_study_id
from .valuation import PropertyStandard, PropertyValuation

__all__ = [
    "EvaluationType",
    "FactorScores",
    "MarketSample",
    "MarketStudy",
    "PropertyAddress",
    "PropertyCharacteristics",
    "PropertyStandard",
    "PropertyValuation",
    "SampleStatus",
    "StatisticalAnalysis",
    "generate_study_id",
]
