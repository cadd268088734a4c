"""Pydantic models for records, baselines, patterns and reports."""
from .analysis import (
    IndicatorType,
    InteractionEffects,
    PatternReport,
    PatternType,
    RiskAnalysis,
    RiskLevel,
    RiskPattern,
    SpecTailoringSubType,
)
from .baseline import AwardedContract, HistoricalBaseline
from .record import ProcurementRecord

__all__ = [
    "AwardedContract",
    "HistoricalBaseline",
    "IndicatorType",
    "InteractionEffects",
    "PatternReport",
    "PatternType",
    "ProcurementRecord",
    "RiskAnalysis",
    "RiskLevel",
    "RiskPattern",
    "SpecTailoringSubType",
]
