"""
ARGUS: Procurement Risk Indicators

Detects statistical anomaly patterns in a single tender/award record,
combines them into a bounded 0-100 risk score with interaction effects, and
explains the result in fixed, non-accusatory language.

Components:
- detectors: SingleBidder, VendorRepetition, CompressedDeadline,
  BudgetAnomaly, SpecTailoring
- scoring: weighted sum with interaction multiplier
- explain: templated report builder and language-safety validator
- services: historical baseline providers (in-memory, SQLite)
- pipeline: per-record state machine, timeouts, batch execution

Scores are analytical indicators, not evidence of wrongdoing.
"""

__version__ = "1.2.0"
__author__ = "ARGUS Project"

from .common.errors import (
    AnalysisCancelled,
    AnalysisTimeout,
    ArgusError,
    BaselineUnavailable,
    ConfigurationError,
    DetectorError,
    LanguageSafetyViolation,
)
from .config import KnowledgeBase, PipelineSettings, WeightConfig
from .models import ProcurementRecord, RiskAnalysis, RiskLevel, RiskPattern, PatternType
from .pipeline import AnalysisRun, RiskAnalysisPipeline
from .services import InMemoryBaselineProvider, SqliteBaselineProvider

__all__ = [
    "AnalysisCancelled",
    "AnalysisRun",
    "AnalysisTimeout",
    "ArgusError",
    "BaselineUnavailable",
    "ConfigurationError",
    "DetectorError",
    "InMemoryBaselineProvider",
    "KnowledgeBase",
    "LanguageSafetyViolation",
    "PatternType",
    "PipelineSettings",
    "ProcurementRecord",
    "RiskAnalysis",
    "RiskAnalysisPipeline",
    "RiskLevel",
    "RiskPattern",
    "SqliteBaselineProvider",
    "WeightConfig",
]
