"""Shared infrastructure for ARGUS: logging and the error taxonomy."""
from .errors import (
    AnalysisCancelled,
    AnalysisTimeout,
    ArgusError,
    BaselineUnavailable,
    ConfigurationError,
    DetectorError,
    LanguageSafetyViolation,
)

__all__ = [
    "AnalysisCancelled",
    "AnalysisTimeout",
    "ArgusError",
    "BaselineUnavailable",
    "ConfigurationError",
    "DetectorError",
    "LanguageSafetyViolation",
]
