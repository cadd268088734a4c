"""
Error taxonomy for the risk-indicator pipeline.

Every failure surfaced to a caller is an ArgusError carrying a stable
error_code and a retryable flag. Detectors that cannot run are not errors:
they report themselves as not applicable and produce no pattern.
"""
from __future__ import annotations


class ArgusError(Exception):
    """Base class for pipeline errors."""
    error_code: str = "ARGUS_ERROR"
    retryable: bool = False

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "code": self.error_code,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details if self.details else None,
        }


class ConfigurationError(ArgusError):
    """Malformed weights, knowledge base or settings. Raised before any record is processed."""
    error_code = "CONFIGURATION_ERROR"


class BaselineUnavailable(ArgusError):
    """Historical statistics could not be read (missing store or lookup timeout)."""
    error_code = "BASELINE_UNAVAILABLE"


class LanguageSafetyViolation(ArgusError):
    """Generated text matched the accusatory-phrase deny-list."""
    error_code = "LANGUAGE_SAFETY_VIOLATION"

    def __init__(self, phrase: str, template_id: str, field: str):
        self.phrase = phrase
        self.template_id = template_id
        self.field = field
        super().__init__(
            f"Denied phrase {phrase!r} in {field} (template {template_id})",
            details={"phrase": phrase, "template_id": template_id, "field": field},
        )


class AnalysisTimeout(ArgusError):
    """A record exceeded its processing budget."""
    error_code = "ANALYSIS_TIMEOUT"
    retryable = True


class DetectorError(ArgusError):
    """A detector raised unexpectedly while evaluating a record."""
    error_code = "DETECTOR_ERROR"


class AnalysisCancelled(ArgusError):
    """The batch was cancelled before this record started."""
    error_code = "ANALYSIS_CANCELLED"
    retryable = True
