"""
Detector output and the final risk analysis report.
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PatternType(str, Enum):
    """The five anomaly kinds, in fixed registration order."""
    SINGLE_BIDDER = "SINGLE_BIDDER"
    VENDOR_REPETITION = "VENDOR_REPETITION"
    COMPRESSED_DEADLINE = "COMPRESSED_DEADLINE"
    BUDGET_ANOMALY = "BUDGET_ANOMALY"
    SPEC_TAILORING = "SPEC_TAILORING"


class SpecTailoringSubType(str, Enum):
    BRAND_REFERENCE = "BRAND_REFERENCE"
    RESTRICTIVE_LANGUAGE = "RESTRICTIVE_LANGUAGE"
    MIXED = "MIXED"


class IndicatorType(str, Enum):
    """Kind of a phrase matched inside a specification."""
    BRAND_REFERENCE = "BRAND_REFERENCE"
    RESTRICTIVE_LANGUAGE = "RESTRICTIVE_LANGUAGE"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RiskPattern(BaseModel):
    """One detected anomaly, produced by exactly one detector."""

    model_config = ConfigDict(frozen=True)

    pattern_type: PatternType
    sub_type: Optional[SpecTailoringSubType] = None
    score: float = Field(ge=0, le=100)
    evidence: dict[str, Any] = Field(default_factory=dict)
    explanation: str
    template_id: str


class PatternReport(BaseModel):
    """A detected pattern as it appears in the report, with its attributed share."""

    model_config = ConfigDict(frozen=True)

    pattern_type: PatternType
    sub_type: Optional[SpecTailoringSubType] = None
    score: float = Field(ge=0, le=100)
    weight: float = Field(gt=0)
    score_contribution: float = Field(ge=0)
    evidence: dict[str, Any] = Field(default_factory=dict)
    explanation: str
    template_id: str


class InteractionEffects(BaseModel):
    model_config = ConfigDict(frozen=True)

    multiplier: float = Field(1.0, ge=1.0)
    reason: Optional[str] = None
    template_id: Optional[str] = None


class RiskAnalysis(BaseModel):
    """Explainability report for one record. Re-analysis produces a new instance."""

    model_config = ConfigDict(frozen=True)

    procurement_id: str
    overall_risk_score: float = Field(ge=0, le=100)
    risk_level: RiskLevel
    risk_patterns: List[PatternReport] = Field(default_factory=list)
    interaction_effects: InteractionEffects = Field(default_factory=InteractionEffects)
    summary_text: str
    disclaimer: str
    methodology_version: str
    template_version: str
    generated_at: datetime

    def to_payload(self) -> dict:
        """JSON-ready dict for dashboard / RTI consumers."""
        return self.model_dump(mode="json")
