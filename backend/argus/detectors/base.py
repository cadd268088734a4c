"""
Common contract for the five pattern detectors.

Detectors are stateless apart from their configuration and read only the
record and the (read-only) baseline provider. A detector never raises on a
missing optional field: it reports itself as not applicable instead.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Optional

from ..config.constants import clamp_score
from ..config.weights import DEFAULT_WEIGHT, WeightConfig
from ..explain.templates import RenderedText
from ..models.analysis import PatternType, RiskPattern, SpecTailoringSubType
from ..models.baseline import HistoricalBaseline
from ..models.record import ProcurementRecord
from ..services.baseline_service import HistoricalBaselineProvider

BASELINE_AVAILABLE = "available"
BASELINE_UNAVAILABLE = "unavailable"
BASELINE_INSUFFICIENT_SAMPLE = "insufficient_sample"
BASELINE_ZERO_VARIANCE = "zero_variance"


def baseline_status(baseline: Optional[HistoricalBaseline], min_sample: int) -> str:
    if baseline is None or baseline.mean_amount is None:
        return BASELINE_UNAVAILABLE
    if baseline.sample_size < min_sample:
        return BASELINE_INSUFFICIENT_SAMPLE
    return BASELINE_AVAILABLE


class Detector(ABC):
    """One anomaly kind. Subclasses form a closed set registered in registry.py."""

    pattern_type: ClassVar[PatternType]

    @abstractmethod
    def is_applicable(self, record: ProcurementRecord) -> bool:
        ...

    @abstractmethod
    def detect(
        self,
        record: ProcurementRecord,
        baselines: Optional[HistoricalBaselineProvider],
    ) -> Optional[RiskPattern]:
        ...

    def weight(self, weights: Optional[WeightConfig] = None) -> float:
        if weights is None:
            return DEFAULT_WEIGHT
        return weights.weight_for(self.pattern_type)

    def _pattern(
        self,
        score: float,
        evidence: dict,
        rendered: RenderedText,
        sub_type: Optional[SpecTailoringSubType] = None,
    ) -> RiskPattern:
        return RiskPattern(
            pattern_type=self.pattern_type,
            sub_type=sub_type,
            score=clamp_score(score),
            evidence=evidence,
            explanation=rendered.text,
            template_id=rendered.template_id,
        )


def baseline_years(record: ProcurementRecord, window_years: int) -> tuple[int, int]:
    """Year window [current_year - window_years, current_year]."""
    return record.procurement_year - window_years, record.procurement_year
