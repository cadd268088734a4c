"""
Fixed detector registration order.

The order here is the order patterns are scored and reported in, whatever
order detectors finish in. New pattern kinds are added by extending
PatternType and this list.
"""
from __future__ import annotations

from typing import Optional

from ..config.knowledge_base import KnowledgeBase
from ..config.settings import PipelineSettings
from ..models.analysis import PatternType
from .base import Detector
from .budget_anomaly import BudgetAnomalyDetector
from .compressed_deadline import CompressedDeadlineDetector
from .single_bidder import SingleBidderDetector
from .spec_tailoring import SpecTailoringDetector
from .vendor_repetition import VendorRepetitionDetector

REGISTRATION_ORDER: tuple[PatternType, ...] = (
    PatternType.SINGLE_BIDDER,
    PatternType.VENDOR_REPETITION,
    PatternType.COMPRESSED_DEADLINE,
    PatternType.BUDGET_ANOMALY,
    PatternType.SPEC_TAILORING,
)


def build_detectors(
    knowledge_base: Optional[KnowledgeBase] = None,
    settings: Optional[PipelineSettings] = None,
) -> tuple[Detector, ...]:
    settings = settings or PipelineSettings()
    detectors = {
        PatternType.SINGLE_BIDDER: SingleBidderDetector(
            min_baseline_sample=settings.min_baseline_sample,
            baseline_window_years=settings.baseline_window_years,
        ),
        PatternType.VENDOR_REPETITION: VendorRepetitionDetector(),
        PatternType.COMPRESSED_DEADLINE: CompressedDeadlineDetector(
            default_expected_days=settings.default_expected_days,
            min_baseline_sample=settings.min_baseline_sample,
            baseline_window_years=settings.baseline_window_years,
        ),
        PatternType.BUDGET_ANOMALY: BudgetAnomalyDetector(
            min_baseline_sample=settings.min_baseline_sample,
            baseline_window_years=settings.baseline_window_years,
        ),
        PatternType.SPEC_TAILORING: SpecTailoringDetector(knowledge_base or KnowledgeBase.default()),
    }
    return tuple(detectors[p] for p in REGISTRATION_ORDER)


def registration_index(pattern_type: PatternType) -> int:
    return REGISTRATION_ORDER.index(pattern_type)
