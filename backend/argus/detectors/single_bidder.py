"""Single bidder: only one bid received for a competitive tender."""
from __future__ import annotations

from typing import Optional

from ..config.constants import (
    SINGLE_BIDDER_BASE_SCORE,
    SINGLE_BIDDER_HIGH_VALUE,
    SINGLE_BIDDER_HIGH_VALUE_BONUS,
    SINGLE_BIDDER_SIZE_CAP,
    SINGLE_BIDDER_SIZE_DIVISOR,
    SINGLE_BIDDER_SIZE_UNIT,
)
from ..explain.templates import format_amount, render
from ..models.analysis import PatternType, RiskPattern
from ..models.record import ProcurementRecord
from ..services.baseline_service import HistoricalBaselineProvider
from .base import Detector, baseline_status, baseline_years


class SingleBidderDetector(Detector):
    pattern_type = PatternType.SINGLE_BIDDER

    def __init__(self, min_baseline_sample: int = 5, baseline_window_years: int = 2):
        self.min_baseline_sample = min_baseline_sample
        self.baseline_window_years = baseline_window_years

    def is_applicable(self, record: ProcurementRecord) -> bool:
        return record.bidder_count is not None

    def detect(
        self,
        record: ProcurementRecord,
        baselines: Optional[HistoricalBaselineProvider],
    ) -> Optional[RiskPattern]:
        if not self.is_applicable(record) or record.bidder_count != 1:
            return None

        tender_value = record.estimated_budget
        size_component = min(
            SINGLE_BIDDER_SIZE_CAP,
            (tender_value / SINGLE_BIDDER_SIZE_UNIT) / SINGLE_BIDDER_SIZE_DIVISOR,
        )
        high_value_bonus = SINGLE_BIDDER_HIGH_VALUE_BONUS if tender_value > SINGLE_BIDDER_HIGH_VALUE else 0.0
        score = SINGLE_BIDDER_BASE_SCORE + size_component + high_value_bonus

        baseline = None
        if baselines is not None:
            start_year, end_year = baseline_years(record, self.baseline_window_years)
            baseline = baselines.get_baseline(record.category, record.region, start_year, end_year)
        expected = baseline.average_bidder_count if baseline is not None else None

        evidence = {
            "bidder_count": record.bidder_count,
            "tender_value": tender_value,
            "size_component": size_component,
            "high_value_bonus": high_value_bonus,
            "expected_bidder_count": expected,
            "baseline_status": baseline_status(baseline, self.min_baseline_sample),
        }

        if expected is not None:
            rendered = render(
                "detector.single_bidder.baseline",
                tender_value=format_amount(tender_value),
                expected_bidders=f"{expected:.1f}",
            )
        else:
            rendered = render(
                "detector.single_bidder.no_baseline",
                tender_value=format_amount(tender_value),
            )
        return self._pattern(score, evidence, rendered)
