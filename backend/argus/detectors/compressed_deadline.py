"""Compressed deadline: bidding window shorter than the minimum for the tender's value band."""
from __future__ import annotations

from typing import Optional

from ..config.constants import (
    DEADLINE_BASE_SCORE,
    DEADLINE_DEVIATION_SCALE,
    DEADLINE_MIN_DAYS_LARGE,
    DEADLINE_MIN_DAYS_SMALL,
    DEADLINE_VALUE_BAND,
)
from ..explain.templates import format_percent, render
from ..models.analysis import PatternType, RiskPattern
from ..models.record import ProcurementRecord
from ..services.baseline_service import HistoricalBaselineProvider
from .base import Detector, baseline_years


def minimum_window_days(tender_value: float) -> int:
    return DEADLINE_MIN_DAYS_SMALL if tender_value < DEADLINE_VALUE_BAND else DEADLINE_MIN_DAYS_LARGE


class CompressedDeadlineDetector(Detector):
    pattern_type = PatternType.COMPRESSED_DEADLINE

    def __init__(
        self,
        default_expected_days: float = 21.0,
        min_baseline_sample: int = 5,
        baseline_window_years: int = 2,
    ):
        self.default_expected_days = default_expected_days
        self.min_baseline_sample = min_baseline_sample
        self.baseline_window_years = baseline_window_years

    def is_applicable(self, record: ProcurementRecord) -> bool:
        days = record.bidding_window_days
        return days is not None and days >= 0

    def expected_days(
        self,
        record: ProcurementRecord,
        baselines: Optional[HistoricalBaselineProvider],
    ) -> tuple[float, str]:
        """Category median window across all regions, else the configured default."""
        if baselines is not None:
            start_year, end_year = baseline_years(record, self.baseline_window_years)
            baseline = baselines.get_baseline(record.category, None, start_year, end_year)
            if (
                baseline is not None
                and baseline.median_bidding_days
                and baseline.sample_size >= self.min_baseline_sample
            ):
                return baseline.median_bidding_days, "baseline"
        return self.default_expected_days, "default"

    def detect(
        self,
        record: ProcurementRecord,
        baselines: Optional[HistoricalBaselineProvider],
    ) -> Optional[RiskPattern]:
        if not self.is_applicable(record):
            return None

        window_days = record.bidding_window_days
        minimum_days = minimum_window_days(record.estimated_budget)
        if window_days >= minimum_days:
            return None

        expected, source = self.expected_days(record, baselines)
        deviation = (expected - window_days) / expected
        score = DEADLINE_BASE_SCORE + deviation * DEADLINE_DEVIATION_SCALE

        evidence = {
            "actual_days": window_days,
            "expected_days": expected,
            "expected_days_source": source,
            "minimum_days": minimum_days,
            "deviation_pct": deviation * 100,
            "tender_value": record.estimated_budget,
        }
        if deviation <= 0:
            rendered = render(
                "detector.compressed_deadline.below_minimum",
                actual_days=window_days,
                minimum_days=minimum_days,
            )
        else:
            rendered = render(
                "detector.compressed_deadline.baseline" if source == "baseline" else "detector.compressed_deadline.default",
                actual_days=window_days,
                expected_days=f"{expected:g}",
                deviation_pct=format_percent(deviation * 100),
            )
        return self._pattern(score, evidence, rendered)
