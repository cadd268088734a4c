"""
Budget anomaly: awarded amount well above the estimated budget.

Fires on the 1.20 overrun ratio alone. The score is raised to the
high-confidence band only when a usable baseline puts the award more than
two standard deviations above the historical mean.
"""
from __future__ import annotations

from typing import Optional

from ..config.constants import (
    BUDGET_BASE_SCORE,
    BUDGET_OVERRUN_RATIO,
    BUDGET_Z_CAP,
    BUDGET_Z_SCALE,
    BUDGET_Z_THRESHOLD,
)
from ..explain.templates import format_amount, format_percent, render
from ..models.analysis import PatternType, RiskPattern
from ..models.record import ProcurementRecord
from ..services.baseline_service import HistoricalBaselineProvider
from .base import (
    BASELINE_AVAILABLE,
    BASELINE_ZERO_VARIANCE,
    Detector,
    baseline_status,
    baseline_years,
)


class BudgetAnomalyDetector(Detector):
    pattern_type = PatternType.BUDGET_ANOMALY

    def __init__(self, min_baseline_sample: int = 5, baseline_window_years: int = 2):
        self.min_baseline_sample = min_baseline_sample
        self.baseline_window_years = baseline_window_years

    def is_applicable(self, record: ProcurementRecord) -> bool:
        return (
            record.awarded_amount is not None
            and record.estimated_budget is not None
            and record.estimated_budget > 0
        )

    def detect(
        self,
        record: ProcurementRecord,
        baselines: Optional[HistoricalBaselineProvider],
    ) -> Optional[RiskPattern]:
        if not self.is_applicable(record):
            return None

        awarded = record.awarded_amount
        estimated = record.estimated_budget
        if awarded <= estimated * BUDGET_OVERRUN_RATIO:
            return None

        overrun_pct = (awarded / estimated - 1) * 100
        baseline = None
        if baselines is not None:
            start_year, end_year = baseline_years(record, self.baseline_window_years)
            baseline = baselines.get_baseline(record.category, record.region, start_year, end_year)

        status = baseline_status(baseline, self.min_baseline_sample)
        if status == BASELINE_AVAILABLE and baseline.stddev_amount <= 0:
            status = BASELINE_ZERO_VARIANCE

        evidence = {
            "awarded_amount": awarded,
            "estimated_budget": estimated,
            "overrun_ratio": awarded / estimated,
            "overrun_pct": overrun_pct,
            "baseline_status": status,
        }
        amounts = {
            "awarded_amount": format_amount(awarded),
            "estimated_budget": format_amount(estimated),
            "overrun_pct": format_percent(overrun_pct),
        }

        if status != BASELINE_AVAILABLE:
            evidence["baseline_unavailable"] = True
            if baseline is not None:
                evidence["baseline_sample_size"] = baseline.sample_size
            rendered = render("detector.budget_anomaly.threshold_only", **amounts)
            return self._pattern(BUDGET_BASE_SCORE, evidence, rendered)

        mean = baseline.mean_amount
        stddev = baseline.stddev_amount
        z = (awarded - mean) / stddev
        high_confidence = awarded > mean + BUDGET_Z_THRESHOLD * stddev

        evidence.update({
            "baseline_mean": mean,
            "baseline_stddev": stddev,
            "baseline_sample_size": baseline.sample_size,
            "baseline_years": [baseline.start_year, baseline.end_year],
            "z_score": z,
            "high_confidence": high_confidence,
        })

        if high_confidence:
            score = BUDGET_BASE_SCORE + min(BUDGET_Z_CAP, z * BUDGET_Z_SCALE)
            rendered = render("detector.budget_anomaly.high_confidence", z_score=f"{z:.2f}", **amounts)
        else:
            score = BUDGET_BASE_SCORE
            rendered = render("detector.budget_anomaly.within_range", **amounts)
        return self._pattern(score, evidence, rendered)
