"""
Vendor repetition: the same vendor repeatedly awarded by the same department.

Counts the current award plus prior awards (same vendor, same department)
dated within the trailing 365 days, deduplicated by tender id.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Optional

import structlog

from ..config.constants import (
    CRORE,
    VENDOR_REPETITION_BASE_SCORE,
    VENDOR_REPETITION_FLOOR_SCORE,
    VENDOR_REPETITION_MIN_CONTRACTS,
    VENDOR_REPETITION_PER_CONTRACT,
    VENDOR_REPETITION_PER_CRORE,
    VENDOR_REPETITION_SHORT_WINDOW_DAYS,
    VENDOR_REPETITION_SHORT_WINDOW_VALUE,
    VENDOR_REPETITION_WINDOW_DAYS,
)
from ..explain.templates import format_amount, render
from ..models.analysis import PatternType, RiskPattern
from ..models.baseline import AwardedContract
from ..models.record import ProcurementRecord
from ..services.baseline_service import HistoricalBaselineProvider
from .base import Detector

logger = structlog.get_logger("argus.detectors.vendor_repetition")


class VendorRepetitionDetector(Detector):
    pattern_type = PatternType.VENDOR_REPETITION

    def is_applicable(self, record: ProcurementRecord) -> bool:
        return (
            record.awarded_vendor_id is not None
            and record.department_id is not None
            and record.award_date is not None
        )

    def detect(
        self,
        record: ProcurementRecord,
        baselines: Optional[HistoricalBaselineProvider],
    ) -> Optional[RiskPattern]:
        if not self.is_applicable(record) or baselines is None:
            return None

        window_start = record.award_date - timedelta(days=VENDOR_REPETITION_WINDOW_DAYS)
        prior = baselines.get_vendor_awards(
            record.awarded_vendor_id, record.department_id, window_start, record.award_date
        )
        if prior is None:
            logger.info("vendor_history_unavailable", tender_id=record.tender_id)
            return None

        current = AwardedContract(
            tender_id=record.tender_id,
            vendor_id=record.awarded_vendor_id,
            department_id=record.department_id,
            amount=record.awarded_amount or 0.0,
            award_date=record.award_date,
        )
        by_tender = {c.tender_id: c for c in prior if window_start <= c.award_date <= record.award_date}
        by_tender[current.tender_id] = current
        contracts = sorted(by_tender.values(), key=lambda c: (-c.award_date.toordinal(), c.tender_id))

        contract_count = len(contracts)
        if contract_count <= VENDOR_REPETITION_MIN_CONTRACTS:
            return None

        total_value = sum(c.amount for c in contracts)
        total_value_crores = total_value / CRORE
        score = min(
            100.0,
            VENDOR_REPETITION_BASE_SCORE
            + contract_count * VENDOR_REPETITION_PER_CONTRACT
            + total_value_crores * VENDOR_REPETITION_PER_CRORE,
        )

        short_start = record.award_date - timedelta(days=VENDOR_REPETITION_SHORT_WINDOW_DAYS)
        short_window_value = sum(c.amount for c in contracts if c.award_date >= short_start)
        floor_applied = short_window_value > VENDOR_REPETITION_SHORT_WINDOW_VALUE and score < VENDOR_REPETITION_FLOOR_SCORE
        if short_window_value > VENDOR_REPETITION_SHORT_WINDOW_VALUE:
            score = max(score, VENDOR_REPETITION_FLOOR_SCORE)

        evidence = {
            "vendor_id": record.awarded_vendor_id,
            "department_id": record.department_id,
            "window_days": VENDOR_REPETITION_WINDOW_DAYS,
            "contract_count": contract_count,
            "total_value": total_value,
            "total_value_crores": total_value_crores,
            "short_window_days": VENDOR_REPETITION_SHORT_WINDOW_DAYS,
            "short_window_value": short_window_value,
            "floor_applied": floor_applied,
            "contracts": [
                {
                    "tender_id": c.tender_id,
                    "award_date": c.award_date.isoformat(),
                    "amount": c.amount,
                }
                for c in contracts
            ],
        }
        rendered = render(
            "detector.vendor_repetition",
            vendor_id=record.awarded_vendor_id,
            contract_count=contract_count,
            department_id=record.department_id,
            window_days=VENDOR_REPETITION_WINDOW_DAYS,
            total_value=format_amount(total_value),
        )
        return self._pattern(score, evidence, rendered)
