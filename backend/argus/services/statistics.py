"""
Aggregate statistics for historical baselines.

mean / stddev use the awarded amounts; stddev is the sample standard
deviation (ddof=1), 0.0 when only one amount is available.
"""
from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from ..models.baseline import HistoricalBaseline
from ..models.record import ProcurementRecord


def summarize(
    amounts: Iterable[float],
    window_days: Iterable[float],
    bidder_counts: Iterable[float],
    *,
    category: Optional[str] = None,
    region: Optional[str] = None,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
) -> HistoricalBaseline:
    a = np.asarray([float(x) for x in amounts], dtype=float)
    w = np.asarray([float(x) for x in window_days], dtype=float)
    b = np.asarray([float(x) for x in bidder_counts], dtype=float)

    mean_amount = float(np.mean(a)) if a.size else None
    stddev = float(np.std(a, ddof=1)) if a.size > 1 else 0.0

    return HistoricalBaseline(
        category=category,
        region=region,
        start_year=start_year,
        end_year=end_year,
        mean_amount=mean_amount,
        stddev_amount=stddev,
        average_bidder_count=float(np.mean(b)) if b.size else None,
        median_bidding_days=float(np.median(w)) if w.size else None,
        sample_size=int(a.size),
    )


def summarize_records(records: Iterable[ProcurementRecord], **scope) -> Optional[HistoricalBaseline]:
    """Summarize historical records; None when there is no history at all."""
    amounts, windows, bidders = [], [], []
    seen = 0
    for record in records:
        seen += 1
        if record.awarded_amount is not None:
            amounts.append(record.awarded_amount)
        days = record.bidding_window_days
        if days is not None and days >= 0:
            windows.append(days)
        if record.bidder_count is not None:
            bidders.append(record.bidder_count)
    if seen == 0:
        return None
    return summarize(amounts, windows, bidders, **scope)
