"""
Historical baseline lookups.

A provider is a read-only snapshot for its whole lifetime: all records of a
batch are compared against the same history. Refreshing history means
building a new provider (and a new pipeline) out of band.

Lookups:
    get_baseline(category, region, start_year, end_year)
        -> HistoricalBaseline | None   (region None = all regions)
    get_vendor_awards(vendor_id, department_id, start, end)
        -> list[AwardedContract], award_date descending then tender_id
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Iterable, Mapping, Optional

import structlog
from cachetools import LRUCache

from ..models.baseline import AwardedContract, HistoricalBaseline
from ..models.record import ProcurementRecord
from .base_service import BaseService
from .history_store import COLUMNS, normalize_key, row_to_record
from .statistics import summarize_records

logger = structlog.get_logger("argus.services.baseline")

BaselineKey = tuple[Optional[str], Optional[str], Optional[int], Optional[int]]


def _award_sort_key(award: AwardedContract):
    return (-award.award_date.toordinal(), award.tender_id)


class HistoricalBaselineProvider(ABC):
    """Read-only lookup of category/region baselines and prior awards."""

    def __init__(self, cache_size: int = 512):
        self._lock = threading.Lock()
        self._cache: LRUCache = LRUCache(maxsize=cache_size)

    def get_baseline(
        self,
        category: Optional[str],
        region: Optional[str],
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
    ) -> Optional[HistoricalBaseline]:
        key: BaselineKey = (normalize_key(category), normalize_key(region), start_year, end_year)
        with self._lock:
            if key in self._cache:
                return self._cache[key]
        baseline = self._load_baseline(category, region, start_year, end_year)
        with self._lock:
            self._cache[key] = baseline
        return baseline

    @abstractmethod
    def _load_baseline(
        self,
        category: Optional[str],
        region: Optional[str],
        start_year: Optional[int],
        end_year: Optional[int],
    ) -> Optional[HistoricalBaseline]:
        ...

    @abstractmethod
    def get_vendor_awards(
        self,
        vendor_id: str,
        department_id: str,
        start: date,
        end: date,
    ) -> list[AwardedContract]:
        ...


def _in_years(year: int, start_year: Optional[int], end_year: Optional[int]) -> bool:
    if start_year is not None and year < start_year:
        return False
    if end_year is not None and year > end_year:
        return False
    return True


class InMemoryBaselineProvider(HistoricalBaselineProvider):
    """
    Baselines computed from a collection of historical records.

    Precomputed aggregates passed as `baselines`, keyed by (category, region)
    with region None for the all-regions figure, take precedence over
    computation from records.
    """

    def __init__(
        self,
        records: Iterable[ProcurementRecord] = (),
        baselines: Optional[Mapping[tuple[Optional[str], Optional[str]], HistoricalBaseline]] = None,
        cache_size: int = 512,
    ):
        super().__init__(cache_size=cache_size)
        self._records: tuple[ProcurementRecord, ...] = tuple(records)
        self._baselines = {
            (normalize_key(category), normalize_key(region)): baseline
            for (category, region), baseline in (baselines or {}).items()
        }

    def _load_baseline(self, category, region, start_year, end_year):
        precomputed = self._baselines.get((normalize_key(category), normalize_key(region)))
        if precomputed is not None:
            return precomputed

        category_key = normalize_key(category)
        region_key = normalize_key(region)
        matching = [
            r for r in self._records
            if normalize_key(r.category) == category_key
            and (region_key is None or normalize_key(r.region) == region_key)
            and _in_years(r.procurement_year, start_year, end_year)
        ]
        return summarize_records(
            matching, category=category, region=region, start_year=start_year, end_year=end_year
        )

    def get_vendor_awards(self, vendor_id, department_id, start, end):
        awards = [
            AwardedContract(
                tender_id=r.tender_id,
                vendor_id=r.awarded_vendor_id,
                department_id=r.department_id,
                amount=r.awarded_amount,
                award_date=r.award_date,
            )
            for r in self._records
            if r.awarded_vendor_id == vendor_id
            and r.department_id == department_id
            and r.award_date is not None
            and r.awarded_amount is not None
            and start <= r.award_date <= end
        ]
        return sorted(awards, key=_award_sort_key)


class SqliteBaselineProvider(BaseService, HistoricalBaselineProvider):
    """Baselines computed from the procurement_history table of a SQLite snapshot."""

    def __init__(self, db_path: str | Path, timeout: float = 30.0, cache_size: int = 512):
        BaseService.__init__(self, db_path, timeout=timeout)
        HistoricalBaselineProvider.__init__(self, cache_size=cache_size)

    def _load_baseline(self, category, region, start_year, end_year):
        conditions = ["category_key IS ?"]
        params: list = [normalize_key(category)]
        if region is not None:
            conditions.append("region_key = ?")
            params.append(normalize_key(region))
        if start_year is not None:
            conditions.append("procurement_year >= ?")
            params.append(start_year)
        if end_year is not None:
            conditions.append("procurement_year <= ?")
            params.append(end_year)

        with self._connect() as conn:
            rows = self._execute_many(
                conn,
                f"SELECT {', '.join(COLUMNS)} FROM procurement_history WHERE {' AND '.join(conditions)}",
                params,
            )
        logger.debug(
            "baseline_loaded",
            category=category,
            region=region,
            start_year=start_year,
            end_year=end_year,
            rows=len(rows),
        )
        return summarize_records(
            (row_to_record(row) for row in rows),
            category=category,
            region=region,
            start_year=start_year,
            end_year=end_year,
        )

    def get_vendor_awards(self, vendor_id, department_id, start, end):
        with self._connect() as conn:
            rows = self._execute_many(
                conn,
                """
                SELECT tender_id, awarded_vendor_id, department_id, awarded_amount, award_date
                FROM procurement_history
                WHERE awarded_vendor_id = ? AND department_id = ?
                  AND award_date IS NOT NULL AND awarded_amount IS NOT NULL
                  AND award_date BETWEEN ? AND ?
                ORDER BY award_date DESC, tender_id
                """,
                (vendor_id, department_id, start.isoformat(), end.isoformat()),
            )
        return [
            AwardedContract(
                tender_id=row["tender_id"],
                vendor_id=row["awarded_vendor_id"],
                department_id=row["department_id"],
                amount=row["awarded_amount"],
                award_date=date.fromisoformat(row["award_date"]),
            )
            for row in rows
        ]
