"""
SQLite schema for historical procurement records.

Creates table: procurement_history
  one row per past tender/award, with normalized category/region keys
  used by baseline lookups.
"""
from __future__ import annotations

import sqlite3
from datetime import date
from typing import Iterable, Optional

from ..models.record import ProcurementRecord

COLUMNS = (
    "tender_id",
    "department_id",
    "department_name",
    "category",
    "region",
    "procurement_year",
    "estimated_budget",
    "awarded_amount",
    "publication_date",
    "submission_deadline",
    "award_date",
    "bidder_count",
    "awarded_vendor_id",
    "specification_text",
)


def normalize_key(value: Optional[str]) -> Optional[str]:
    """Lowercase, whitespace-collapsed lookup key; None stays None."""
    if value is None:
        return None
    key = " ".join(value.split()).lower()
    return key or None


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Create procurement_history table and lookup indexes if missing."""
    cursor = conn.cursor()
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS procurement_history (
            tender_id TEXT PRIMARY KEY,
            department_id TEXT NOT NULL,
            department_name TEXT,
            category TEXT,
            region TEXT,
            category_key TEXT,
            region_key TEXT,
            procurement_year INTEGER NOT NULL,
            estimated_budget REAL NOT NULL,
            awarded_amount REAL,
            publication_date TEXT,
            submission_deadline TEXT,
            award_date TEXT,
            bidder_count INTEGER,
            awarded_vendor_id TEXT,
            specification_text TEXT
        )
    """)
    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_history_scope
        ON procurement_history(category_key, region_key, procurement_year)
    """)
    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_history_vendor_dept
        ON procurement_history(awarded_vendor_id, department_id, award_date)
    """)
    conn.commit()


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def insert_records(conn: sqlite3.Connection, records: Iterable[ProcurementRecord]) -> int:
    """Insert or replace history rows. Returns the number of rows written."""
    rows = [
        (
            r.tender_id,
            r.department_id,
            r.department_name,
            r.category,
            r.region,
            normalize_key(r.category),
            normalize_key(r.region),
            r.procurement_year,
            r.estimated_budget,
            r.awarded_amount,
            _iso(r.publication_date),
            _iso(r.submission_deadline),
            _iso(r.award_date),
            r.bidder_count,
            r.awarded_vendor_id,
            r.specification_text,
        )
        for r in records
    ]
    conn.executemany(
        """
        INSERT OR REPLACE INTO procurement_history (
            tender_id, department_id, department_name, category, region,
            category_key, region_key, procurement_year, estimated_budget,
            awarded_amount, publication_date, submission_deadline, award_date,
            bidder_count, awarded_vendor_id, specification_text
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        rows,
    )
    conn.commit()
    return len(rows)


def row_to_record(row: sqlite3.Row) -> ProcurementRecord:
    return ProcurementRecord(**{col: row[col] for col in COLUMNS if row[col] is not None})
