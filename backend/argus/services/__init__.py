"""Historical baseline providers, the SQLite history store and record files."""
from .baseline_service import (
    HistoricalBaselineProvider,
    InMemoryBaselineProvider,
    SqliteBaselineProvider,
)
from .record_io import RecordFileError, load_records
from .statistics import summarize, summarize_records

__all__ = [
    "HistoricalBaselineProvider",
    "InMemoryBaselineProvider",
    "RecordFileError",
    "SqliteBaselineProvider",
    "load_records",
    "summarize",
    "summarize_records",
]
