"""
Tests for baseline statistics and the in-memory and SQLite providers.
"""
import sqlite3
from datetime import date

import pytest

from argus.common.errors import BaselineUnavailable
from argus.services import InMemoryBaselineProvider, SqliteBaselineProvider, summarize
from argus.services.history_store import ensure_schema, insert_records, normalize_key


@pytest.fixture
def history(make_record):
    """Three Maharashtra road tenders 2023-2025, one Gujarat, one stale."""
    def past(tender_id, year, amount, days, bidders, **kw):
        data = dict(
            tender_id=tender_id,
            procurement_year=year,
            awarded_amount=amount,
            publication_date=date(year, 1, 1),
            submission_deadline=date(year, 1, 1 + days),
            bidder_count=bidders,
            awarded_vendor_id="V-100",
            award_date=date(year, 3, 1),
        )
        data.update(kw)
        return make_record(**data)

    return [
        past("R-23", 2023, 100.0, 10, 2),
        past("R-24", 2024, 200.0, 20, 4),
        past("R-25", 2025, 300.0, 30, 6),
        past("G-24", 2024, 1_000.0, 25, 8, region="Gujarat"),
        past("R-20", 2020, 9_999.0, 5, 1),
    ]


@pytest.fixture
def history_db(tmp_path, history):
    db_path = tmp_path / "history.db"
    conn = sqlite3.connect(db_path)
    try:
        ensure_schema(conn)
        insert_records(conn, history)
    finally:
        conn.close()
    return db_path


class TestSummarize:

    def test_sample_statistics(self):
        baseline = summarize([100.0, 200.0, 300.0], [10, 20, 30], [2, 4, 6])
        assert baseline.mean_amount == pytest.approx(200.0)
        assert baseline.stddev_amount == pytest.approx(100.0)
        assert baseline.median_bidding_days == pytest.approx(20.0)
        assert baseline.average_bidder_count == pytest.approx(4.0)
        assert baseline.sample_size == 3

    def test_single_sample_has_zero_stddev(self):
        baseline = summarize([500.0], [], [])
        assert baseline.stddev_amount == 0.0
        assert baseline.median_bidding_days is None
        assert baseline.average_bidder_count is None

    def test_no_amounts_means_unknown_mean(self):
        baseline = summarize([], [14], [3])
        assert baseline.mean_amount is None
        assert baseline.sample_size == 0

    def test_normalize_key(self):
        assert normalize_key("  Road   Construction ") == "road construction"
        assert normalize_key("   ") is None
        assert normalize_key(None) is None


class TestInMemoryProvider:

    def test_region_and_year_window(self, history):
        provider = InMemoryBaselineProvider(records=history)
        baseline = provider.get_baseline("Road Construction", "Maharashtra", 2023, 2025)
        assert baseline.sample_size == 3
        assert baseline.mean_amount == pytest.approx(200.0)
        assert baseline.median_bidding_days == pytest.approx(20.0)

    def test_all_regions(self, history):
        provider = InMemoryBaselineProvider(records=history)
        baseline = provider.get_baseline("road construction", None, 2023, 2025)
        assert baseline.sample_size == 4

    def test_unknown_category_is_absent(self, history):
        provider = InMemoryBaselineProvider(records=history)
        assert provider.get_baseline("Medical Equipment", "Maharashtra", 2023, 2025) is None

    def test_lookups_are_cached(self, history):
        class CountingProvider(InMemoryBaselineProvider):
            calls = 0

            def _load_baseline(self, *args):
                CountingProvider.calls += 1
                return super()._load_baseline(*args)

        provider = CountingProvider(records=history)
        first = provider.get_baseline("Road Construction", "Maharashtra", 2023, 2025)
        second = provider.get_baseline("ROAD CONSTRUCTION", "maharashtra", 2023, 2025)
        assert first is second
        assert CountingProvider.calls == 1

    def test_vendor_awards_sorted_descending(self, history):
        provider = InMemoryBaselineProvider(records=history)
        awards = provider.get_vendor_awards("V-100", "DEPT-PWD", date(2023, 1, 1), date(2025, 12, 31))
        assert [a.tender_id for a in awards] == ["R-25", "G-24", "R-24", "R-23"]


class TestSqliteProvider:

    def test_matches_in_memory_statistics(self, history, history_db):
        provider = SqliteBaselineProvider(history_db)
        expected = InMemoryBaselineProvider(records=history).get_baseline(
            "Road Construction", "Maharashtra", 2023, 2025
        )
        baseline = provider.get_baseline("Road Construction", "Maharashtra", 2023, 2025)
        assert baseline.sample_size == expected.sample_size
        assert baseline.mean_amount == pytest.approx(expected.mean_amount)
        assert baseline.stddev_amount == pytest.approx(expected.stddev_amount)
        assert baseline.median_bidding_days == pytest.approx(expected.median_bidding_days)

    def test_all_regions(self, history_db):
        baseline = SqliteBaselineProvider(history_db).get_baseline("Road Construction", None, 2023, 2025)
        assert baseline.sample_size == 4

    def test_unknown_category_is_absent(self, history_db):
        assert SqliteBaselineProvider(history_db).get_baseline("Medical Equipment", None) is None

    def test_vendor_awards(self, history_db):
        awards = SqliteBaselineProvider(history_db).get_vendor_awards(
            "V-100", "DEPT-PWD", date(2024, 1, 1), date(2025, 12, 31)
        )
        assert [a.tender_id for a in awards] == ["R-25", "G-24", "R-24"]
        assert awards[0].award_date == date(2025, 3, 1)
        assert awards[0].amount == pytest.approx(300.0)

    def test_missing_database(self, tmp_path):
        provider = SqliteBaselineProvider(tmp_path / "absent.db")
        with pytest.raises(BaselineUnavailable):
            provider.get_baseline("Road Construction", "Maharashtra")

    def test_connection_is_read_only(self, history_db):
        provider = SqliteBaselineProvider(history_db)
        with pytest.raises(BaselineUnavailable):
            with provider._connect() as conn:
                conn.execute("DELETE FROM procurement_history")

    def test_insert_replaces_existing_rows(self, history, history_db):
        conn = sqlite3.connect(history_db)
        try:
            insert_records(conn, history[:2])
            count = conn.execute("SELECT COUNT(*) FROM procurement_history").fetchone()[0]
        finally:
            conn.close()
        assert count == len(history)
