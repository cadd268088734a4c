"""
Pytest fixtures for ARGUS tests.
"""
from datetime import datetime, timezone

import pytest

from argus.models import HistoricalBaseline, PatternType, ProcurementRecord, RiskPattern
from argus.pipeline import RiskAnalysisPipeline
from argus.services import InMemoryBaselineProvider

FIXED_TIME = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


def build_record(**overrides) -> ProcurementRecord:
    data = {
        "tender_id": "PWD-2025-0001",
        "department_id": "DEPT-PWD",
        "department_name": "Public Works Department",
        "category": "Road Construction",
        "region": "Maharashtra",
        "procurement_year": 2025,
        "estimated_budget": 2_000_000.0,
    }
    data.update(overrides)
    return ProcurementRecord(**data)


def build_pattern(pattern_type: PatternType, score: float, **overrides) -> RiskPattern:
    data = {
        "pattern_type": pattern_type,
        "score": score,
        "explanation": f"{pattern_type.value} test explanation.",
        "template_id": "test.pattern",
    }
    data.update(overrides)
    return RiskPattern(**data)


@pytest.fixture
def make_record():
    """Factory for valid ProcurementRecords with sensible defaults."""
    return build_record


@pytest.fixture
def make_pattern():
    return build_pattern


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def road_baseline():
    """Road Construction / Maharashtra: mean 10 lakh, stddev 1 lakh, 30 samples."""
    return HistoricalBaseline(
        category="Road Construction",
        region="Maharashtra",
        start_year=2023,
        end_year=2025,
        mean_amount=1_000_000.0,
        stddev_amount=100_000.0,
        average_bidder_count=4.5,
        median_bidding_days=28.0,
        sample_size=30,
    )


@pytest.fixture
def baseline_provider(road_baseline):
    """Precomputed baselines for the region and for the all-regions category figure."""
    return InMemoryBaselineProvider(
        baselines={
            ("Road Construction", "Maharashtra"): road_baseline,
            ("Road Construction", None): road_baseline.model_copy(update={"region": None}),
        }
    )


@pytest.fixture
def pipeline(baseline_provider, fixed_clock):
    with RiskAnalysisPipeline(baselines=baseline_provider, clock=fixed_clock) as p:
        yield p
