"""
Tests for configuration surfaces: weights, knowledge base and settings.

All malformed configuration fails fast with ConfigurationError.
"""
import io
import json
import logging
import math
from pathlib import Path

import pytest
import structlog

from argus.common.errors import ConfigurationError
from argus.common.structlog_config import configure
from argus.config import KnowledgeBase, PipelineSettings, WeightConfig
from argus.config.constants import METHODOLOGY_VERSION
from argus.models import PatternType
from argus.pipeline import RiskAnalysisPipeline


class TestWeightConfig:

    def test_defaults_to_one(self):
        weights = WeightConfig()
        assert all(weights.weight_for(p) == 1.0 for p in PatternType)

    def test_accepts_names_case_insensitively(self):
        weights = WeightConfig.from_mapping({"single_bidder": 1.5, "COMPRESSED_DEADLINE": 2})
        assert weights.weight_for(PatternType.SINGLE_BIDDER) == 1.5
        assert weights.weight_for(PatternType.COMPRESSED_DEADLINE) == 2.0
        assert weights.as_dict()["BUDGET_ANOMALY"] == 1.0

    @pytest.mark.parametrize("value", [0, -1.0, math.nan, math.inf, True, "1.0", None])
    def test_rejects_invalid_weights(self, value):
        with pytest.raises(ConfigurationError):
            WeightConfig({PatternType.SINGLE_BIDDER: value})

    def test_rejects_unknown_pattern(self):
        with pytest.raises(ConfigurationError) as exc_info:
            WeightConfig({"PRICE_FIXING": 1.0})
        assert exc_info.value.error_code == "CONFIGURATION_ERROR"

    def test_is_read_only(self):
        weights = WeightConfig({PatternType.SINGLE_BIDDER: 2.0})
        with pytest.raises(TypeError):
            weights.weights[PatternType.SINGLE_BIDDER] = 3.0

    def test_from_file(self, tmp_path):
        path = tmp_path / "weights.json"
        path.write_text(json.dumps({"SPEC_TAILORING": 0.8}))
        assert WeightConfig.from_file(path).weight_for(PatternType.SPEC_TAILORING) == 0.8

    def test_from_file_rejects_bad_json(self, tmp_path):
        path = tmp_path / "weights.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            WeightConfig.from_file(path)

    def test_pipeline_rejects_bad_weights(self):
        with pytest.raises(ConfigurationError):
            RiskAnalysisPipeline(weights={"SINGLE_BIDDER": -2})


class TestKnowledgeBase:

    def test_invalid_regex(self):
        with pytest.raises(ConfigurationError):
            KnowledgeBase(restrictive_patterns=(r"(unclosed",))

    def test_pattern_matching_empty_string(self):
        with pytest.raises(ConfigurationError):
            KnowledgeBase(restrictive_patterns=(r"x*",))

    def test_empty_brand_name(self):
        with pytest.raises(ConfigurationError):
            KnowledgeBase(brand_names=("Dell", " "))

    def test_from_mapping_unknown_key(self):
        with pytest.raises(ConfigurationError):
            KnowledgeBase.from_mapping({"brands": ["Dell"]})

    def test_from_mapping_requires_lists(self):
        with pytest.raises(ConfigurationError):
            KnowledgeBase.from_mapping({"brand_names": "Dell"})

    def test_from_file(self, tmp_path):
        path = tmp_path / "kb.json"
        path.write_text(json.dumps({
            "brand_names": ["Acme", "Globex"],
            "exempted_categories": ["Licensed Software"],
        }))
        kb = KnowledgeBase.from_file(path)
        assert kb.brand_names == ("Acme", "Globex")
        assert kb.is_exempt("licensed  software")
        assert len(kb.restrictive_patterns) > 0

    def test_patterns_may_reuse_group_names(self):
        kb = KnowledgeBase(restrictive_patterns=(r"(?P<w>only)", r"(?P<w>solely)"))
        matches = kb.find_restrictive_phrases("Solely for use with only this unit")
        assert [m.phrase for m in matches] == ["Solely", "only"]

    def test_backreferences_keep_their_meaning(self):
        kb = KnowledgeBase(restrictive_patterns=(r"(a)\1", r"(b)\1"))
        matches = kb.find_restrictive_phrases("bb bb bb")
        assert [(m.start, m.end) for m in matches] == [(0, 2), (3, 5), (6, 8)]

    def test_overlapping_matches_counted_once(self):
        kb = KnowledgeBase(restrictive_patterns=(r"\bsole\s+source\b", r"\bsource\b", r"\bsole\b"))
        matches = kb.find_restrictive_phrases("Sole source supply; one source.")
        assert [m.phrase for m in matches] == ["Sole source", "source"]

    def test_multiword_brand_tolerates_spacing(self):
        kb = KnowledgeBase()
        matches = kb.find_brand_references("Panels by Schneider   Electric or GE Healthcare.")
        assert [m.phrase for m in matches] == ["Schneider   Electric", "GE Healthcare"]


class TestPipelineSettings:

    def test_defaults(self):
        settings = PipelineSettings()
        assert settings.record_timeout_seconds == 5.0
        assert settings.min_baseline_sample == 5
        assert settings.history_db is None

    def test_from_env(self):
        settings = PipelineSettings.from_env({
            "ARGUS_RECORD_TIMEOUT_SECONDS": "2.5",
            "ARGUS_BATCH_WORKERS": "8",
            "ARGUS_LOG_LEVEL": "debug",
            "ARGUS_HISTORY_DB": "/data/history.db",
            "ARGUS_DETECTOR_WORKERS": "",
        })
        assert settings.record_timeout_seconds == 2.5
        assert settings.batch_workers == 8
        assert settings.log_level == "DEBUG"
        assert settings.history_db == Path("/data/history.db")
        assert settings.detector_workers == 5

    def test_from_env_rejects_non_numeric(self):
        with pytest.raises(ConfigurationError) as exc_info:
            PipelineSettings.from_env({"ARGUS_BATCH_WORKERS": "many"})
        assert exc_info.value.details["variable"] == "ARGUS_BATCH_WORKERS"

    @pytest.mark.parametrize("field,value", [
        ("record_timeout_seconds", 0),
        ("baseline_timeout_seconds", -1.0),
        ("batch_workers", 0),
        ("min_baseline_sample", -1),
    ])
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ConfigurationError):
            PipelineSettings(**{field: value})


class TestLogging:
    """configure() wires structlog events through the root logger."""

    @pytest.fixture
    def restore_logging(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        structlog.reset_defaults()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_events_carry_methodology_version(self, restore_logging):
        stream = io.StringIO()
        configure("INFO", stream=stream, json_logs=True)
        structlog.get_logger("argus.tests").info("settings_loaded", batch_workers=4)
        event = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert event["event"] == "settings_loaded"
        assert event["batch_workers"] == 4
        assert event["level"] == "info"
        assert event["methodology_version"] == METHODOLOGY_VERSION

    def test_level_filters_events(self, restore_logging):
        stream = io.StringIO()
        configure("WARNING", stream=stream, json_logs=True)
        structlog.get_logger("argus.tests").info("hidden_event")
        assert stream.getvalue() == ""
