"""
Tests for report assembly and the template table.
"""
import json
from datetime import datetime, timezone

import pytest

from argus.config.constants import DISCLAIMER, METHODOLOGY_VERSION
from argus.explain import TEMPLATE_VERSION, TEMPLATES, ExplainabilityReportBuilder, render
from argus.explain.templates import format_level_score, join_labels
from argus.models import PatternType, RiskLevel
from argus.scoring import RiskScorer

FIXED_TIME = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


class TestTemplates:

    def test_unknown_template_raises(self):
        with pytest.raises(KeyError):
            render("summary.does_not_exist")

    def test_every_template_id_matches_key(self):
        for template_id, template in TEMPLATES.items():
            assert template.template_id == template_id

    def test_join_labels(self):
        assert join_labels([PatternType.SINGLE_BIDDER]) == "single bidder"
        assert join_labels([
            PatternType.SINGLE_BIDDER,
            PatternType.COMPRESSED_DEADLINE,
            PatternType.BUDGET_ANOMALY,
        ]) == "single bidder, compressed bidding deadline and award above estimated budget"

    @pytest.mark.parametrize("score,level,text", [
        (39.999, RiskLevel.LOW, "39.99"),
        (40.0, RiskLevel.MEDIUM, "40.00"),
        (69.999, RiskLevel.MEDIUM, "69.99"),
        (70.0, RiskLevel.MEDIUM, "70.00"),
        (70.001, RiskLevel.HIGH, "70.01"),
        (100.0, RiskLevel.HIGH, "100.00"),
        (0.0, RiskLevel.LOW, "0.00"),
    ])
    def test_level_score_stays_inside_its_band(self, score, level, text):
        assert format_level_score(score, level) == text


class TestReportBuilder:
    """Summary sentences, disclaimer, versions and fragments."""

    def _build(self, record, patterns, weights=None):
        scoring = RiskScorer(weights).score(patterns)
        return ExplainabilityReportBuilder(clock=lambda: FIXED_TIME).build(record, scoring)

    def test_no_patterns_report(self, make_record):
        draft = self._build(make_record(), [])
        analysis = draft.analysis
        assert analysis.procurement_id == "PWD-2025-0001"
        assert analysis.overall_risk_score == 0.0
        assert analysis.risk_level == RiskLevel.LOW
        assert analysis.risk_patterns == []
        assert analysis.summary_text.startswith("No risk indicators were detected for tender PWD-2025-0001.")
        assert "(LOW)" in analysis.summary_text
        assert analysis.disclaimer == DISCLAIMER
        assert analysis.generated_at == FIXED_TIME
        assert analysis.methodology_version == METHODOLOGY_VERSION
        assert analysis.template_version == TEMPLATE_VERSION
        assert analysis.interaction_effects.multiplier == 1.0
        assert analysis.interaction_effects.reason is None

    def test_level_sentence_near_band_edge(self, make_record, make_pattern):
        """A score just under 40 is not shown as 40."""
        draft = self._build(make_record(), [make_pattern(PatternType.BUDGET_ANOMALY, 39.995)])
        assert draft.analysis.risk_level == RiskLevel.LOW
        assert "The overall risk score is 39.99 out of 100 (LOW)." in draft.analysis.summary_text

    def test_one_pattern_headline(self, make_record, make_pattern):
        draft = self._build(make_record(), [make_pattern(PatternType.BUDGET_ANOMALY, 65)])
        assert draft.analysis.summary_text.startswith(
            "One risk indicator was detected for tender PWD-2025-0001: award above estimated budget."
        )
        assert "(MEDIUM)" in draft.analysis.summary_text
        assert "interaction multiplier" not in draft.analysis.summary_text

    def test_multiple_patterns_report(self, make_record, make_pattern):
        patterns = [
            make_pattern(PatternType.SINGLE_BIDDER, 95),
            make_pattern(PatternType.COMPRESSED_DEADLINE, 88),
        ]
        analysis = self._build(make_record(), patterns).analysis
        assert analysis.summary_text.startswith("2 risk indicators were detected")
        assert "interaction multiplier of 1.2075" in analysis.summary_text
        assert "(HIGH)" in analysis.summary_text
        assert [p.pattern_type for p in analysis.risk_patterns] == [
            PatternType.SINGLE_BIDDER,
            PatternType.COMPRESSED_DEADLINE,
        ]
        assert analysis.interaction_effects.template_id == "interaction.deadline_single_bidder"
        assert sum(p.score_contribution for p in analysis.risk_patterns) == pytest.approx(
            analysis.overall_risk_score, abs=1e-6
        )

    def test_pattern_explanations_kept_verbatim(self, make_record, make_pattern):
        pattern = make_pattern(PatternType.SPEC_TAILORING, 80, explanation="Detector sentence.")
        analysis = self._build(make_record(), [pattern]).analysis
        assert analysis.risk_patterns[0].explanation == "Detector sentence."

    def test_fragments_name_their_templates(self, make_record, make_pattern):
        patterns = [
            make_pattern(PatternType.SINGLE_BIDDER, 60),
            make_pattern(PatternType.BUDGET_ANOMALY, 65),
        ]
        draft = self._build(make_record(), patterns)
        by_field = {}
        for fragment in draft.fragments:
            by_field.setdefault(fragment.field, []).append(fragment.template_id)
        assert by_field["risk_patterns[0].explanation"] == ["test.pattern"]
        assert by_field["interaction_effects.reason"] == ["interaction.multiple"]
        assert by_field["summary_text"] == [
            "summary.multiple_patterns",
            "summary.interaction",
            "summary.level.high",
        ]
        assert by_field["disclaimer"] == ["disclaimer"]

    def test_payload_is_json_ready(self, make_record, make_pattern):
        analysis = self._build(make_record(), [make_pattern(PatternType.SINGLE_BIDDER, 95)]).analysis
        payload = analysis.to_payload()
        assert payload["risk_level"] == "HIGH"
        assert payload["risk_patterns"][0]["pattern_type"] == "SINGLE_BIDDER"
        assert payload["generated_at"].startswith("2026-01-15T09:30:00")
        json.dumps(payload)
