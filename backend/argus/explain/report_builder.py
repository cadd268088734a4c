"""
Assembles the explainability report for one record.

The builder is deterministic given (record, scoring result, clock): every
sentence in the summary comes from the template table, and per-pattern
explanations are taken verbatim from the detector that produced them.

The builder returns a DraftReport: the finished RiskAnalysis plus the list of
text fragments it was assembled from, each tagged with its field and
template id so the language-safety stage can attribute a violation.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Optional

from ..config.constants import DISCLAIMER, METHODOLOGY_VERSION
from ..models.analysis import InteractionEffects, PatternReport, RiskAnalysis
from ..models.record import ProcurementRecord
from .templates import TEMPLATE_VERSION, RenderedText, format_level_score, format_multiplier, join_labels, render

if TYPE_CHECKING:
    from ..scoring.scorer import ScoringResult

DISCLAIMER_TEMPLATE_ID = "disclaimer"


@dataclass(frozen=True)
class TextFragment:
    field: str
    template_id: str
    text: str


@dataclass(frozen=True)
class DraftReport:
    analysis: RiskAnalysis
    fragments: tuple[TextFragment, ...]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExplainabilityReportBuilder:
    """Builds RiskAnalysis reports from scored patterns."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _utc_now

    def summary_sentences(self, record: ProcurementRecord, scoring: ScoringResult) -> list[RenderedText]:
        pattern_types = [sp.pattern.pattern_type for sp in scoring.scored_patterns]
        count = len(pattern_types)

        if count == 0:
            sentences = [render("summary.no_patterns", tender_id=record.tender_id)]
        elif count == 1:
            sentences = [
                render("summary.one_pattern", tender_id=record.tender_id, pattern_names=join_labels(pattern_types))
            ]
        else:
            sentences = [
                render(
                    "summary.multiple_patterns",
                    pattern_count=count,
                    tender_id=record.tender_id,
                    pattern_names=join_labels(pattern_types),
                )
            ]

        if scoring.multiplier > 1.0:
            sentences.append(render("summary.interaction", multiplier=format_multiplier(scoring.multiplier)))

        sentences.append(
            render(
                f"summary.level.{scoring.risk_level.value.lower()}",
                score=format_level_score(scoring.combined_score, scoring.risk_level),
            )
        )
        return sentences

    def build(self, record: ProcurementRecord, scoring: ScoringResult) -> DraftReport:
        fragments: list[TextFragment] = []

        pattern_reports = []
        for index, scored in enumerate(scoring.scored_patterns):
            pattern = scored.pattern
            pattern_reports.append(
                PatternReport(
                    pattern_type=pattern.pattern_type,
                    sub_type=pattern.sub_type,
                    score=pattern.score,
                    weight=scored.weight,
                    score_contribution=scored.contribution,
                    evidence=pattern.evidence,
                    explanation=pattern.explanation,
                    template_id=pattern.template_id,
                )
            )
            fragments.append(
                TextFragment(f"risk_patterns[{index}].explanation", pattern.template_id, pattern.explanation)
            )

        if scoring.interaction is not None:
            interaction = InteractionEffects(
                multiplier=scoring.multiplier,
                reason=scoring.interaction.text,
                template_id=scoring.interaction.template_id,
            )
            fragments.append(
                TextFragment("interaction_effects.reason", scoring.interaction.template_id, scoring.interaction.text)
            )
        else:
            interaction = InteractionEffects(multiplier=scoring.multiplier)

        sentences = self.summary_sentences(record, scoring)
        fragments.extend(TextFragment("summary_text", s.template_id, s.text) for s in sentences)
        fragments.append(TextFragment("disclaimer", DISCLAIMER_TEMPLATE_ID, DISCLAIMER))

        analysis = RiskAnalysis(
            procurement_id=record.tender_id,
            overall_risk_score=scoring.combined_score,
            risk_level=scoring.risk_level,
            risk_patterns=pattern_reports,
            interaction_effects=interaction,
            summary_text=" ".join(s.text for s in sentences),
            disclaimer=DISCLAIMER,
            methodology_version=METHODOLOGY_VERSION,
            template_version=TEMPLATE_VERSION,
            generated_at=self._clock(),
        )
        return DraftReport(analysis=analysis, fragments=tuple(fragments))
