"""
Combined risk score with interaction effects.

    weighted_sum = sum(score_i * weight_i)
    multiplier   = 1.0 + 0.05 * (n - 1)        (x 1.15 when a compressed
                                                deadline co-occurs with a
                                                single bidder)
    combined     = min(100, weighted_sum * multiplier)

weight_i comes from the producing detector's weight(), which reads WeightConfig.

Each pattern's contribution is its weighted score scaled by
combined / weighted_sum, so contributions always sum to the combined score
(clamping included).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..config.constants import (
    DEADLINE_SINGLE_BIDDER_FACTOR,
    INTERACTION_STEP,
    MAX_SCORE,
    get_risk_level,
)
from ..config.weights import WeightConfig
from ..detectors.base import Detector
from ..detectors.registry import build_detectors
from ..explain.templates import RenderedText, format_multiplier, render
from ..models.analysis import PatternType, RiskLevel, RiskPattern


@dataclass(frozen=True)
class ScoredPattern:
    pattern: RiskPattern
    weight: float
    weighted_score: float
    contribution: float


@dataclass(frozen=True)
class ScoringResult:
    combined_score: float
    risk_level: RiskLevel
    weighted_sum: float
    multiplier: float
    interaction: Optional[RenderedText]
    scored_patterns: tuple[ScoredPattern, ...]


def interaction_multiplier(pattern_types: Sequence[PatternType]) -> tuple[float, Optional[str]]:
    """Return (multiplier, template_id of the reason) for the co-occurring patterns."""
    count = len(pattern_types)
    if count <= 1:
        return 1.0, None
    multiplier = 1.0 + INTERACTION_STEP * (count - 1)
    present = set(pattern_types)
    if PatternType.COMPRESSED_DEADLINE in present and PatternType.SINGLE_BIDDER in present:
        return multiplier * DEADLINE_SINGLE_BIDDER_FACTOR, "interaction.deadline_single_bidder"
    return multiplier, "interaction.multiple"


class RiskScorer:
    """Combines an ordered list of patterns into one bounded score."""

    def __init__(
        self,
        weights: Optional[WeightConfig] = None,
        detectors: Optional[Iterable[Detector]] = None,
    ):
        self.weights = weights or WeightConfig()
        self.detectors = {d.pattern_type: d for d in (detectors or build_detectors())}

    def weight_for(self, pattern: RiskPattern) -> float:
        """Weight of the detector that produced the pattern."""
        return self.detectors[pattern.pattern_type].weight(self.weights)

    def score(self, patterns: Sequence[RiskPattern]) -> ScoringResult:
        if not patterns:
            return ScoringResult(
                combined_score=0.0,
                risk_level=get_risk_level(0.0),
                weighted_sum=0.0,
                multiplier=1.0,
                interaction=None,
                scored_patterns=(),
            )

        weighted = []
        for p in patterns:
            weight = self.weight_for(p)
            weighted.append((p, weight, p.score * weight))
        weighted_sum = sum(w for _, _, w in weighted)
        multiplier, template_id = interaction_multiplier([p.pattern_type for p in patterns])
        combined = min(MAX_SCORE, weighted_sum * multiplier)

        scale = combined / weighted_sum if weighted_sum > 0 else 0.0
        scored = tuple(
            ScoredPattern(pattern=p, weight=weight, weighted_score=ws, contribution=ws * scale)
            for p, weight, ws in weighted
        )

        interaction = None
        if template_id is not None:
            interaction = render(
                template_id,
                pattern_count=len(patterns),
                multiplier=format_multiplier(multiplier),
            )

        return ScoringResult(
            combined_score=combined,
            risk_level=get_risk_level(combined),
            weighted_sum=weighted_sum,
            multiplier=multiplier,
            interaction=interaction,
            scored_patterns=scored,
        )
