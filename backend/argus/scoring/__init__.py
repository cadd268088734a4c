"""Weighted multi-factor scoring with interaction effects."""
from .scorer import RiskScorer, ScoredPattern, ScoringResult, interaction_multiplier

__all__ = ["RiskScorer", "ScoredPattern", "ScoringResult", "interaction_multiplier"]
