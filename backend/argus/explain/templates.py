"""
Closed, versioned table of every sentence ARGUS can emit.

Detector explanations, interaction reasons and report summaries are all
rendered from here with str.format parameters; nothing is free-generated.
Changing any text means bumping TEMPLATE_VERSION.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from types import MappingProxyType
from typing import Iterable, Mapping

from ..models.analysis import PatternType, RiskLevel

TEMPLATE_VERSION = "2026.10.1"


@dataclass(frozen=True)
class Template:
    template_id: str
    text: str


@dataclass(frozen=True)
class RenderedText:
    """Rendered sentence(s) with the template that produced them."""
    template_id: str
    text: str


def _table(*templates: Template) -> Mapping[str, Template]:
    return MappingProxyType({t.template_id: t for t in templates})


TEMPLATES: Mapping[str, Template] = _table(
    # --- Detector explanations ---
    Template(
        "detector.single_bidder.baseline",
        "A single bid was received for this tender (estimated value {tender_value}). "
        "Comparable tenders in this category received {expected_bidders} bids on average.",
    ),
    Template(
        "detector.single_bidder.no_baseline",
        "A single bid was received for this tender (estimated value {tender_value}). "
        "Historical bidder counts for this category were not available for comparison.",
    ),
    Template(
        "detector.vendor_repetition",
        "Vendor {vendor_id} received {contract_count} contracts from department {department_id} "
        "within {window_days} days, with a combined value of {total_value}. Repeated awards to "
        "one vendor can indicate limited competition and may merit review.",
    ),
    Template(
        "detector.compressed_deadline.baseline",
        "The bidding window was {actual_days} days, compared with a typical {expected_days} days "
        "for this category ({deviation_pct} shorter). Short bidding windows can reduce the "
        "number of potential bidders.",
    ),
    Template(
        "detector.compressed_deadline.default",
        "The bidding window was {actual_days} days, compared with a reference window of "
        "{expected_days} days ({deviation_pct} shorter); category history was not available. "
        "Short bidding windows can reduce the number of potential bidders.",
    ),
    Template(
        "detector.compressed_deadline.below_minimum",
        "The bidding window was {actual_days} days, below the minimum of {minimum_days} days "
        "applied to tenders of this value. Short bidding windows can reduce the number of "
        "potential bidders.",
    ),
    Template(
        "detector.budget_anomaly.high_confidence",
        "The awarded amount of {awarded_amount} exceeds the estimated budget of {estimated_budget} "
        "by {overrun_pct} and lies {z_score} standard deviations above the historical mean for "
        "this category and region.",
    ),
    Template(
        "detector.budget_anomaly.within_range",
        "The awarded amount of {awarded_amount} exceeds the estimated budget of {estimated_budget} "
        "by {overrun_pct}. It remains within two standard deviations of the historical mean for "
        "this category and region.",
    ),
    Template(
        "detector.budget_anomaly.threshold_only",
        "The awarded amount of {awarded_amount} exceeds the estimated budget of {estimated_budget} "
        "by {overrun_pct}. Historical data for this category and region was insufficient for a "
        "statistical comparison.",
    ),
    Template(
        "detector.spec_tailoring",
        "The specification contains {brand_count} brand reference(s) and {restrictive_count} "
        "restrictive phrase(s). Such wording can narrow the pool of eligible suppliers; the "
        "presence of an equivalence clause may be worth checking.",
    ),
    # --- Interaction effects ---
    Template(
        "interaction.multiple",
        "{pattern_count} indicators co-occur, applying an interaction multiplier of {multiplier}.",
    ),
    Template(
        "interaction.deadline_single_bidder",
        "{pattern_count} indicators co-occur, including a compressed deadline together with a "
        "single bidder, applying an interaction multiplier of {multiplier}.",
    ),
    # --- Report summary ---
    Template(
        "summary.no_patterns",
        "No risk indicators were detected for tender {tender_id}.",
    ),
    Template(
        "summary.one_pattern",
        "One risk indicator was detected for tender {tender_id}: {pattern_names}.",
    ),
    Template(
        "summary.multiple_patterns",
        "{pattern_count} risk indicators were detected for tender {tender_id}: {pattern_names}.",
    ),
    Template(
        "summary.interaction",
        "Because these indicators co-occur, the combined score includes an interaction "
        "multiplier of {multiplier}.",
    ),
    Template(
        "summary.level.low",
        "The overall risk score is {score} out of 100 (LOW). The record shows limited deviation "
        "from the reference thresholds.",
    ),
    Template(
        "summary.level.medium",
        "The overall risk score is {score} out of 100 (MEDIUM). A closer review of the tender "
        "documents is suggested.",
    ),
    Template(
        "summary.level.high",
        "The overall risk score is {score} out of 100 (HIGH). Priority review of the tender "
        "documents and award process is suggested.",
    ),
)

PATTERN_LABELS: Mapping[PatternType, str] = MappingProxyType({
    PatternType.SINGLE_BIDDER: "single bidder",
    PatternType.VENDOR_REPETITION: "repeated awards to one vendor",
    PatternType.COMPRESSED_DEADLINE: "compressed bidding deadline",
    PatternType.BUDGET_ANOMALY: "award above estimated budget",
    PatternType.SPEC_TAILORING: "restrictive specification wording",
})


def render(template_id: str, **params) -> RenderedText:
    """Render a template from the closed table. Unknown ids raise KeyError."""
    template = TEMPLATES[template_id]
    return RenderedText(template_id=template_id, text=template.text.format(**params))


def format_amount(value: float) -> str:
    return f"{value:,.0f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_level_score(value: float, level: RiskLevel) -> str:
    """Two decimals, truncated away from the neighbouring band.

    39.999 (LOW) shows as 39.99 and 70.001 (HIGH) as 70.01, so the number
    never reads as a different level than the label beside it.
    """
    rounding = ROUND_CEILING if level == RiskLevel.HIGH else ROUND_FLOOR
    return str(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=rounding))


def format_multiplier(value: float) -> str:
    return f"{value:.4f}"


def join_labels(pattern_types: Iterable[PatternType]) -> str:
    """'a', 'a and b', 'a, b and c'."""
    labels = [PATTERN_LABELS[p] for p in pattern_types]
    if len(labels) <= 1:
        return "".join(labels)
    return f"{', '.join(labels[:-1])} and {labels[-1]}"
