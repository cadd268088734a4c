"""
Specification tailoring: brand names and restrictive wording in the technical specification.
"""
from __future__ import annotations

from typing import Optional

from ..config.constants import (
    SPEC_BASE_SCORE,
    SPEC_INDICATOR_CAP,
    SPEC_MIN_BRANDS,
    SPEC_MIN_RESTRICTIVE,
    SPEC_PER_INDICATOR,
)
from ..config.knowledge_base import KnowledgeBase
from ..explain.templates import render
from ..models.analysis import PatternType, RiskPattern, SpecTailoringSubType
from ..models.record import ProcurementRecord
from ..services.baseline_service import HistoricalBaselineProvider
from .base import Detector


class SpecTailoringDetector(Detector):
    pattern_type = PatternType.SPEC_TAILORING

    def __init__(self, knowledge_base: Optional[KnowledgeBase] = None):
        self.knowledge_base = knowledge_base or KnowledgeBase.default()

    def is_applicable(self, record: ProcurementRecord) -> bool:
        return bool(record.specification_text and record.specification_text.strip()) and not (
            self.knowledge_base.is_exempt(record.category)
        )

    def detect(
        self,
        record: ProcurementRecord,
        baselines: Optional[HistoricalBaselineProvider],
    ) -> Optional[RiskPattern]:
        if not self.is_applicable(record):
            return None

        text = record.specification_text
        brands = self.knowledge_base.find_brand_references(text)
        restrictive = self.knowledge_base.find_restrictive_phrases(text)

        brand_hit = len(brands) >= SPEC_MIN_BRANDS
        restrictive_hit = len(restrictive) >= SPEC_MIN_RESTRICTIVE
        if not (brand_hit or restrictive_hit):
            return None

        if brand_hit and restrictive_hit:
            sub_type = SpecTailoringSubType.MIXED
        elif brand_hit:
            sub_type = SpecTailoringSubType.BRAND_REFERENCE
        else:
            sub_type = SpecTailoringSubType.RESTRICTIVE_LANGUAGE

        indicator_count = len(brands) + len(restrictive)
        score = SPEC_BASE_SCORE + min(SPEC_INDICATOR_CAP, indicator_count * SPEC_PER_INDICATOR)

        matches = sorted(brands + restrictive, key=lambda m: (m.start, m.end, m.indicator_type.value))
        evidence = {
            "brand_count": len(brands),
            "restrictive_count": len(restrictive),
            "indicator_count": indicator_count,
            "matches": [m.as_evidence() for m in matches],
        }
        rendered = render(
            "detector.spec_tailoring",
            brand_count=len(brands),
            restrictive_count=len(restrictive),
        )
        return self._pattern(score, evidence, rendered, sub_type=sub_type)
