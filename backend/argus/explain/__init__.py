"""Templated explanations, report assembly and language safety."""
from .language_safety import LanguageSafetyValidator
from .report_builder import DraftReport, ExplainabilityReportBuilder, TextFragment
from .templates import PATTERN_LABELS, TEMPLATE_VERSION, TEMPLATES, RenderedText, Template, render

__all__ = [
    "DraftReport",
    "ExplainabilityReportBuilder",
    "LanguageSafetyValidator",
    "PATTERN_LABELS",
    "RenderedText",
    "TEMPLATES",
    "TEMPLATE_VERSION",
    "Template",
    "TextFragment",
    "render",
]
