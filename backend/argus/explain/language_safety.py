"""
Fail-closed deny-list check over every emitted text field.

Matching is a case-insensitive substring test. A match is never sanitized:
the validator raises LanguageSafetyViolation naming the phrase, the field and
the template that produced the text, and the record's analysis is aborted.
"""
from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Optional

import structlog

from ..common.errors import ConfigurationError, LanguageSafetyViolation
from ..config.constants import DEFAULT_DENY_LIST
from .report_builder import DraftReport, TextFragment
from .templates import TEMPLATES, Template

logger = structlog.get_logger("argus.explain.language_safety")


def _evidence_strings(value: Any, path: str) -> Iterator[tuple[str, str]]:
    """Yield (path, text) for every string nested inside an evidence value."""
    if isinstance(value, str):
        yield path, value
    elif isinstance(value, Mapping):
        for key, item in value.items():
            yield from _evidence_strings(item, f"{path}.{key}")
    elif isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            yield from _evidence_strings(item, f"{path}[{i}]")


class LanguageSafetyValidator:
    """Rejects any text containing a deny-listed phrase."""

    def __init__(self, deny_list: Optional[Iterable[str]] = None):
        phrases = list(DEFAULT_DENY_LIST if deny_list is None else deny_list)
        if not phrases:
            raise ConfigurationError("Language safety deny-list cannot be empty")
        normalized = []
        for phrase in phrases:
            if not isinstance(phrase, str) or not phrase.strip():
                raise ConfigurationError(
                    f"Deny-list entries must be non-empty strings, got {phrase!r}",
                )
            normalized.append(phrase.strip())
        self.deny_list: tuple[str, ...] = tuple(normalized)
        self._lowered = tuple(p.lower() for p in normalized)

    def find_violation(self, text: str) -> Optional[str]:
        """Return the first deny-listed phrase found in text, or None."""
        lowered = text.lower()
        for phrase, needle in zip(self.deny_list, self._lowered):
            if needle in lowered:
                return phrase
        return None

    def check(self, text: str, template_id: str, field: str) -> None:
        phrase = self.find_violation(text)
        if phrase is not None:
            logger.error(
                "language_safety_violation",
                phrase=phrase,
                template_id=template_id,
                field=field,
            )
            raise LanguageSafetyViolation(phrase=phrase, template_id=template_id, field=field)

    def validate_report(self, draft: DraftReport) -> None:
        for fragment in self._fragments(draft):
            self.check(fragment.text, fragment.template_id, fragment.field)

    def audit_templates(self, templates: Optional[Mapping[str, Template]] = None) -> None:
        """Check the raw template table, so a bad template fails before any record runs."""
        for template_id, template in (TEMPLATES if templates is None else templates).items():
            phrase = self.find_violation(template.text)
            if phrase is not None:
                raise ConfigurationError(
                    f"Template {template_id} contains denied phrase {phrase!r}",
                    details={"template_id": template_id, "phrase": phrase},
                )

    @staticmethod
    def _fragments(draft: DraftReport) -> Iterator[TextFragment]:
        yield from draft.fragments
        for index, pattern in enumerate(draft.analysis.risk_patterns):
            for path, text in _evidence_strings(pattern.evidence, f"risk_patterns[{index}].evidence"):
                yield TextFragment(path, pattern.template_id, text)
