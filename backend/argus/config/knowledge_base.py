"""
Static knowledge used by specification-text pattern detection.

Brand names are matched as whole words, case-insensitively. Restrictive
patterns are regular expressions compiled case-insensitively; each must
compile and must not match the empty string. Each pattern is scanned on its
own and the matches are merged without overlaps. Categories on the exemption
list are not scanned at all (e.g. OEM spare parts legitimately name a make).
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..common.errors import ConfigurationError
from ..models.analysis import IndicatorType

DEFAULT_BRAND_NAMES = (
    "Dell", "HP", "Lenovo", "Cisco", "Siemens", "Philips", "GE Healthcare",
    "Intel", "Microsoft", "Oracle", "Samsung", "Bosch", "Honeywell",
    "Kirloskar", "Godrej", "Schneider Electric", "ABB", "Hikvision",
    "Canon", "Epson", "Caterpillar",
)

DEFAULT_RESTRICTIVE_PATTERNS = (
    r"\bonly\b",
    r"\bmust\s+be\b",
    r"\bexclusively\b",
    r"\bproprietary\b",
    r"\bsole\s+source\b",
    r"\bno\s+equivalent\b",
    r"\bspecific\s+make\b",
)

DEFAULT_EXEMPTED_CATEGORIES = (
    "oem spare parts",
    "software license renewal",
    "proprietary article",
)


@dataclass(frozen=True)
class PhraseMatch:
    """A matched phrase with character offsets into the original text."""
    phrase: str
    start: int
    end: int
    indicator_type: IndicatorType

    def as_evidence(self) -> dict:
        return {
            "phrase": self.phrase,
            "start": self.start,
            "end": self.end,
            "indicator_type": self.indicator_type.value,
        }


def _normalize_category(category: Optional[str]) -> str:
    return " ".join((category or "").split()).lower()


def _compile_pattern(source: Any) -> re.Pattern:
    if not isinstance(source, str) or not source.strip():
        raise ConfigurationError(
            f"Restrictive pattern must be a non-empty string, got {source!r}",
        )
    try:
        compiled = re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise ConfigurationError(
            f"Invalid restrictive pattern {source!r}: {exc}",
            details={"pattern": source},
        ) from exc
    if compiled.fullmatch("") is not None:
        raise ConfigurationError(
            f"Restrictive pattern {source!r} matches the empty string",
            details={"pattern": source},
        )
    return compiled


@dataclass(frozen=True)
class KnowledgeBase:
    """Brand names, restrictive-language patterns and category exemptions."""

    brand_names: tuple[str, ...] = DEFAULT_BRAND_NAMES
    restrictive_patterns: tuple[str, ...] = DEFAULT_RESTRICTIVE_PATTERNS
    exempted_categories: frozenset[str] = frozenset(DEFAULT_EXEMPTED_CATEGORIES)

    _brand_regex: Optional[re.Pattern] = field(default=None, init=False, repr=False, compare=False)
    _restrictive_regexes: tuple[re.Pattern, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self):
        brands = []
        for name in self.brand_names:
            if not isinstance(name, str) or not name.strip():
                raise ConfigurationError(f"Brand name must be a non-empty string, got {name!r}")
            brands.append(" ".join(name.split()))
        compiled = [_compile_pattern(p) for p in self.restrictive_patterns]

        object.__setattr__(self, "brand_names", tuple(brands))
        object.__setattr__(self, "restrictive_patterns", tuple(p.pattern for p in compiled))
        object.__setattr__(
            self,
            "exempted_categories",
            frozenset(_normalize_category(c) for c in self.exempted_categories),
        )

        # Longest brand first so "GE Healthcare" wins over a shorter overlapping name
        if brands:
            ordered = sorted(set(brands), key=lambda b: (-len(b), b.lower()))
            alternation = "|".join(re.escape(b).replace(r"\ ", r"\s+") for b in ordered)
            object.__setattr__(
                self, "_brand_regex", re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)
            )
        # Kept separate: group names and backreference numbers are per pattern
        object.__setattr__(self, "_restrictive_regexes", tuple(compiled))

    def is_exempt(self, category: Optional[str]) -> bool:
        return _normalize_category(category) in self.exempted_categories

    def find_brand_references(self, text: str) -> list[PhraseMatch]:
        return self._scan(self._brand_regex, text, IndicatorType.BRAND_REFERENCE)

    def find_restrictive_phrases(self, text: str) -> list[PhraseMatch]:
        """Matches of all patterns, by position; a match overlapping an earlier one is dropped.

        At equal start positions the pattern listed first wins.
        """
        candidates = []
        for index, regex in enumerate(self._restrictive_regexes):
            for match in self._scan(regex, text, IndicatorType.RESTRICTIVE_LANGUAGE):
                candidates.append((match.start, index, match))

        merged: list[PhraseMatch] = []
        for _, _, match in sorted(candidates, key=lambda c: (c[0], c[1])):
            if merged and match.start < merged[-1].end:
                continue
            merged.append(match)
        return merged

    @staticmethod
    def _scan(regex: Optional[re.Pattern], text: str, indicator_type: IndicatorType) -> list[PhraseMatch]:
        if regex is None or not text:
            return []
        return [
            PhraseMatch(m.group(0), m.start(), m.end(), indicator_type)
            for m in regex.finditer(text)
            if m.end() > m.start()
        ]

    @classmethod
    def default(cls) -> "KnowledgeBase":
        return cls()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "KnowledgeBase":
        if not isinstance(data, Mapping):
            raise ConfigurationError("Knowledge base must be a JSON object")
        unknown = set(data) - {"brand_names", "restrictive_patterns", "exempted_categories"}
        if unknown:
            raise ConfigurationError(
                f"Unknown knowledge base keys: {sorted(unknown)}",
                details={"keys": sorted(unknown)},
            )
        return cls(
            brand_names=tuple(_as_list(data, "brand_names", DEFAULT_BRAND_NAMES)),
            restrictive_patterns=tuple(_as_list(data, "restrictive_patterns", DEFAULT_RESTRICTIVE_PATTERNS)),
            exempted_categories=frozenset(_as_list(data, "exempted_categories", DEFAULT_EXEMPTED_CATEGORIES)),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "KnowledgeBase":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot read knowledge base {path}: {exc}",
                details={"path": str(path)},
            ) from exc
        return cls.from_mapping(data)


def _as_list(data: Mapping[str, Any], key: str, default: Iterable[str]) -> list:
    value = data.get(key, list(default))
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"Knowledge base field {key!r} must be a list")
    for item in value:
        if not isinstance(item, str):
            raise ConfigurationError(f"Knowledge base field {key!r} must contain strings, got {item!r}")
    return list(value)
