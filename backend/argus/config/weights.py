"""
Per-pattern weight multipliers.

Loaded once at pipeline construction; the pipeline never changes them.
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from ..common.errors import ConfigurationError
from ..models.analysis import PatternType

DEFAULT_WEIGHT = 1.0


def _coerce_pattern_type(key: Any) -> PatternType:
    if isinstance(key, PatternType):
        return key
    try:
        return PatternType(str(key).strip().upper())
    except ValueError:
        raise ConfigurationError(
            f"Unknown pattern type in weight config: {key!r}",
            details={"key": str(key), "allowed": [p.value for p in PatternType]},
        ) from None


def _coerce_weight(pattern_type: PatternType, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(
            f"Weight for {pattern_type.value} must be a number, got {value!r}",
            details={"pattern_type": pattern_type.value},
        )
    weight = float(value)
    if not math.isfinite(weight) or weight <= 0:
        raise ConfigurationError(
            f"Weight for {pattern_type.value} must be a positive finite number, got {value!r}",
            details={"pattern_type": pattern_type.value, "weight": weight},
        )
    return weight


@dataclass(frozen=True)
class WeightConfig:
    """Mapping from pattern type to a positive weight; unspecified types weigh 1.0."""

    weights: Mapping[PatternType, float] = field(default_factory=dict)

    def __post_init__(self):
        validated = {}
        for key, value in dict(self.weights).items():
            pattern_type = _coerce_pattern_type(key)
            validated[pattern_type] = _coerce_weight(pattern_type, value)
        object.__setattr__(self, "weights", MappingProxyType(validated))

    def weight_for(self, pattern_type: PatternType) -> float:
        return self.weights.get(pattern_type, DEFAULT_WEIGHT)

    def as_dict(self) -> dict[str, float]:
        """Full weight table including defaults, keyed by pattern name."""
        return {p.value: self.weight_for(p) for p in PatternType}

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Any]) -> "WeightConfig":
        if not isinstance(mapping, Mapping):
            raise ConfigurationError("Weight config must be a mapping of pattern type to weight")
        return cls(weights=dict(mapping))

    @classmethod
    def from_file(cls, path: str | Path) -> "WeightConfig":
        """Load weights from a JSON object file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot read weight config {path}: {exc}",
                details={"path": str(path)},
            ) from exc
        return cls.from_mapping(data)
