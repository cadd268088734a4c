"""
Runtime settings for the pipeline, configurable via environment variables.

Defaults suit interactive analysis of single records; batch hosts usually
raise ARGUS_BATCH_WORKERS and point ARGUS_HISTORY_DB at a history snapshot.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional

from ..common.errors import ConfigurationError

ENV_PREFIX = "ARGUS_"


@dataclass(frozen=True)
class PipelineSettings:
    record_timeout_seconds: float = 5.0
    baseline_timeout_seconds: float = 1.0
    detector_workers: int = 5
    batch_workers: int = 4
    min_baseline_sample: int = 5
    default_expected_days: float = 21.0
    baseline_window_years: int = 2
    log_level: str = "INFO"
    history_db: Optional[Path] = None

    def __post_init__(self):
        for name in ("record_timeout_seconds", "baseline_timeout_seconds", "default_expected_days"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive", details={name: getattr(self, name)})
        for name in ("detector_workers", "batch_workers"):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be at least 1", details={name: getattr(self, name)})
        for name in ("min_baseline_sample", "baseline_window_years"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} cannot be negative", details={name: getattr(self, name)})

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PipelineSettings":
        """Build settings from ARGUS_* variables, e.g. ARGUS_RECORD_TIMEOUT_SECONDS=10."""
        env = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            raw = raw.strip()
            try:
                if f.name == "history_db":
                    values[f.name] = Path(raw)
                elif f.name == "log_level":
                    values[f.name] = raw.upper()
                elif isinstance(f.default, int):
                    values[f.name] = int(raw)
                else:
                    values[f.name] = float(raw)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}",
                    details={"variable": ENV_PREFIX + f.name.upper(), "value": raw},
                ) from None
        return cls(**values)
