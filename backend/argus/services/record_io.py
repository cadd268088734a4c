"""
Reading ProcurementRecord batches from JSON files.

Accepted layouts: a JSON array of objects, a single object, or JSON Lines
(one object per line, blank lines ignored).
"""
from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from ..models.record import ProcurementRecord


class RecordFileError(ValueError):
    """A record file could not be parsed or contains an invalid record."""


def _parse(text: str, path: Path) -> list:
    stripped = text.lstrip()
    if stripped.startswith("["):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RecordFileError(f"{path}: invalid JSON: {exc}") from exc
        return list(data)

    items = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            items.append(json.loads(line))
        except json.JSONDecodeError as exc:
            # A pretty-printed single object spans lines; try the whole file
            if line_no == 1:
                try:
                    return [json.loads(text)]
                except json.JSONDecodeError:
                    pass
            raise RecordFileError(f"{path}:{line_no}: invalid JSON: {exc}") from exc
    return items


def load_records(path: str | Path) -> list[ProcurementRecord]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RecordFileError(f"Cannot read {path}: {exc}") from exc

    records = []
    for index, item in enumerate(_parse(text, path)):
        try:
            records.append(ProcurementRecord.model_validate(item))
        except ValidationError as exc:
            raise RecordFileError(f"{path}: record #{index} is invalid: {exc}") from exc
    return records
