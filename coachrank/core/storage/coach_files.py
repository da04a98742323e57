"""JSON file input and output for coach records and rankings.

Coach records arrive as a JSON list, or as an object with a ``coaches``
list. Ranked output is written back as JSON or CSV.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from ..models.coach import CoachRecord


class CoachFileError(ValueError):
    """Raised when a coach file cannot be read or does not validate."""


def load_coaches(path: str | Path) -> list[CoachRecord]:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise CoachFileError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CoachFileError(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("coaches")
    if not isinstance(data, list):
        raise CoachFileError(f"{path} must hold a list of coaches or a 'coaches' list")

    try:
        return [CoachRecord.model_validate(item) for item in data]
    except ValidationError as e:
        raise CoachFileError(f"invalid coach record in {path}: {e}") from e


def dump_json(path: str | Path, data: dict[str, Any]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")


def dump_csv(path: str | Path, header: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
