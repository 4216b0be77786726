from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from migration_check.exceptions import BaselineDecodeError
from migration_check.runtime.json_io import dump_json_pretty


def load_baseline(path: Path) -> dict[str, str]:
    """Read a type-name -> digest baseline; a missing file is an empty baseline."""
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeError, json.JSONDecodeError) as exc:
        raise BaselineDecodeError(path, str(exc)) from exc
    if not isinstance(payload, Mapping):
        raise BaselineDecodeError(path, "baseline payload must be a JSON object")
    baseline: dict[str, str] = {}
    for key, value in payload.items():
        if not isinstance(value, str):
            raise BaselineDecodeError(
                path, f"digest for {key!r} must be a string, got {type(value).__name__}"
            )
        baseline[str(key)] = value
    return baseline


def write_baseline(path: Path, fingerprints: Mapping[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json_pretty(dict(fingerprints)), encoding="utf-8")
