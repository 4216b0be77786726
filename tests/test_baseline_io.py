from __future__ import annotations

from pathlib import Path

import pytest

from migration_check.analysis.baseline_io import load_baseline, write_baseline
from migration_check.exceptions import BaselineDecodeError, MigrationCheckError
from migration_check.runtime.json_io import canonicalize_json, dump_json_pretty


def test_missing_baseline_is_empty(tmp_path: Path) -> None:
    assert load_baseline(tmp_path / "absent.json") == {}


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        "[1, 2]",
        '{"Account": 3}',
    ],
)
def test_malformed_baseline_is_fatal(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "digest.json"
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(BaselineDecodeError) as excinfo:
        load_baseline(path)
    assert isinstance(excinfo.value, MigrationCheckError)
    assert excinfo.value.path == path


def test_non_utf8_baseline_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "digest.json"
    path.write_bytes(b"\xff\xfe{")
    with pytest.raises(BaselineDecodeError):
        load_baseline(path)


def test_write_baseline_is_sorted_and_pretty(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "digest.json"
    write_baseline(path, {"Ledger": "l1", "Account": "a1"})
    assert path.read_text(encoding="utf-8") == (
        '{\n  "Account": "a1",\n  "Ledger": "l1"\n}\n'
    )
    assert load_baseline(path) == {"Account": "a1", "Ledger": "l1"}


def test_canonicalize_json_sorts_nested_mappings() -> None:
    assert canonicalize_json({"b": [{"z": 1, "a": 2}], "a": (1, 2)}) == {
        "a": [1, 2],
        "b": [{"a": 2, "z": 1}],
    }
    assert dump_json_pretty({}) == "{}\n"
