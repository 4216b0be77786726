from __future__ import annotations

from pathlib import Path
from typing import Iterable

from migration_check.analysis.drift import DriftViolation
from migration_check.analysis.rpc_encoding import EncodingViolation
from migration_check.ingest.adapter_contract import ParseFailureWitness

FAILED_LINE = "migration check failed ..."
PASSED_LINE = "migration check passed ..."


def render_encoding_violations(
    violations: Iterable[EncodingViolation], *, attribute: str = "serde_as"
) -> list[str]:
    lines = [
        f"{violation.path}: {violation.declaration}.{violation.field} "
        f"must be annotated with #[{attribute}(as = \"{violation.expected}\")]"
        for violation in violations
    ]
    if lines:
        lines.append("rpc encoding check failed ...")
    return lines


def render_drift_violation(violation: DriftViolation) -> list[str]:
    lines = [
        f"Type fingerprint changed: {violation.type_name} "
        f"{violation.old_digest} -> {violation.new_digest}",
        "Type dependency chain:",
    ]
    lines.extend(f"  {chain}" for chain in violation.chains)
    if violation.chains_truncated:
        lines.append("  ... (more chains omitted)")
    if violation.cycles:
        lines.append(f"  ({violation.cycles} cyclic path(s) cut)")
    return lines


def render_remediation(source_dir: Path, output: Path) -> list[str]:
    return [
        FAILED_LINE,
        f"Please use `migration-check -d {source_dir} -o {output} -u` to update "
        "the fingerprint, and remember to write a migration",
    ]


def render_removed_types(names: Iterable[str], *, failing: bool) -> list[str]:
    label = "error" if failing else "warning"
    return [
        f"{label}: type {name} is in the baseline but no longer reachable"
        for name in names
    ]


def render_parse_failures(failures: Iterable[ParseFailureWitness]) -> list[str]:
    return [
        f"warning: skipped {failure.path} ({failure.stage}: {failure.error})"
        for failure in failures
    ]
