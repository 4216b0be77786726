"""Baseline comparison for the monitored closure."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from migration_check.analysis.closure import (
    ChainSearch,
    chain_starts,
    find_type_chains,
    reachable_fingerprints,
)
from migration_check.analysis.schema_index import SchemaIndex
from migration_check.config import CheckConfig
from migration_check.exceptions import DuplicateDeclarationError
from migration_check.order_contract import sort_once


@dataclass(frozen=True)
class DriftViolation:
    type_name: str
    old_digest: str
    new_digest: str
    chains: tuple[str, ...] = ()
    cycles: int = 0
    chains_truncated: bool = False


@dataclass
class DriftOutcome:
    closure: dict[str, str]
    violations: list[DriftViolation] = field(default_factory=list)
    added_types: list[str] = field(default_factory=list)
    removed_types: list[str] = field(default_factory=list)
    compared: bool = True

    @property
    def drifted(self) -> bool:
        return bool(self.violations)


def diff_baseline(
    old: Mapping[str, str], new: Mapping[str, str]
) -> list[tuple[str, str, str]]:
    """(name, old, new) for every baseline entry still present with a new digest.

    Entries missing from `new` are not drift; see `removed_names`.
    """
    changed: list[tuple[str, str, str]] = []
    for name in sort_once(old, source="drift.diff_baseline.old"):
        current = new.get(name)
        if current is None:
            continue
        if current != old[name]:
            changed.append((name, old[name], current))
    return changed


def removed_names(old: Mapping[str, str], new: Mapping[str, str]) -> list[str]:
    return sort_once(
        (name for name in old if name not in new),
        source="drift.removed_names",
    )


def added_names(old: Mapping[str, str], new: Mapping[str, str]) -> list[str]:
    return sort_once(
        (name for name in new if name not in old),
        source="drift.added_names",
    )


def explain(index: SchemaIndex, type_name: str, *, max_chains: int) -> ChainSearch:
    return find_type_chains(
        index.dependencies,
        chain_starts(index.marker_type, index.root_types),
        type_name,
        max_chains=max_chains,
    )


def reject_monitored_conflicts(index: SchemaIndex, closure: Mapping[str, str]) -> None:
    """Raise for a conflicting duplicate only when the marker reaches it."""
    for name in sort_once(index.conflicts, source="drift.reject_monitored_conflicts"):
        if name in closure or name == index.marker_type:
            first_path, second_path = index.conflicts[name]
            raise DuplicateDeclarationError(name, first_path, second_path)


def run_drift_check(
    index: SchemaIndex,
    baseline: Mapping[str, str],
    *,
    update: bool,
    config: CheckConfig,
) -> DriftOutcome:
    closure = reachable_fingerprints(
        index.fingerprints, index.dependencies, index.root_types
    )
    reject_monitored_conflicts(index, closure)
    outcome = DriftOutcome(
        closure=closure,
        added_types=added_names(baseline, closure),
        removed_types=removed_names(baseline, closure),
        compared=not update,
    )
    if update:
        return outcome
    for name, old_digest, new_digest in diff_baseline(baseline, closure):
        search = explain(index, name, max_chains=config.max_chains)
        outcome.violations.append(
            DriftViolation(
                type_name=name,
                old_digest=old_digest,
                new_digest=new_digest,
                chains=tuple(search.rendered()),
                cycles=search.cycles,
                chains_truncated=search.truncated,
            )
        )
    return outcome


def check_failed(outcome: DriftOutcome, config: CheckConfig) -> bool:
    if not outcome.compared:
        return False
    if outcome.drifted:
        return True
    return config.fail_on_removed and bool(outcome.removed_types)
