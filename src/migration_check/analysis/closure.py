"""Reachability closure from the root set and dependency-chain explanation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from migration_check.invariants import never
from migration_check.order_contract import sort_once

DEFAULT_MAX_CHAINS = 64
CHAIN_SEPARATOR = " -> "


def reachable_types(
    graph: Mapping[str, Sequence[str]], roots: Iterable[str]
) -> list[str]:
    """Depth-first order of every name reachable from `roots`, each once."""
    visited: set[str] = set()
    order: list[str] = []
    for root in roots:
        stack = [root]
        while stack:
            name = stack.pop()
            if name in visited:
                continue
            visited.add(name)
            order.append(name)
            # Reversed so the first dependency is expanded first.
            stack.extend(reversed(list(graph.get(name, ()))))
    return order


def reachable_fingerprints(
    fingerprints: Mapping[str, str],
    graph: Mapping[str, Sequence[str]],
    roots: Iterable[str],
) -> dict[str, str]:
    """Closure map: reachable names that carry a fingerprint, sorted by name.

    Names without a fingerprint (primitives, external types, wire-boundary
    types, aliases) are skipped but still traversed.
    """
    reached = [name for name in reachable_types(graph, roots) if name in fingerprints]
    return {
        name: fingerprints[name]
        for name in sort_once(reached, source="closure.reachable_fingerprints")
    }


@dataclass(frozen=True)
class Continuing:
    path: tuple[str, ...]


@dataclass(frozen=True)
class Found:
    path: tuple[str, ...]


@dataclass(frozen=True)
class Cycle:
    path: tuple[str, ...]


ChainStep: TypeAlias = Continuing | Found | Cycle


def chain_step(path: tuple[str, ...], name: str, target: str) -> ChainStep:
    if name in path:
        return Cycle(path + (name,))
    extended = path + (name,)
    if name == target:
        return Found(extended)
    return Continuing(extended)


@dataclass
class ChainSearch:
    target: str
    chains: list[tuple[str, ...]] = field(default_factory=list)
    cycles: int = 0
    truncated: bool = False

    def rendered(self) -> list[str]:
        return [render_chain(chain) for chain in self.chains]


def render_chain(chain: Sequence[str]) -> str:
    return CHAIN_SEPARATOR.join(chain)


def _names_reaching(graph: Mapping[str, Sequence[str]], target: str) -> set[str]:
    reverse: dict[str, set[str]] = {}
    for source, deps in graph.items():
        for dep in deps:
            reverse.setdefault(dep, set()).add(source)
    reaching = {target}
    frontier = [target]
    while frontier:
        name = frontier.pop()
        for source in reverse.get(name, ()):
            if source not in reaching:
                reaching.add(source)
                frontier.append(source)
    return reaching


def find_type_chains(
    graph: Mapping[str, Sequence[str]],
    starts: Iterable[str],
    target: str,
    *,
    max_chains: int = DEFAULT_MAX_CHAINS,
) -> ChainSearch:
    """Every distinct dependency path from a start name to `target`.

    Each branch carries its own path, so a cycle ends that branch instead of
    looping. Branches that cannot reach `target` are never expanded.
    """
    search = ChainSearch(target=target)
    reaching = _names_reaching(graph, target)
    for start in starts:
        if start not in reaching:
            continue
        stack: list[ChainStep] = [chain_step((), start, target)]
        while stack:
            step = stack.pop()
            match step:
                case Found(path=path):
                    if len(search.chains) >= max_chains:
                        search.truncated = True
                        return search
                    search.chains.append(path)
                case Cycle():
                    search.cycles += 1
                case Continuing(path=path):
                    deps = [dep for dep in graph.get(path[-1], ()) if dep in reaching]
                    for dep in reversed(deps):
                        stack.append(chain_step(path, dep, target))
                case _:
                    never("unknown chain step", value_type=type(step).__name__)
    return search


def chain_starts(marker_type: str | None, roots: Sequence[str]) -> list[str]:
    """Chains are explained from the marker type when one was declared."""
    if marker_type is not None:
        return [marker_type]
    return list(roots)
