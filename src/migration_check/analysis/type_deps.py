"""Dependency edges derived from the type text of fields and aliases."""

from __future__ import annotations

import re
from collections.abc import Iterable

from migration_check.order_contract import sort_once

# A lifetime ('a) is an identifier preceded by a quote; the lookbehind drops it.
_IDENTIFIER_RE = re.compile(r"(?<!['\w])[A-Za-z_][A-Za-z0-9_]*")

RUST_KEYWORDS = frozenset(
    {
        "as",
        "const",
        "crate",
        "dyn",
        "extern",
        "fn",
        "for",
        "impl",
        "mut",
        "self",
        "Self",
        "super",
        "unsafe",
        "where",
    }
)


def type_identifiers(type_text: str) -> list[str]:
    """Return every plain identifier in `type_text`, left to right.

    Generic containers and their arguments are flattened in order of
    appearance and path segments are kept, so ``Option<Vec<Account>>`` gives
    ``["Option", "Vec", "Account"]``. Repeats are preserved.
    """
    return [
        token
        for token in _IDENTIFIER_RE.findall(type_text)
        if token not in RUST_KEYWORDS and token != "_"
    ]


def dependency_set(type_texts: Iterable[str]) -> list[str]:
    names: set[str] = set()
    for text in type_texts:
        names.update(type_identifiers(text))
    return sort_once(names, source="type_deps.dependency_set")


def merge_dependencies(existing: Iterable[str], new: Iterable[str]) -> list[str]:
    """Union two dependency lists; edges are only ever added."""
    return sort_once({*existing, *new}, source="type_deps.merge_dependencies")
