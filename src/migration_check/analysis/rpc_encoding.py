"""Hex-encoding annotation checks for declarations on the RPC wire boundary.

Unsigned integers crossing the wire boundary must be serialized as hex strings
so that 64- and 128-bit values survive JSON clients. A field is in scope when
its type is a bare `uN` or `Option<uN>`; every other shape is left alone.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from migration_check.analysis.type_deps import type_identifiers
from migration_check.analysis.type_fingerprints import (
    SkipPolicy,
    is_skipped,
    normalize_type_text,
)
from migration_check.ingest.adapter_contract import (
    AliasDecl,
    Declaration,
    FieldDecl,
    RecordDecl,
    SumDecl,
)
from migration_check.invariants import never

UNSIGNED_INTEGER_KINDS = frozenset({"u8", "u16", "u32", "u64", "u128"})
OPTIONAL_WRAPPER = "Option"
DEFAULT_ENCODING_ATTRIBUTE = "serde_as"


@dataclass(frozen=True)
class EncodingViolation:
    path: Path
    declaration: str
    field: str
    expected: str


def hex_marker(integer_kind: str) -> str:
    return f"{integer_kind.upper()}Hex"


def hex_encoding_expectation(
    field: FieldDecl, skip_policy: SkipPolicy = SkipPolicy()
) -> str | None:
    """Return the marker the field's encoding annotation must contain, if any."""
    if is_skipped(field, skip_policy):
        return None
    type_text = normalize_type_text(field.type_text)
    # Path types only: [u8;32] and &u64 are out of scope.
    match type_identifiers(type_text):
        case [kind] if kind in UNSIGNED_INTEGER_KINDS and type_text == kind:
            return hex_marker(kind)
        case [wrapper, kind] if (
            wrapper == OPTIONAL_WRAPPER
            and kind in UNSIGNED_INTEGER_KINDS
            and type_text == f"{wrapper}<{kind}>"
        ):
            return f"{OPTIONAL_WRAPPER}<{hex_marker(kind)}>"
        case _:
            return None


def has_encoding_annotation(
    field: FieldDecl, expected: str, attribute: str = DEFAULT_ENCODING_ATTRIBUTE
) -> bool:
    return any(
        annotation.name == attribute and expected in annotation.value
        for annotation in field.attributes
    )


def _labelled_fields(decl: Declaration) -> Iterator[tuple[str, FieldDecl]]:
    match decl:
        case RecordDecl():
            for index, field in enumerate(decl.fields):
                yield (field.name if field.name is not None else str(index)), field
        case SumDecl():
            for variant in decl.variants:
                for index, field in enumerate(variant.fields):
                    label = field.name if field.name is not None else str(index)
                    yield f"{variant.name}.{label}", field
        case AliasDecl():
            return
        case _:
            never("unknown declaration variant", value_type=type(decl).__name__)


def validate_declaration(
    decl: Declaration,
    *,
    path: Path,
    skip_policy: SkipPolicy = SkipPolicy(),
    encoding_attribute: str = DEFAULT_ENCODING_ATTRIBUTE,
) -> list[EncodingViolation]:
    violations: list[EncodingViolation] = []
    for label, field in _labelled_fields(decl):
        expected = hex_encoding_expectation(field, skip_policy)
        if expected is None:
            continue
        if has_encoding_annotation(field, expected, encoding_attribute):
            continue
        violations.append(
            EncodingViolation(
                path=path,
                declaration=decl.name,
                field=label,
                expected=expected,
            )
        )
    return violations
