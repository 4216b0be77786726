"""Canonical shape text and content digests for record and sum declarations.

The canonical text is order-sensitive. Record fields contribute their name
and type; tuple positions and every sum variant payload contribute the type
only.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable
from dataclasses import dataclass

from migration_check.ingest.adapter_contract import (
    AliasDecl,
    Declaration,
    FieldDecl,
    RecordDecl,
    SumDecl,
)
from migration_check.invariants import never

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCT_SPACING_RE = re.compile(r"\s*([<>,;:\[\]()&*])\s*")
_STRING_LITERAL_RE = re.compile(r'"(?:\\.|[^"\\])*"')

DEFAULT_SKIP_ATTRIBUTE = "serde"
DEFAULT_SKIP_MARKERS: tuple[str, ...] = ("skip",)


@dataclass(frozen=True)
class SkipPolicy:
    attribute: str = DEFAULT_SKIP_ATTRIBUTE
    markers: tuple[str, ...] = DEFAULT_SKIP_MARKERS


def normalize_type_text(text: str) -> str:
    collapsed = _WHITESPACE_RE.sub(" ", text.strip())
    return _PUNCT_SPACING_RE.sub(r"\1", collapsed)


def is_skipped(field: FieldDecl, policy: SkipPolicy = SkipPolicy()) -> bool:
    # Bare argument tokens only: `skip_serializing_if` and `rename = "skip"` keep
    # the field on the wire.
    for attribute in field.attributes:
        if attribute.name != policy.attribute:
            continue
        arguments = _STRING_LITERAL_RE.sub("", attribute.value)
        for marker in policy.markers:
            if re.search(rf"(?<!\w){re.escape(marker)}(?!\w)", arguments):
                return True
    return False


def retained_fields(
    fields: Iterable[FieldDecl], policy: SkipPolicy = SkipPolicy()
) -> list[FieldDecl]:
    return [field for field in fields if not is_skipped(field, policy)]


def _field_line(field: FieldDecl, *, with_name: bool) -> str:
    type_text = normalize_type_text(field.type_text)
    if with_name and field.name is not None:
        return f"field:{field.name}:{type_text}\n"
    return f"field:{type_text}\n"


def canonical_record_text(decl: RecordDecl, policy: SkipPolicy = SkipPolicy()) -> str:
    parts = [f"struct_name:{decl.name}\n"]
    for field in retained_fields(decl.fields, policy):
        parts.append(_field_line(field, with_name=True))
    return "".join(parts)


def canonical_sum_text(decl: SumDecl, policy: SkipPolicy = SkipPolicy()) -> str:
    parts = [f"enum_name:{decl.name}\n"]
    for variant in decl.variants:
        parts.append(f"variant:{variant.name}\n")
        for field in retained_fields(variant.fields, policy):
            parts.append(_field_line(field, with_name=False))
    return "".join(parts)


def canonical_text(decl: Declaration, policy: SkipPolicy = SkipPolicy()) -> str:
    match decl:
        case RecordDecl():
            return canonical_record_text(decl, policy)
        case SumDecl():
            return canonical_sum_text(decl, policy)
        case AliasDecl():
            never("aliases carry no fingerprint", name=decl.name)
        case _:
            never("unknown declaration variant", value_type=type(decl).__name__)


def digest_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def fingerprint_declaration(
    decl: RecordDecl | SumDecl, policy: SkipPolicy = SkipPolicy()
) -> str:
    return digest_text(canonical_text(decl, policy))
