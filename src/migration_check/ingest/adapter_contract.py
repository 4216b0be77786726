from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeAlias, runtime_checkable


@dataclass(frozen=True)
class Attribute:
    """One `#[...]` annotation: last path segment plus raw argument text."""

    name: str
    value: str = ""


@dataclass(frozen=True)
class FieldDecl:
    # None for positional (tuple) fields.
    name: str | None
    type_text: str
    attributes: tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class VariantDecl:
    name: str
    fields: tuple[FieldDecl, ...] = ()


@dataclass(frozen=True)
class RecordDecl:
    name: str
    fields: tuple[FieldDecl, ...] = ()


@dataclass(frozen=True)
class SumDecl:
    name: str
    variants: tuple[VariantDecl, ...] = ()


@dataclass(frozen=True)
class AliasDecl:
    name: str
    type_text: str


Declaration: TypeAlias = RecordDecl | SumDecl | AliasDecl


@dataclass(frozen=True)
class ParseFailureWitness:
    path: Path
    stage: str
    error: str


@dataclass(frozen=True)
class ParsedFileUnit:
    path: Path
    declarations: tuple[Declaration, ...]


@runtime_checkable
class LanguageAdapter(Protocol):
    language_id: str
    file_extensions: tuple[str, ...]

    def parse_source(self, path: Path, source: bytes) -> ParsedFileUnit | ParseFailureWitness: ...

    def parse_file(self, path: Path) -> ParsedFileUnit | ParseFailureWitness: ...
