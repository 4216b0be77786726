from migration_check.ingest.adapter_contract import (
    AliasDecl,
    Attribute,
    Declaration,
    FieldDecl,
    LanguageAdapter,
    ParsedFileUnit,
    ParseFailureWitness,
    RecordDecl,
    SumDecl,
    VariantDecl,
)
from .source_paths import iter_source_paths, path_has_segment

__all__ = [
    "AliasDecl",
    "Attribute",
    "Declaration",
    "FieldDecl",
    "LanguageAdapter",
    "ParsedFileUnit",
    "ParseFailureWitness",
    "RecordDecl",
    "SumDecl",
    "VariantDecl",
    "iter_source_paths",
    "path_has_segment",
]
