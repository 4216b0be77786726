"""Declaration extraction: fingerprint map, dependency graph and root set.

Each file is visited with an explicit `ScanContext`; the wire-boundary flag
decides per file whether its record and sum declarations are fingerprinted or
handed to the RPC encoding validator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from migration_check.analysis.rpc_encoding import EncodingViolation, validate_declaration
from migration_check.analysis.type_deps import dependency_set, merge_dependencies
from migration_check.analysis.type_fingerprints import (
    SkipPolicy,
    fingerprint_declaration,
    retained_fields,
)
from migration_check.config import CheckConfig
from migration_check.ingest.adapter_contract import (
    AliasDecl,
    Declaration,
    ParsedFileUnit,
    ParseFailureWitness,
    RecordDecl,
    SumDecl,
)
from migration_check.ingest.registry import adapter_for_path, registered_extensions
from migration_check.ingest.source_paths import iter_source_paths, path_has_segment
from migration_check.invariants import never


@dataclass(frozen=True)
class ScanContext:
    path: Path
    wire_boundary: bool


@dataclass
class SchemaIndex:
    fingerprints: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, list[str]] = field(default_factory=dict)
    root_types: list[str] = field(default_factory=list)
    marker_type: str | None = None
    encoding_violations: list[EncodingViolation] = field(default_factory=list)
    parse_failures: list[ParseFailureWitness] = field(default_factory=list)
    declaration_origins: dict[str, Path] = field(default_factory=dict)
    # name -> (first path, conflicting path); checked once the closure is known.
    conflicts: dict[str, tuple[Path, Path]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_encoding_errors(self) -> bool:
        return bool(self.encoding_violations)


def declaration_dependencies(decl: Declaration, policy: SkipPolicy) -> list[str]:
    match decl:
        case RecordDecl():
            return dependency_set(
                field.type_text for field in retained_fields(decl.fields, policy)
            )
        case SumDecl():
            return dependency_set(
                field.type_text
                for variant in decl.variants
                for field in retained_fields(variant.fields, policy)
            )
        case AliasDecl():
            return dependency_set([decl.type_text])
        case _:
            never("unknown declaration variant", value_type=type(decl).__name__)


def _record_dependencies(index: SchemaIndex, name: str, deps: list[str]) -> None:
    if not deps:
        return
    index.dependencies[name] = merge_dependencies(index.dependencies.get(name, ()), deps)


def _record_fingerprint(
    index: SchemaIndex,
    decl: RecordDecl | SumDecl,
    context: ScanContext,
    config: CheckConfig,
    policy: SkipPolicy,
) -> None:
    digest = fingerprint_declaration(decl, policy)
    previous = index.fingerprints.get(decl.name)
    if previous is not None and previous != digest:
        first_path = index.declaration_origins.get(decl.name, context.path)
        if config.duplicate_policy == "error":
            index.conflicts.setdefault(decl.name, (first_path, context.path))
        else:
            index.warnings.append(
                f"type {decl.name} declared with different shapes in {first_path} "
                f"and {context.path}; keeping the last one"
            )
    index.fingerprints[decl.name] = digest
    index.declaration_origins.setdefault(decl.name, context.path)


def extract_declaration(
    index: SchemaIndex,
    decl: Declaration,
    context: ScanContext,
    config: CheckConfig,
) -> None:
    policy = SkipPolicy(attribute=config.skip_attribute, markers=config.skip_markers)
    deps = declaration_dependencies(decl, policy)
    _record_dependencies(index, decl.name, deps)
    match decl:
        case AliasDecl():
            return
        case RecordDecl() | SumDecl() if context.wire_boundary:
            index.encoding_violations.extend(
                validate_declaration(
                    decl,
                    path=context.path,
                    skip_policy=policy,
                    encoding_attribute=config.encoding_attribute,
                )
            )
        case RecordDecl():
            _record_fingerprint(index, decl, context, config, policy)
        case SumDecl():
            _record_fingerprint(index, decl, context, config, policy)
            if decl.name == config.marker_type:
                # Only the last-declared marker defines the roots.
                index.marker_type = decl.name
                index.root_types = list(deps)
        case _:
            never("unknown declaration variant", value_type=type(decl).__name__)


def extract_file(
    index: SchemaIndex,
    unit: ParsedFileUnit,
    context: ScanContext,
    config: CheckConfig,
) -> None:
    for decl in unit.declarations:
        extract_declaration(index, decl, context, config)


def scan_context_for(path: Path, root: Path, config: CheckConfig) -> ScanContext:
    try:
        relative = path.relative_to(root)
    except ValueError:
        relative = path
    return ScanContext(
        path=path,
        wire_boundary=path_has_segment(relative, config.wire_boundary_segments),
    )


def build_schema_index(
    root: Path,
    *,
    config: CheckConfig,
) -> SchemaIndex:
    """Scan `root`, parsing each path with the adapter registered for its suffix."""
    extensions = config.extensions or registered_extensions()
    index = SchemaIndex()
    for path in iter_source_paths(
        root,
        extensions=extensions,
        excluded_segments=config.excluded_segments,
    ):
        context = scan_context_for(path, root, config)
        parsed = adapter_for_path(path).parse_file(path)
        match parsed:
            case ParseFailureWitness():
                index.parse_failures.append(parsed)
            case ParsedFileUnit():
                extract_file(index, parsed, context, config)
            case _:
                never("unknown parse result", value_type=type(parsed).__name__)
    return index
