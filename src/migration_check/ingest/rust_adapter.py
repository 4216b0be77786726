from __future__ import annotations

from functools import cache
from pathlib import Path

import tree_sitter_rust
from tree_sitter import (
    LANGUAGE_VERSION,
    MIN_COMPATIBLE_LANGUAGE_VERSION,
    Language,
    Node,
    Parser,
)

from migration_check.analysis.type_fingerprints import normalize_type_text
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

RUST_LANGUAGE = Language(tree_sitter_rust.language())

_COMMENT_NODES = frozenset({"line_comment", "block_comment"})


def _assert_language_abi(lang: Language) -> None:
    if not (MIN_COMPATIBLE_LANGUAGE_VERSION <= lang.abi_version <= LANGUAGE_VERSION):
        msg = f"Tree-sitter ABI mismatch: {lang.abi_version}"
        raise ValueError(msg)


@cache
def _parser() -> Parser:
    _assert_language_abi(RUST_LANGUAGE)
    return Parser(RUST_LANGUAGE)


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _attribute(item: Node) -> Attribute | None:
    attribute = next(
        (child for child in item.named_children if child.type == "attribute"), None
    )
    if attribute is None or not attribute.named_children:
        return None
    path = _text(attribute.named_children[0])
    name = path.rsplit("::", 1)[-1].strip()
    value_node = attribute.child_by_field_name("arguments")
    if value_node is None:
        value_node = attribute.child_by_field_name("value")
    return Attribute(name=name, value=_text(value_node))


def _field_declarations(body: Node) -> tuple[FieldDecl, ...]:
    fields: list[FieldDecl] = []
    pending: list[Attribute] = []
    for child in body.named_children:
        if child.type in _COMMENT_NODES:
            continue
        if child.type == "attribute_item":
            attribute = _attribute(child)
            if attribute is not None:
                pending.append(attribute)
            continue
        if child.type == "field_declaration":
            fields.append(
                FieldDecl(
                    name=_text(child.child_by_field_name("name")),
                    type_text=normalize_type_text(_text(child.child_by_field_name("type"))),
                    attributes=tuple(pending),
                )
            )
            pending = []
    return tuple(fields)


def _ordered_field_declarations(body: Node) -> tuple[FieldDecl, ...]:
    fields: list[FieldDecl] = []
    pending: list[Attribute] = []
    for index, child in enumerate(body.children):
        if not child.is_named or child.type in _COMMENT_NODES:
            continue
        if child.type == "attribute_item":
            attribute = _attribute(child)
            if attribute is not None:
                pending.append(attribute)
            continue
        if body.field_name_for_child(index) == "type":
            fields.append(
                FieldDecl(
                    name=None,
                    type_text=normalize_type_text(_text(child)),
                    attributes=tuple(pending),
                )
            )
            pending = []
    return tuple(fields)


def _body_fields(body: Node | None) -> tuple[FieldDecl, ...]:
    if body is None:
        return ()
    if body.type == "field_declaration_list":
        return _field_declarations(body)
    if body.type == "ordered_field_declaration_list":
        return _ordered_field_declarations(body)
    return ()


def _record(node: Node) -> RecordDecl:
    return RecordDecl(
        name=_text(node.child_by_field_name("name")),
        fields=_body_fields(node.child_by_field_name("body")),
    )


def _sum(node: Node) -> SumDecl:
    variants: list[VariantDecl] = []
    body = node.child_by_field_name("body")
    for child in body.named_children if body is not None else ():
        if child.type != "enum_variant":
            continue
        variants.append(
            VariantDecl(
                name=_text(child.child_by_field_name("name")),
                fields=_body_fields(child.child_by_field_name("body")),
            )
        )
    return SumDecl(name=_text(node.child_by_field_name("name")), variants=tuple(variants))


def _alias(node: Node) -> AliasDecl:
    return AliasDecl(
        name=_text(node.child_by_field_name("name")),
        type_text=normalize_type_text(_text(node.child_by_field_name("type"))),
    )


def top_level_declarations(root: Node) -> tuple[Declaration, ...]:
    """Collect struct, enum and type-alias items directly under the file root."""
    declarations: list[Declaration] = []
    for item in root.named_children:
        match item.type:
            case "struct_item":
                declarations.append(_record(item))
            case "enum_item":
                declarations.append(_sum(item))
            case "type_item":
                declarations.append(_alias(item))
            case _:
                continue
    return tuple(declarations)


class RustAdapter(LanguageAdapter):
    language_id = "rust"
    file_extensions = (".rs",)

    def parse_source(self, path: Path, source: bytes) -> ParsedFileUnit | ParseFailureWitness:
        tree = _parser().parse(source)
        if tree.root_node.has_error:
            return ParseFailureWitness(
                path=path,
                stage="parse",
                error="source contains syntax errors",
            )
        return ParsedFileUnit(path=path, declarations=top_level_declarations(tree.root_node))

    def parse_file(self, path: Path) -> ParsedFileUnit | ParseFailureWitness:
        try:
            source = path.read_bytes()
        except OSError as exc:
            return ParseFailureWitness(path=path, stage="read", error=str(exc))
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as exc:
            return ParseFailureWitness(path=path, stage="decode", error=str(exc))
        return self.parse_source(path, source)
