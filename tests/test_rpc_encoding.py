from __future__ import annotations

from pathlib import Path

from migration_check.analysis.rpc_encoding import (
    EncodingViolation,
    hex_encoding_expectation,
    validate_declaration,
)
from migration_check.ingest.adapter_contract import (
    AliasDecl,
    Attribute,
    FieldDecl,
    RecordDecl,
    SumDecl,
    VariantDecl,
)

PATH = Path("src/rpc/types.rs")


def _hex(marker: str) -> tuple[Attribute, ...]:
    return (Attribute("serde_as", f'(as = "{marker}")'),)


def test_expectation_for_bare_and_optional_unsigned_integers() -> None:
    assert hex_encoding_expectation(FieldDecl("a", "u64")) == "U64Hex"
    assert hex_encoding_expectation(FieldDecl("a", "u8")) == "U8Hex"
    assert hex_encoding_expectation(FieldDecl("a", "u128")) == "U128Hex"
    assert hex_encoding_expectation(FieldDecl("a", "Option<u32>")) == "Option<U32Hex>"


def test_other_shapes_are_out_of_scope() -> None:
    for type_text in ("i64", "String", "Vec<u64>", "Option<i64>", "[u8;32]", "Option<Option<u64>>"):
        assert hex_encoding_expectation(FieldDecl("a", type_text)) is None
    skipped = FieldDecl("a", "u64", (Attribute("serde", "(skip)"),))
    assert hex_encoding_expectation(skipped) is None


def test_price_without_annotation_is_flagged() -> None:
    decl = RecordDecl("Price", (FieldDecl("amount", "u64"),))
    assert validate_declaration(decl, path=PATH) == [
        EncodingViolation(path=PATH, declaration="Price", field="amount", expected="U64Hex")
    ]


def test_annotation_must_contain_the_expected_marker() -> None:
    good = RecordDecl(
        "Quote",
        (
            FieldDecl("price", "u64", _hex("U64Hex")),
            FieldDecl("limit", "Option<u64>", _hex("Option<U64Hex>")),
            FieldDecl("symbol", "String"),
        ),
    )
    assert validate_declaration(good, path=PATH) == []
    mismatched = RecordDecl(
        "Quote",
        (
            FieldDecl("price", "u64", _hex("U32Hex")),
            FieldDecl("limit", "Option<u64>", _hex("U64Hex")),
            FieldDecl("volume", "u64", (Attribute("serde", '(with = "U64Hex")'),)),
        ),
    )
    assert [(v.field, v.expected) for v in validate_declaration(mismatched, path=PATH)] == [
        ("price", "U64Hex"),
        ("limit", "Option<U64Hex>"),
        ("volume", "U64Hex"),
    ]


def test_sum_payloads_and_tuple_positions_are_labelled() -> None:
    decl = SumDecl(
        "Request",
        (
            VariantDecl("Get", (FieldDecl(None, "u64"),)),
            VariantDecl("Put", (FieldDecl("key", "u32"), FieldDecl("value", "Vec<u8>"))),
            VariantDecl("Ping"),
        ),
    )
    assert [v.field for v in validate_declaration(decl, path=PATH)] == ["Get.0", "Put.key"]


def test_custom_encoding_attribute_and_aliases() -> None:
    decl = RecordDecl("Price", (FieldDecl("amount", "u16", (Attribute("encode", "(U16Hex)"),)),))
    assert validate_declaration(decl, path=PATH, encoding_attribute="encode") == []
    assert validate_declaration(AliasDecl("Amount", "u64"), path=PATH) == []
