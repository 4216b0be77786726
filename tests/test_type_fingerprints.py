from __future__ import annotations

import hashlib

import pytest

from migration_check.analysis import type_fingerprints as tf
from migration_check.ingest.adapter_contract import (
    AliasDecl,
    Attribute,
    FieldDecl,
    RecordDecl,
    SumDecl,
    VariantDecl,
)
from migration_check.exceptions import NeverThrown

SKIP = (Attribute("serde", "(skip)"),)


def _account(*fields: FieldDecl) -> RecordDecl:
    return RecordDecl(name="Account", fields=fields)


def test_normalize_type_text_collapses_whitespace_around_punctuation() -> None:
    assert tf.normalize_type_text("Option < Vec < u8 > >") == "Option<Vec<u8>>"
    assert tf.normalize_type_text("BTreeMap<String,\n    u64>") == "BTreeMap<String,u64>"
    assert tf.normalize_type_text("[u8; 32]") == "[u8;32]"
    assert tf.normalize_type_text("&'static  str") == "&'static str"


def test_canonical_record_text_includes_field_names_in_order() -> None:
    decl = _account(FieldDecl("owner", "String"), FieldDecl("balance", "u32"))
    assert tf.canonical_text(decl) == (
        "struct_name:Account\nfield:owner:String\nfield:balance:u32\n"
    )


def test_canonical_sum_text_lists_variants_and_payloads() -> None:
    decl = SumDecl(
        name="KeyValue",
        variants=(
            VariantDecl("Account", (FieldDecl(None, "Account"),)),
            VariantDecl("Pair", (FieldDecl("key", "u64"), FieldDecl("value", "Vec<u8>"))),
            VariantDecl("Empty"),
        ),
    )
    assert tf.canonical_text(decl) == (
        "enum_name:KeyValue\n"
        "variant:Account\n"
        "field:Account\n"
        "variant:Pair\n"
        "field:u64\n"
        "field:Vec<u8>\n"
        "variant:Empty\n"
    )


def test_digest_is_sha256_of_canonical_text() -> None:
    decl = _account(FieldDecl("balance", "u32"))
    expected = hashlib.sha256(b"struct_name:Account\nfield:balance:u32\n").hexdigest()
    assert tf.fingerprint_declaration(decl) == expected
    assert tf.fingerprint_declaration(decl) == tf.fingerprint_declaration(decl)


def test_field_changes_change_digest_but_skipped_fields_do_not() -> None:
    base = _account(FieldDecl("owner", "String"), FieldDecl("balance", "u32"))
    digest = tf.fingerprint_declaration(base)
    added = _account(*base.fields, FieldDecl("nonce", "u64"))
    removed = _account(FieldDecl("owner", "String"))
    renamed = _account(FieldDecl("holder", "String"), FieldDecl("balance", "u32"))
    retyped = _account(FieldDecl("owner", "String"), FieldDecl("balance", "u64"))
    skipped = _account(*base.fields, FieldDecl("cache", "Vec<u8>", SKIP))
    for changed in (added, removed, renamed, retyped):
        assert tf.fingerprint_declaration(changed) != digest
    assert tf.fingerprint_declaration(skipped) == digest


def test_field_order_is_part_of_the_digest() -> None:
    forward = _account(FieldDecl("owner", "String"), FieldDecl("balance", "u32"))
    backward = _account(FieldDecl("balance", "u32"), FieldDecl("owner", "String"))
    assert tf.fingerprint_declaration(forward) != tf.fingerprint_declaration(backward)


def test_skip_markers_match_whole_words_only() -> None:
    assert tf.is_skipped(FieldDecl("a", "u8", SKIP))
    assert tf.is_skipped(FieldDecl("a", "u8", (Attribute("serde", "(default, skip)"),)))
    assert not tf.is_skipped(
        FieldDecl("a", "u8", (Attribute("serde", '(skip_serializing_if = "x")'),))
    )
    assert not tf.is_skipped(
        FieldDecl("a", "u64", (Attribute("serde", '(rename = "skip")'),))
    )
    assert tf.is_skipped(
        FieldDecl("a", "u64", (Attribute("serde", '(rename = "raw", skip)'),))
    )
    assert not tf.is_skipped(FieldDecl("a", "u8", (Attribute("other", "(skip)"),)))
    policy = tf.SkipPolicy(attribute="borsh", markers=("skip",))
    assert tf.is_skipped(FieldDecl("a", "u8", (Attribute("borsh", "(skip)"),)), policy)


def test_kind_is_part_of_the_digest() -> None:
    record = RecordDecl("Thing")
    sum_type = SumDecl("Thing")
    assert tf.fingerprint_declaration(record) != tf.fingerprint_declaration(sum_type)


def test_aliases_have_no_canonical_text() -> None:
    with pytest.raises(NeverThrown):
        tf.canonical_text(AliasDecl("Balances", "Vec<u64>"))


def test_renaming_a_named_variant_field_keeps_the_digest() -> None:
    before = SumDecl("Event", (VariantDecl("Moved", (FieldDecl("to", "u64"),)),))
    after = SumDecl("Event", (VariantDecl("Moved", (FieldDecl("target", "u64"),)),))
    retyped = SumDecl("Event", (VariantDecl("Moved", (FieldDecl("to", "u32"),)),))
    assert tf.fingerprint_declaration(before) == tf.fingerprint_declaration(after)
    assert tf.fingerprint_declaration(before) != tf.fingerprint_declaration(retyped)
