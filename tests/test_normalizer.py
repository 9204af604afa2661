import pytest

from regulativa.segmenter.normalizer import (
    compose_unicode,
    fix_heading_spacing,
    normalize_text,
    repair_mojibake,
    strip_rtf,
)


def test_empty_input():
    assert normalize_text("") == ""
    assert normalize_text(None) == ""


def test_strip_rtf_keeps_text_and_unicode_escapes():
    raw = r"{\rtf1\ansi Član 1.\par Tekst \u269?lana}"
    result = strip_rtf(raw)
    assert "Član 1.\nTekst člana" in result
    assert "\\" not in result
    assert "{" not in result and "}" not in result


def test_strip_rtf_negative_unicode():
    # Code points above 32767 are written as negative numbers.
    assert strip_rtf(r"\u-4064?") == chr(-4064 + 0x10000)


def test_strip_rtf_negative_control_parameters():
    assert strip_rtf(r"{\pard\li-360\fi-200 Član 1.}") == "Član 1."


def test_plain_text_without_rtf_is_untouched():
    text = "Član 1. Opšte odredbe"
    assert strip_rtf(text) == text


def test_nbsp_becomes_space():
    assert normalize_text("Član\u00a01.") == "Član 1."


def test_mojibake_latin1():
    original = "Član 1. Opšte odredbe"
    broken = original.encode("utf-8").decode("latin-1")
    assert repair_mojibake(broken) == original
    assert normalize_text(broken) == original


def test_mojibake_cp1252():
    original = "Član 1. Opšte odredbe"
    broken = original.encode("utf-8").decode("cp1252")
    assert "ÄŒ" in broken
    assert normalize_text(broken) == original


def test_mojibake_repaired_through_several_layers():
    original = "Član 1. Opšte odredbe"
    twice = original.encode("utf-8").decode("cp1252").encode("utf-8").decode("cp1252")
    assert repair_mojibake(twice) == original


def test_mojibake_failure_keeps_text():
    assert repair_mojibake("Ägypten") == "Ägypten"


def test_nfc_composition():
    assert compose_unicode("C\u030clan 1.") == "Član 1."
    assert normalize_text("C\u030clan 1.") == "Član 1."


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Č l a n 5. Tekst.", "Član 5. Tekst."),
        ("Č lan 7.", "Član 7."),
        ("Č l a n a k 3", "Članak 3"),
        ("C lan 2.", "Clan 2."),
        ("Č l. 4", "Čl. 4"),
        ("Ч л а н 2.", "Члан 2."),
        ("Ч лана к 9", "Чланак 9"),
    ],
)
def test_fix_heading_spacing(raw, expected):
    assert fix_heading_spacing(raw) == expected


def test_fix_heading_spacing_leaves_prose_alone():
    text = "Opšti uslovi za članove i Clanovi odbora."
    assert fix_heading_spacing(text) == text


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Član 1. Tekst.\n\nČlan 2. Tekst.",
        "Č l a n 5. Tekst.",
        "Члан 1. Текст.",
        "Član 1. Opšte odredbe".encode("utf-8").decode("latin-1"),
        "Član".encode("utf-8").decode("cp1252").encode("utf-8").decode("cp1252"),
        r"{\rtf1 Član 1.\par Tekst}",
        "Član 1. Član",
    ],
)
def test_normalize_is_idempotent(text):
    once = normalize_text(text)
    assert normalize_text(once) == once
