"""
Text repair applied before heading detection.

Statute texts arrive from PDF text layers, RTF exports and pasted text, in
Latin and Cyrillic script and in several historical encodings. Heading
detection is regex based, so every repair happens here:

- RTF control words and braces are removed.
- Non-breaking spaces become ordinary spaces.
- Windows-1252 or Latin-1 mojibake ("ÄŒlan") is re-decoded when its markers appear.
- Unicode is composed to NFC.
- Heading tokens split by PDF kerning ("Č l a n") are glued back together.

``normalize_text`` is idempotent on clean text.
"""

from __future__ import annotations

import logging
import re
import unicodedata

# Whitespace that PDF kerning leaves inside words: regular whitespace, NBSP,
# the general punctuation spaces and the zero-width space.
WS_CLASS = r"[\s\u00A0\u2000-\u200B]"

RTF_UNICODE_RE = re.compile(r"\\u(-?\d+)\?")
RTF_PAR_RE = re.compile(r"\\par\b ?")
RTF_LINE_RE = re.compile(r"\\line\b ?")
RTF_TAB_RE = re.compile(r"\\tab\b ?")
# A control word ends at its optional signed parameter and one delimiting space.
RTF_CONTROL_RE = re.compile(r"\\[a-z]+-?\d* ?")
RTF_BRACES_RE = re.compile(r"[{}]")

MOJIBAKE_MARKERS_RE = re.compile(r"[ÃÄÅ]")
MOJIBAKE_ENCODINGS = ("cp1252", "latin-1")
MOJIBAKE_MAX_PASSES = 3

# Not preceded by a letter, so words ending in "c" are left alone.
_NO_LETTER_BEFORE = r"(?<![^\W\d_])"

SPACED_CLAN_RE = re.compile(
    _NO_LETTER_BEFORE
    + rf"(?P<initial>[ČC]){WS_CLASS}*l{WS_CLASS}*a{WS_CLASS}*n(?P<suffix>{WS_CLASS}*a{WS_CLASS}*k(?!\w))?"
)
SPACED_CL_ABBREV_RE = re.compile(_NO_LETTER_BEFORE + rf"Č{WS_CLASS}+l{WS_CLASS}*\.")
SPACED_CLAN_CYR_RE = re.compile(
    _NO_LETTER_BEFORE + rf"Ч{WS_CLASS}*л{WS_CLASS}*а{WS_CLASS}*н(?P<suffix>{WS_CLASS}*а{WS_CLASS}*к(?!\w))?"
)


def _decode_rtf_unicode(match: re.Match) -> str:
    code = int(match.group(1))
    # RTF stores code points above 32767 as signed 16-bit values.
    if code < 0:
        code += 0x10000
    return chr(code)


def strip_rtf(text: str) -> str:
    """Remove RTF markup, keeping paragraph breaks and ``\\uNNNN?`` characters."""
    text = RTF_UNICODE_RE.sub(_decode_rtf_unicode, text)
    text = RTF_PAR_RE.sub("\n", text)
    text = RTF_TAB_RE.sub("\t", text)
    text = RTF_LINE_RE.sub("\n", text)
    text = RTF_CONTROL_RE.sub("", text)
    return RTF_BRACES_RE.sub("", text)


def _redecode(text: str) -> str:
    for encoding in MOJIBAKE_ENCODINGS:
        try:
            return text.encode(encoding).decode("utf-8")
        except (UnicodeEncodeError, UnicodeDecodeError):
            continue
    return text


def repair_mojibake(text: str) -> str:
    """Re-decode UTF-8 bytes that were read as Windows-1252 or Latin-1, one layer per pass.

    Text that went through the wrong round trip more than once is peeled until no
    marker is left or a pass changes nothing. Returns the input on failure.
    """
    for _ in range(MOJIBAKE_MAX_PASSES):
        if not MOJIBAKE_MARKERS_RE.search(text):
            break
        repaired = _redecode(text)
        if repaired == text:
            logging.debug("Mojibake markers present but re-decoding failed; keeping text as is.")
            break
        text = repaired
    return text


def compose_unicode(text: str) -> str:
    try:
        return unicodedata.normalize("NFC", text)
    except (TypeError, ValueError):
        return text


def _glue_latin(match: re.Match) -> str:
    base = match.group("initial") + "lan"
    return base + "ak" if match.group("suffix") else base


def _glue_cyrillic(match: re.Match) -> str:
    return "Чланак" if match.group("suffix") else "Члан"


def fix_heading_spacing(text: str) -> str:
    """Collapse whitespace inside heading tokens: ``Č lan`` -> ``Član``, ``Ч лан`` -> ``Члан``."""
    text = SPACED_CLAN_RE.sub(_glue_latin, text)
    text = SPACED_CL_ABBREV_RE.sub("Čl.", text)
    return SPACED_CLAN_CYR_RE.sub(_glue_cyrillic, text)


def normalize_text(text: str) -> str:
    """Run every repair step in order and return text ready for heading detection."""
    if not text:
        return ""
    text = strip_rtf(text)
    text = text.replace("\u00a0", " ")
    text = repair_mojibake(text)
    text = compose_unicode(text)
    return fix_heading_spacing(text)
