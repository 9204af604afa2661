"""Shared fixtures for the segmenter tests."""

from typing import Callable, List

import fitz  # PyMuPDF
import pytest

ENV_VARS = (
    "SEGMENT_MAX_CHARS",
    "SEGMENT_GAP_POLICY",
    "HEURISTICS_DISABLED_JURISDICTIONS",
    "SEGMENT_INTRO_MIN_OFFSET",
    "SEGMENT_INTRO_MIN_CHARS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep a developer's .env from leaking into the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_pdf() -> Callable[[List[str]], bytes]:
    """Build an in-memory PDF with one page per string (blank pages for empty strings)."""

    def build(pages: List[str]) -> bytes:
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text, fontsize=11)
        data = doc.tobytes()
        doc.close()
        return data

    return build


@pytest.fixture
def law_text() -> str:
    return (
        "ZAKON O PRIMJERU\n"
        "Službeni glasnik br. 1/20\n\n"
        "Član 1.\nOvim zakonom uređuje se primjer.\n\n"
        "Član 2.\nPrimjer se primjenjuje na sve.\n\n"
        "Član 3.\nOvaj zakon stupa na snagu osmog dana."
    )
