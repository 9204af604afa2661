"""Per-page text extraction from PDF files with PyMuPDF."""

from __future__ import annotations

import logging
import re
from typing import List

import fitz  # PyMuPDF

from .errors import ImageOnlyPdf, InvalidPdf

# A baseline jump larger than this starts a new line.
LINE_JUMP = 9
# A horizontal jump larger than this between two word characters gets a space.
WORD_GAP = 2

WORD_CHAR_RE = re.compile(r"\w")


def is_image_only_pdf(doc) -> bool:
    for page in doc:
        if page.get_text().strip():
            return False
    return True


def _page_text(page) -> str:
    data = page.get_text("dict", sort=True)
    parts: List[str] = []
    last_x = None
    last_y = None
    last_char = ""
    for block in data.get("blocks", []):
        if block.get("type", 0) != 0:
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                chunk = span.get("text", "")
                x, y = span.get("origin", (None, None))
                if last_y is not None and y is not None and abs(last_y - y) > LINE_JUMP:
                    parts.append("\n")
                elif last_x is not None and x is not None and abs(last_x - x) > WORD_GAP:
                    if WORD_CHAR_RE.match(last_char) and WORD_CHAR_RE.match(chunk[:1]):
                        parts.append(" ")
                parts.append(chunk)
                if x is not None:
                    last_x = x
                if y is not None:
                    last_y = y
                if chunk:
                    last_char = chunk[-1]
    text = "".join(parts)
    text = re.sub(r"\s+\n", "\n", text)
    text = re.sub(r"\s{2,}", " ", text)
    return text.strip()


def extract_pdf_pages(content: bytes) -> List[str]:
    """Return the text of every page, in page order, with layout-aware spacing."""
    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise InvalidPdf(f"Not a readable PDF: {exc}") from exc

    with doc:
        if not doc.is_pdf or doc.is_encrypted:
            raise InvalidPdf("File is not a valid PDF or is encrypted.")
        if is_image_only_pdf(doc):
            raise ImageOnlyPdf("PDF contains only images; OCR is required.")
        pages = [_page_text(page) for page in doc]

    logging.debug("Extracted %s pages from PDF.", len(pages))
    return pages
