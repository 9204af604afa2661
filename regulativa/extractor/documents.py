"""Loading of statute source files (PDF, RTF, TXT, HTML) into a RawDocument."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup

from ..segmenter.engine import Pages, PlainText, RawDocument
from .errors import UnsupportedDocument
from .pdf import extract_pdf_pages

TEXT_SUFFIXES = {".txt", ".rtf"}
HTML_SUFFIXES = {".html", ".htm"}
# Converted to PDF upstream before they reach the segmenter.
CONVERT_FIRST_SUFFIXES = {".doc", ".docx"}

# Legacy Balkan exports are mostly Windows-1250 when they are not UTF-8.
FALLBACK_ENCODING = "cp1250"


def decode_bytes(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        logging.warning("Source is not UTF-8, decoding as %s.", FALLBACK_ENCODING)
        return content.decode(FALLBACK_ENCODING, errors="replace")


def html_to_text(markup: str) -> str:
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(["script", "style"]):
        tag.extract()
    root = soup.body or soup
    lines = (line.strip() for line in root.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)


def load_document(source: Union[str, Path, bytes], suffix: Optional[str] = None) -> RawDocument:
    """Read a file path (or raw bytes plus ``suffix``) into ``PlainText`` or ``Pages``."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        suffix = suffix or path.suffix
        content = path.read_bytes()
    else:
        content = source

    suffix = (suffix or "").lower()
    if suffix and not suffix.startswith("."):
        suffix = f".{suffix}"

    if suffix == ".pdf":
        return Pages(pages=tuple(extract_pdf_pages(content)))
    if suffix in TEXT_SUFFIXES:
        return PlainText(text=decode_bytes(content))
    if suffix in HTML_SUFFIXES:
        return PlainText(text=html_to_text(decode_bytes(content)))
    if suffix in CONVERT_FIRST_SUFFIXES:
        raise UnsupportedDocument(f"{suffix} files must be converted to PDF before segmentation.")
    raise UnsupportedDocument(f"Unsupported file type: {suffix or '(none)'}")
