"""Entry points of the article segmenter: pasted text and paginated PDF text."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .builder import PageResolver, Segment, SegmentationOptions, assemble_segments
from .headings import scan_headings
from .normalizer import normalize_text
from .pages import PAGE_SEPARATOR, build_page_index, single_page


@dataclass(frozen=True)
class PlainText:
    """A single text blob without pagination (pasted text, RTF, HTML)."""

    text: str


@dataclass(frozen=True)
class Pages:
    """Per-page text in reading order, one entry per physical page."""

    pages: Tuple[str, ...]


RawDocument = Union[PlainText, Pages]


def _segment_text(
    full_text: str,
    page_for_offset: PageResolver,
    disable_heuristics: bool,
    options: Optional[SegmentationOptions],
) -> List[Segment]:
    scan = scan_headings(full_text)
    return assemble_segments(
        full_text,
        scan,
        page_for_offset,
        disable_heuristics=disable_heuristics,
        options=options,
    )


def segment(
    text: str,
    disable_heuristics: bool = False,
    options: Optional[SegmentationOptions] = None,
) -> List[Segment]:
    """Segment pasted text. Every ``page_hint`` is 1."""
    try:
        return _segment_text(normalize_text(text or ""), single_page, disable_heuristics, options)
    except Exception:  # noqa: BLE001
        logging.exception("Segmentation of pasted text failed (%s characters).", len(text or ""))
        return []


def segment_paginated(
    pages: Sequence[str],
    disable_heuristics: bool = False,
    options: Optional[SegmentationOptions] = None,
) -> List[Segment]:
    """Segment per-page text; ``page_hint`` is the physical page of each heading."""
    try:
        normalized = [normalize_text(page or "") for page in pages]
        full_text, index = build_page_index(normalized, PAGE_SEPARATOR)
        return _segment_text(full_text, index.page_for_offset, disable_heuristics, options)
    except Exception:  # noqa: BLE001
        logging.exception("Segmentation of paginated text failed (%s pages).", len(pages))
        return []


def segment_document(
    document: RawDocument,
    disable_heuristics: bool = False,
    options: Optional[SegmentationOptions] = None,
) -> List[Segment]:
    if isinstance(document, Pages):
        return segment_paginated(document.pages, disable_heuristics, options)
    return segment(document.text, disable_heuristics, options)
