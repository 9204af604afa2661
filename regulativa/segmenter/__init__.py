"""Article segmentation of statute texts ("Član N" / "Члан N")."""

from .builder import GapPolicy, Segment, SegmentationOptions, build_segments, summarize_segments
from .engine import Pages, PlainText, RawDocument, segment, segment_document, segment_paginated
from .headings import HeadingMatch, Script, describe_heuristics, locate_headings
from .normalizer import fix_heading_spacing, normalize_text
from .pages import PageIndex, build_page_index

__all__ = [
    "GapPolicy",
    "HeadingMatch",
    "PageIndex",
    "Pages",
    "PlainText",
    "RawDocument",
    "Script",
    "Segment",
    "SegmentationOptions",
    "build_page_index",
    "build_segments",
    "describe_heuristics",
    "fix_heading_spacing",
    "locate_headings",
    "normalize_text",
    "segment",
    "segment_document",
    "segment_paginated",
    "summarize_segments",
]
