"""Mapping of character offsets in the joined document text to physical pages."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Sequence, Tuple

PAGE_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class PageIndex:
    """Starting offset of every page inside the joined text, in document order."""

    offsets: Tuple[int, ...]

    def page_for_offset(self, idx: int) -> int:
        """Return the 1-based page whose ``[offsets[i], offsets[i + 1])`` range contains ``idx``."""
        position = bisect_right(self.offsets, idx)
        if position == 0:
            return 1
        return position

    @property
    def page_count(self) -> int:
        return len(self.offsets)


def build_page_index(pages: Sequence[str], separator: str = PAGE_SEPARATOR) -> Tuple[str, PageIndex]:
    """Join ``pages`` with ``separator`` and record where each page starts."""
    offsets = []
    cursor = 0
    for page in pages:
        offsets.append(cursor)
        cursor += len(page) + len(separator)
    return separator.join(pages), PageIndex(offsets=tuple(offsets))


def single_page(_idx: int) -> int:
    """Resolver for pasted text, which carries no pagination."""
    return 1
