"""Slicing of the normalized text into article segments."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from .headings import HeadingMatch, HeadingScan, Script, find_heading_anywhere

INTRO_LABEL = "Uvod"
PLACEHOLDER_TEMPLATE = "Heuristički segment za {label} – standardni naslov nije detektovan."

PageResolver = Callable[[int], int]


class GapPolicy(Enum):
    """What to emit for an article number that no search could place."""

    SKIP = "skip"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class SegmentationOptions:
    """Engine tunables.

    With the default intro thresholds of 0 any non-empty preamble becomes "Uvod".
    The batch CLI passes ``intro_min_offset=50`` and ``intro_min_chars=20``: the
    first heading must start more than 50 characters in and the trimmed preamble
    must exceed 20 characters. It reads them from ``SEGMENT_INTRO_MIN_OFFSET``
    and ``SEGMENT_INTRO_MIN_CHARS``.
    """

    max_chars: int = 15000
    heuristic_chars: int = 2000
    fallback_intro_chars: int = 4000
    intro_min_offset: int = 0
    intro_min_chars: int = 0
    gap_policy: GapPolicy = GapPolicy.SKIP


@dataclass(frozen=True)
class Segment:
    label: str
    number: int
    text: str
    page_hint: int

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass
class _Draft:
    offset: int
    segment: Segment
    placeholder: bool = False
    # Longest slice this draft may take; 0 for placeholders, whose text is fixed.
    limit: int = 0


def normalize_label(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def article_label(script: Script, number: int) -> str:
    return normalize_label(f"{script.article_word} {number}")


def build_segments(
    text: str,
    matches: Sequence[HeadingMatch],
    page_for_offset: PageResolver,
    *,
    max_chars: int = 15000,
) -> List[Segment]:
    """Cut ``text`` at every heading, in document order. The first occurrence of a number wins."""
    ordered = sorted(matches, key=lambda m: m.char_offset)
    return [draft.segment for draft in _article_drafts(text, ordered, page_for_offset, max_chars)]


def _article_drafts(
    text: str,
    ordered: Sequence[HeadingMatch],
    page_for_offset: PageResolver,
    max_chars: int,
) -> List[_Draft]:
    drafts: List[_Draft] = []
    seen = set()
    for i, match in enumerate(ordered):
        if match.article_number in seen:
            continue
        seen.add(match.article_number)
        start = match.char_offset
        end = ordered[i + 1].char_offset if i + 1 < len(ordered) else len(text)
        snippet = text[start : min(end, start + max_chars)].strip()
        drafts.append(
            _Draft(
                offset=start,
                segment=Segment(
                    label=article_label(match.script, match.article_number),
                    number=match.article_number,
                    text=snippet,
                    page_hint=page_for_offset(start),
                ),
                limit=max_chars,
            )
        )
    return drafts


def _gap_drafts(
    text: str,
    scan: HeadingScan,
    seen: set,
    page_for_offset: PageResolver,
    options: SegmentationOptions,
) -> List[_Draft]:
    """Recover article numbers the cascade missed, or mark them per the gap policy."""
    drafts: List[_Draft] = []
    for number in range(1, scan.max_number + 1):
        if number in seen:
            continue
        heading = find_heading_anywhere(text, number)
        if heading is not None:
            start = heading.char_offset
            drafts.append(
                _Draft(
                    offset=start,
                    segment=Segment(
                        label=article_label(heading.script, number),
                        number=number,
                        text=text[start : start + options.heuristic_chars].strip(),
                        page_hint=page_for_offset(start),
                    ),
                    limit=options.heuristic_chars,
                )
            )
        elif options.gap_policy is GapPolicy.PLACEHOLDER:
            anchor = _placeholder_anchor(scan.matches, number)
            label = article_label(scan.document_script, number)
            drafts.append(
                _Draft(
                    offset=anchor,
                    segment=Segment(
                        label=label,
                        number=number,
                        text=PLACEHOLDER_TEMPLATE.format(label=label),
                        page_hint=page_for_offset(anchor),
                    ),
                    placeholder=True,
                )
            )
        seen.add(number)
    return drafts


def _placeholder_anchor(matches: Sequence[HeadingMatch], number: int) -> int:
    """Offset of the closest located article with a lower number, 0 if there is none."""
    previous: Optional[HeadingMatch] = None
    for match in matches:
        if match.article_number < number and (previous is None or match.article_number > previous.article_number):
            previous = match
    return previous.char_offset if previous else 0


def _cut_at_next_heading(text: str, drafts: Sequence[_Draft]) -> None:
    """End every located draft where the next located heading starts, recovered ones included."""
    located = [draft for draft in drafts if not draft.placeholder]
    for i, draft in enumerate(located):
        end = located[i + 1].offset if i + 1 < len(located) else len(text)
        start = draft.offset
        snippet = text[start : min(end, start + draft.limit)].strip()
        draft.segment = replace(draft.segment, text=snippet)


def _intro_draft(text: str, first_offset: int, options: SegmentationOptions) -> Optional[_Draft]:
    if first_offset <= options.intro_min_offset:
        return None
    preamble = text[:first_offset].strip()
    if not preamble or len(preamble) <= options.intro_min_chars:
        return None
    return _Draft(offset=0, segment=Segment(label=INTRO_LABEL, number=0, text=preamble, page_hint=1))


def assemble_segments(
    text: str,
    scan: HeadingScan,
    page_for_offset: PageResolver,
    *,
    disable_heuristics: bool = False,
    options: Optional[SegmentationOptions] = None,
) -> List[Segment]:
    """Turn a heading scan into the final segment list: intro, articles and gap fill."""
    options = options or SegmentationOptions()
    drafts = _article_drafts(text, scan.matches, page_for_offset, options.max_chars)
    seen = {draft.segment.number for draft in drafts}

    if scan.max_number > 0 and not disable_heuristics:
        drafts.extend(_gap_drafts(text, scan, seen, page_for_offset, options))

    if not drafts:
        snippet = text[: options.fallback_intro_chars].strip()
        return [Segment(label=INTRO_LABEL, number=0, text=snippet, page_hint=1)]

    drafts.sort(key=lambda draft: (draft.offset, draft.segment.number))
    _cut_at_next_heading(text, drafts)
    first_offset = min((draft.offset for draft in drafts if not draft.placeholder), default=drafts[0].offset)
    intro = _intro_draft(text, first_offset, options)
    if intro is not None:
        drafts.insert(0, intro)
    return [draft.segment for draft in drafts]


def summarize_segments(segments: Sequence[Segment], max_items: Optional[int] = 5, width: int = 80) -> List[str]:
    """One line per segment, for dry runs in a terminal."""
    selected = segments if max_items is None else segments[:max_items]
    lines = []
    for segment in selected:
        preview = segment.text.replace("\n", " ")
        if len(preview) > width:
            preview = preview[:width] + "…"
        lines.append(f"[p.{segment.page_hint}] {segment.label} ({segment.number}): {preview}")
    return lines
