"""Detection of article headings ("Član 7.", "Члан 7", "Čl. 7 -")."""

from __future__ import annotations

import logging
import re
import textwrap
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Pattern, Tuple

from .normalizer import WS_CLASS

WS = WS_CLASS
TERMINAL = r"[.\-:–—]"
UPPER_CLASS = "[A-ZČĆŠŽĐА-ЯЈЉЊЂЋЏ]"

_LATIN_TOKENS = (
    rf"[ČC]{WS}*l{WS}*a{WS}*n(?:{WS}*a{WS}*k)?",
    rf"[ČC]{WS}*l{WS}*\.",
)
_CYRILLIC_TOKENS = (
    rf"Ч{WS}*л{WS}*а{WS}*н(?:{WS}*а{WS}*к)?",
    rf"Ч{WS}*л{WS}*\.",
)
HEADING_TOKEN = "(?P<token>" + "|".join(_LATIN_TOKENS + _CYRILLIC_TOKENS) + ")"

# Start of text or start of a line, indentation allowed.
LINE_START = r"(?:\A|(?<=\n))[ \t]*"

STRICT_GLOBAL_RE = re.compile(rf"{HEADING_TOKEN}{WS}*(?P<number>\d{{1,3}}){TERMINAL}", re.IGNORECASE)
PERMISSIVE_GLOBAL_RE = re.compile(
    rf"(?<![^\W\d_]){HEADING_TOKEN}{WS}*(?P<number>\d{{1,3}})(?!\d){WS}*{TERMINAL}?",
    re.IGNORECASE,
)
CYRILLIC_HEADING_RE = re.compile(rf"Ч{WS}*л{WS}*а{WS}*н", re.IGNORECASE)


class Script(Enum):
    LATIN = "latin"
    CYRILLIC = "cyrillic"

    @property
    def article_word(self) -> str:
        return "Члан" if self is Script.CYRILLIC else "Član"


@dataclass(frozen=True)
class HeadingMatch:
    char_offset: int
    article_number: int
    script: Script


@dataclass
class HeadingScan:
    """Result of locating headings in one document."""

    matches: List[HeadingMatch] = field(default_factory=list)
    max_number: int = 0
    missing: List[int] = field(default_factory=list)
    document_script: Script = Script.LATIN
    fallback: bool = False


def _script_of(token: str) -> Script:
    return Script.CYRILLIC if token[:1] in ("Ч", "ч") else Script.LATIN


def _strict(n: int) -> Pattern:
    return re.compile(rf"{LINE_START}{HEADING_TOKEN}{WS}*{n}{TERMINAL}", re.IGNORECASE)


def _loose(n: int) -> Pattern:
    return re.compile(rf"{LINE_START}{HEADING_TOKEN}{WS}*{n}{WS}*{TERMINAL}", re.IGNORECASE)


def _no_dot(n: int) -> Pattern:
    return re.compile(rf"{LINE_START}{HEADING_TOKEN}{WS}*{n}(?!\d){WS}+", re.IGNORECASE)


def _inline_before_uppercase(n: int) -> Pattern:
    return re.compile(
        rf"(?:\A|(?<={WS})){HEADING_TOKEN}{WS}*{n}{WS}+(?=(?-i:{UPPER_CLASS}))",
        re.IGNORECASE,
    )


def _inline_no_dot(n: int) -> Pattern:
    return re.compile(rf"{HEADING_TOKEN}{WS}*{n}(?!\d){WS}+", re.IGNORECASE)


def _any_heading(n: int) -> Pattern:
    return re.compile(rf"{HEADING_TOKEN}{WS}*{n}(?!\d)", re.IGNORECASE)


# Order matters: the first pattern that matches decides where article n starts.
CASCADE: Tuple[Tuple[str, Callable[[int], Pattern]], ...] = (
    ("strict", _strict),
    ("loose", _loose),
    ("no_dot", _no_dot),
    ("inline_uppercase", _inline_before_uppercase),
    ("inline_no_dot", _inline_no_dot),
)


def _to_match(match: re.Match, number: int) -> HeadingMatch:
    return HeadingMatch(
        char_offset=match.start("token"),
        article_number=number,
        script=_script_of(match.group("token")),
    )


def estimate_max_article(text: str) -> int:
    """Highest article number among strictly punctuated headings, 0 if none."""
    numbers = {int(m.group("number")) for m in STRICT_GLOBAL_RE.finditer(text)}
    return max(numbers) if numbers else 0


def find_article(text: str, number: int) -> Optional[HeadingMatch]:
    """Search the heading of one article with patterns of decreasing strictness."""
    for name, build in CASCADE:
        match = build(number).search(text)
        if match:
            logging.debug("Article %s located by %s pattern at %s.", number, name, match.start("token"))
            return _to_match(match, number)
    return None


def find_heading_anywhere(text: str, number: int) -> Optional[HeadingMatch]:
    """Last-resort search: heading token followed by the number, nothing else required."""
    match = _any_heading(number).search(text)
    return _to_match(match, number) if match else None


def _unique_by_number(matches: List[HeadingMatch]) -> List[HeadingMatch]:
    """First match per article number. Number 0 is reserved for the intro and never kept."""
    seen = set()
    unique = []
    for match in matches:
        if match.article_number in seen or match.article_number == 0:
            continue
        seen.add(match.article_number)
        unique.append(match)
    return unique


def document_script(text: str, matches: List[HeadingMatch]) -> Script:
    if any(m.script is Script.CYRILLIC for m in matches) or CYRILLIC_HEADING_RE.search(text):
        return Script.CYRILLIC
    return Script.LATIN


def scan_headings(text: str) -> HeadingScan:
    """Estimate the article ceiling, then locate articles 1..ceiling one by one."""
    max_number = estimate_max_article(text)

    if max_number == 0:
        found = [
            _to_match(m, int(m.group("number")))
            for m in PERMISSIVE_GLOBAL_RE.finditer(text)
        ]
        matches = _unique_by_number(found)
        return HeadingScan(
            matches=matches,
            max_number=0,
            missing=[],
            document_script=document_script(text, matches),
            fallback=True,
        )

    located: List[HeadingMatch] = []
    missing: List[int] = []
    for number in range(1, max_number + 1):
        heading = find_article(text, number)
        if heading is None:
            missing.append(number)
        else:
            located.append(heading)

    # Document order, not numeric order.
    located.sort(key=lambda m: m.char_offset)
    logging.debug(
        "Heading scan: max=%s located=%s missing=%s.",
        max_number,
        len(located),
        len(missing),
    )
    return HeadingScan(
        matches=located,
        max_number=max_number,
        missing=missing,
        document_script=document_script(text, located),
    )


def locate_headings(text: str) -> List[HeadingMatch]:
    """Headings sorted by character offset, one per article number."""
    return scan_headings(text).matches


def describe_heuristics() -> str:
    """Return a textual description of the active regexes and rules."""
    patterns: Dict[str, str] = {name: build(7).pattern for name, build in CASCADE}
    cascade = "\n".join(f"        - {name} (n=7): {pattern}" for name, pattern in patterns.items())
    return textwrap.dedent(
        f"""
        Heading regexes used by the article segmenter:
        - STRICT_GLOBAL_RE: {STRICT_GLOBAL_RE.pattern}
        - PERMISSIVE_GLOBAL_RE: {PERMISSIVE_GLOBAL_RE.pattern}
        - Per-article cascade, first match wins:
{cascade}
        - Gap fill (n=7): {_any_heading(7).pattern}
        Rules: the highest strictly punctuated article number sets the ceiling; each article 1..ceiling is searched on its own through the cascade; without any strict heading every permissive match is accepted; segments are cut in document order; the first occurrence of a number wins; text before the first article becomes 'Uvod'; a document without headings yields a single 'Uvod' segment.
        """
    ).strip()
