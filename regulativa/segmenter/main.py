"""CLI that segments stored laws into articles and writes them to Supabase."""

from __future__ import annotations

import argparse
import logging
import os
from collections import Counter
from typing import Dict, Iterable, List, Optional

from dotenv import load_dotenv

from ..extractor.documents import load_document
from ..extractor.errors import ExtractionError
from ..loader.repository import SegmentRepository
from ..utils import storage as storage_utils
from ..utils.status import resolve_status
from .builder import GapPolicy, Segment, SegmentationOptions, summarize_segments
from .engine import PlainText, RawDocument, segment_document
from .headings import describe_heuristics
from .normalizer import fix_heading_spacing

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

DEFAULT_LIMIT = 50


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logging.warning("Ignoring %s=%r, expected an integer.", name, value)
        return default


def _disabled_jurisdictions() -> set:
    raw = os.getenv("HEURISTICS_DISABLED_JURISDICTIONS", "BRCKO")
    return {item.strip().upper() for item in raw.split(",") if item.strip()}


def build_options(args: argparse.Namespace) -> SegmentationOptions:
    gap_policy = args.gap_policy or os.getenv("SEGMENT_GAP_POLICY", GapPolicy.SKIP.value)
    return SegmentationOptions(
        max_chars=args.max_chars or _env_int("SEGMENT_MAX_CHARS", 15000),
        intro_min_offset=_env_int("SEGMENT_INTRO_MIN_OFFSET", 50),
        intro_min_chars=_env_int("SEGMENT_INTRO_MIN_CHARS", 20),
        gap_policy=GapPolicy(gap_policy.strip().lower()),
    )


def heuristics_disabled(law: Dict, forced: bool) -> bool:
    if forced:
        return True
    return (law.get("jurisdiction") or "").upper() in _disabled_jurisdictions()


def load_law_document(law: Dict) -> RawDocument:
    """Source file when the law has one, otherwise the stored text."""
    path = law.get("path_pdf")
    text_content = law.get("text_content")
    if path:
        try:
            content, suffix = storage_utils.read_source(path)
            return load_document(content, suffix)
        except ExtractionError as exc:
            if not text_content:
                raise
            logging.warning("Law %s: %s Falling back to stored text.", law.get("id"), exc)
    if text_content:
        return PlainText(text=text_content)
    raise ExtractionError(f"Law {law.get('id')} has neither a source file nor stored text.")


def _print_summary(title: str, segments: List[Segment]) -> None:
    print(f"\n=== {title}: {len(segments)} segment(s), status {resolve_status(segments)} ===")
    for line in summarize_segments(segments, max_items=None):
        print(line)
    print("--- end ---\n")


def _run_file(path: str, options: SegmentationOptions, disable_heuristics: bool) -> None:
    document = load_document(path)
    segments = segment_document(document, disable_heuristics, options)
    _print_summary(path, segments)


def _run_fix_spacing(repo: SegmentRepository, jurisdiction: Optional[str], dry_run: bool) -> int:
    changed = 0
    rows = repo.fetch_segment_texts(jurisdiction)
    for row in rows:
        fixed = fix_heading_spacing(row["text"])
        if fixed == row["text"]:
            continue
        changed += 1
        if not dry_run:
            repo.update_segment_text(row["id"], fixed)
    logging.info(
        "Heading spacing: %s of %s segment(s) %s.",
        changed,
        len(rows),
        "would change" if dry_run else "updated",
    )
    return changed


def _run_report(repo: SegmentRepository) -> None:
    counts = repo.count_segments_by_jurisdiction()
    for jurisdiction, total in sorted(counts.items()):
        print(f"{jurisdiction}: {total}")


def _run_batch(repo: SegmentRepository, args: argparse.Namespace, options: SegmentationOptions) -> Counter:
    if args.only_missing:
        laws = repo.fetch_laws_without_segments(args.jurisdiction, limit=args.limit)
    else:
        law_ids = list(dict.fromkeys(args.law_id)) if args.law_id else None
        laws = repo.fetch_laws(args.jurisdiction, limit=args.limit, offset=args.offset, law_ids=law_ids)

    tally: Counter = Counter()
    if not laws:
        logging.warning("No laws found for the given criteria.")
        return tally

    logging.info("Segmenting %s law(s).", len(laws))
    for law in laws:
        law_id = law["id"]
        try:
            document = load_law_document(law)
            segments = segment_document(document, heuristics_disabled(law, args.disable_heuristics), options)
            status = resolve_status(segments)
            if args.dry_run:
                _print_summary(f"Law {law_id}", segments)
                inserted = len(segments)
            else:
                inserted = repo.replace_segments(law_id, segments)
        except Exception:  # noqa: BLE001
            logging.exception("Segmentation failed for law %s.", law_id)
            tally["failed"] += 1
            continue

        pages = len(getattr(document, "pages", ())) or 1
        logging.info("Law %s: %s page(s), %s segment(s), status %s.", law_id, pages, inserted, status)
        tally["processed"] += 1
        tally["segments"] += inserted
        tally[status] += 1

    logging.info(
        "Segmentation finished: %s processed, %s segments, %s failed%s.",
        tally["processed"],
        tally["segments"],
        tally["failed"],
        " (dry-run)" if args.dry_run else "",
    )
    return tally


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Split stored statutes into articles (Član / Члан).")
    parser.add_argument("--jurisdiction", help="Only laws of this jurisdiction (e.g. RS, FBiH, BRCKO).")
    parser.add_argument("--law-id", type=int, action="append", help="Specific law id (repeatable). Ignores --limit.")
    parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Maximum number of laws to process.")
    parser.add_argument("--offset", type=int, default=0, help="Skip this many laws (ordered by id).")
    parser.add_argument("--only-missing", action="store_true", help="Only laws that have no stored segments.")
    parser.add_argument("--disable-heuristics", action="store_true", help="Do not search for missing article numbers.")
    parser.add_argument(
        "--gap-policy",
        choices=[policy.value for policy in GapPolicy],
        help="What to do with article numbers that stay unresolved (default: SEGMENT_GAP_POLICY or skip).",
    )
    parser.add_argument("--max-chars", type=int, help="Maximum characters per article segment.")
    parser.add_argument("--dry-run", action="store_true", help="Print the segments without writing to the database.")
    parser.add_argument("--file", help="Segment a single local file and print the result (no database).")
    parser.add_argument("--describe-heuristics", action="store_true", help="Print the heading patterns and exit.")
    parser.add_argument("--fix-spacing", action="store_true", help="Repair spaced headings in stored segments.")
    parser.add_argument("--report", action="store_true", help="Print segment counts per jurisdiction.")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.describe_heuristics:
        print(describe_heuristics())
        return

    options = build_options(args)

    if args.file:
        _run_file(args.file, options, args.disable_heuristics)
        return

    repo = SegmentRepository()
    if args.report:
        _run_report(repo)
    elif args.fix_spacing:
        _run_fix_spacing(repo, args.jurisdiction, args.dry_run)
    else:
        _run_batch(repo, args, options)


if __name__ == "__main__":
    main()
