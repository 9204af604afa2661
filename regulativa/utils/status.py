"""Per-law segmentation status, used for operator reporting."""

from __future__ import annotations

from typing import Sequence

from ..segmenter.builder import INTRO_LABEL, Segment

STATUS_EMPTY = "empty"
STATUS_INTRO_ONLY = "intro_only"
STATUS_SEGMENTED = "segmented"


def resolve_status(segments: Sequence[Segment]) -> str:
    """Return ``empty``, ``intro_only`` (no article found) or ``segmented``."""
    if not segments:
        return STATUS_EMPTY
    if all(segment.number == 0 and segment.label == INTRO_LABEL for segment in segments):
        return STATUS_INTRO_ONLY
    return STATUS_SEGMENTED
