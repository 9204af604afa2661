"""Persistence of laws and article segments in Supabase."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterator, List, Optional, Sequence

from ..segmenter.builder import Segment
from ..utils.db import get_supabase_client

LAW_COLUMNS = "id, jurisdiction, title, path_pdf, text_content"
SEGMENT_TYPE = "article"
PAGE_SIZE = 1000


class SegmentRepository:
    """Reads laws and replaces their article segments."""

    def __init__(self, client=None) -> None:
        self.client = client or get_supabase_client()

    def _paged(self, build_query) -> Iterator[dict]:
        start = 0
        while True:
            response = build_query().range(start, start + PAGE_SIZE - 1).execute()
            rows = response.data or []
            yield from rows
            if len(rows) < PAGE_SIZE:
                return
            start += PAGE_SIZE

    def fetch_laws(
        self,
        jurisdiction: Optional[str],
        *,
        limit: Optional[int] = None,
        offset: int = 0,
        law_ids: Optional[List[int]] = None,
    ) -> List[dict]:
        query = self.client.table("laws").select(LAW_COLUMNS).order("id")
        if jurisdiction:
            query = query.eq("jurisdiction", jurisdiction)
        if law_ids:
            query = query.in_("id", law_ids)
        elif limit:
            query = query.range(offset, offset + limit - 1)
        response = query.execute()
        return response.data or []

    def fetch_laws_without_segments(self, jurisdiction: Optional[str], *, limit: Optional[int] = None) -> List[dict]:
        def build():
            query = self.client.table("laws").select(f"{LAW_COLUMNS}, segments(count)").order("id")
            if jurisdiction:
                query = query.eq("jurisdiction", jurisdiction)
            return query

        missing: List[dict] = []
        for row in self._paged(build):
            counts = row.pop("segments", None) or [{}]
            if not counts[0].get("count"):
                missing.append(row)
                if limit and len(missing) >= limit:
                    break
        return missing

    def replace_segments(self, law_id: int, segments: Sequence[Segment]) -> int:
        """Delete every stored segment of ``law_id`` and insert ``segments``."""
        self.client.table("segments").delete().eq("law_id", law_id).execute()
        if not segments:
            return 0
        payload = [
            {
                "law_id": law_id,
                "segment_type": SEGMENT_TYPE,
                "label": segment.label,
                "number": segment.number,
                "text": segment.text,
                "page_hint": segment.page_hint,
            }
            for segment in segments
        ]
        result = self.client.table("segments").insert(payload).execute()
        if not result.data:
            raise RuntimeError(f"Failed to insert segments for law {law_id}")
        return len(result.data)

    def fetch_segment_texts(self, jurisdiction: Optional[str]) -> List[dict]:
        def build():
            if jurisdiction:
                return (
                    self.client.table("segments")
                    .select("id, text, laws!inner(jurisdiction)")
                    .eq("laws.jurisdiction", jurisdiction)
                    .order("id")
                )
            return self.client.table("segments").select("id, text").order("id")

        return [{"id": row["id"], "text": row.get("text") or ""} for row in self._paged(build)]

    def update_segment_text(self, segment_id: int, text: str) -> None:
        self.client.table("segments").update({"text": text}).eq("id", segment_id).execute()

    def count_segments_by_jurisdiction(self) -> Dict[str, int]:
        def build():
            return self.client.table("laws").select("jurisdiction, segments(count)").order("id")

        totals: Counter = Counter()
        for row in self._paged(build):
            counts = row.get("segments") or [{}]
            totals[row.get("jurisdiction") or "?"] += counts[0].get("count") or 0
        return dict(totals)
