from unittest.mock import MagicMock

import pytest

from regulativa.loader.repository import SegmentRepository
from regulativa.segmenter import Segment


def _query(rows):
    """Chainable PostgREST query stub returning ``rows`` on execute()."""
    query = MagicMock()
    for method in ("select", "order", "eq", "in_", "range", "delete", "insert", "update"):
        getattr(query, method).return_value = query
    query.execute.return_value.data = rows
    return query


@pytest.fixture
def segments():
    return [
        Segment(label="Uvod", number=0, text="Uvod", page_hint=1),
        Segment(label="Član 1", number=1, text="Član 1. A.", page_hint=2),
    ]


def test_replace_segments_deletes_then_inserts(segments):
    client = MagicMock()
    query = _query([{"id": 1}, {"id": 2}])
    client.table.return_value = query

    assert SegmentRepository(client).replace_segments(7, segments) == 2

    names = [call[0] for call in query.mock_calls]
    assert names.index("delete") < names.index("insert")
    query.eq.assert_any_call("law_id", 7)
    payload = query.insert.call_args[0][0]
    assert payload[1] == {
        "law_id": 7,
        "segment_type": "article",
        "label": "Član 1",
        "number": 1,
        "text": "Član 1. A.",
        "page_hint": 2,
    }


def test_replace_with_no_segments_only_deletes():
    client = MagicMock()
    query = _query([])
    client.table.return_value = query

    assert SegmentRepository(client).replace_segments(7, []) == 0
    query.delete.assert_called_once()
    query.insert.assert_not_called()


def test_failed_insert_raises(segments):
    client = MagicMock()
    client.table.return_value = _query([])
    with pytest.raises(RuntimeError):
        SegmentRepository(client).replace_segments(7, segments)


def test_fetch_laws_with_limit_and_offset():
    client = MagicMock()
    query = _query([{"id": 11}])
    client.table.return_value = query

    laws = SegmentRepository(client).fetch_laws("RS", limit=50, offset=10)
    assert laws == [{"id": 11}]
    client.table.assert_called_with("laws")
    query.eq.assert_called_once_with("jurisdiction", "RS")
    query.range.assert_called_once_with(10, 59)


def test_fetch_laws_by_id_ignores_limit():
    client = MagicMock()
    query = _query([{"id": 3}])
    client.table.return_value = query

    SegmentRepository(client).fetch_laws(None, limit=50, law_ids=[3])
    query.in_.assert_called_once_with("id", [3])
    query.range.assert_not_called()
    query.eq.assert_not_called()


def test_fetch_laws_without_segments():
    client = MagicMock()
    client.table.return_value = _query(
        [
            {"id": 1, "segments": [{"count": 4}]},
            {"id": 2, "segments": [{"count": 0}]},
            {"id": 3, "segments": []},
        ]
    )
    missing = SegmentRepository(client).fetch_laws_without_segments("FBIH")
    assert [law["id"] for law in missing] == [2, 3]
    assert "segments" not in missing[0]


def test_count_segments_by_jurisdiction():
    client = MagicMock()
    client.table.return_value = _query(
        [
            {"jurisdiction": "RS", "segments": [{"count": 4}]},
            {"jurisdiction": "RS", "segments": [{"count": 1}]},
            {"jurisdiction": "BRCKO", "segments": [{"count": 0}]},
        ]
    )
    assert SegmentRepository(client).count_segments_by_jurisdiction() == {"RS": 5, "BRCKO": 0}


def test_fetch_segment_texts_filters_by_jurisdiction():
    client = MagicMock()
    query = _query([{"id": 1, "text": "Član 1.", "laws": {"jurisdiction": "RS"}}])
    client.table.return_value = query

    rows = SegmentRepository(client).fetch_segment_texts("RS")
    assert rows == [{"id": 1, "text": "Član 1."}]
    query.eq.assert_called_once_with("laws.jurisdiction", "RS")


def test_update_segment_text():
    client = MagicMock()
    query = _query([])
    client.table.return_value = query

    SegmentRepository(client).update_segment_text(5, "Član 1.")
    query.update.assert_called_once_with({"text": "Član 1."})
    query.eq.assert_called_once_with("id", 5)
