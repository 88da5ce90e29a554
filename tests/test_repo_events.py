"""SQL adapter tests with the psycopg connection mocked out."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from repo_events import EventRepo, _to_document


@pytest.fixture
def cursor():
    cur = MagicMock()
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    with patch("repo_events.get_conn") as mock_get_conn:
        mock_get_conn.return_value.__enter__.return_value = conn
        cur.conn = conn
        yield cur


def _params(cur):
    return cur.execute.call_args[0][1]


ROW = {
    "id": "abc",
    "title": "Meetup",
    "description": "d",
    "date": datetime(2024, 5, 1, tzinfo=timezone.utc),
    "location": "Hall A",
    "organizer": "Org",
    "event_type": "social",
    "updated_at": datetime(2024, 4, 1, tzinfo=timezone.utc),
}


def test_to_document_maps_columns():
    doc = _to_document(ROW)
    assert doc["id"] == "abc"
    assert doc["eventType"] == "social"
    assert doc["updatedAt"] == ROW["updated_at"]
    assert "event_type" not in doc


def test_to_document_drops_null_fields():
    doc = _to_document(dict(ROW, location=None, organizer=None))
    assert "location" not in doc
    assert "organizer" not in doc


def test_add_returns_generated_id(cursor):
    cursor.fetchone.return_value = {"id": "new-id"}
    fields = {
        "title": "Meetup", "description": "d", "date": ROW["date"],
        "location": "Hall A", "organizer": "Org", "eventType": "social",
    }
    assert EventRepo().add(fields) == "new-id"
    assert _params(cursor) == ("Meetup", "d", ROW["date"], "Hall A", "Org", "social")
    cursor.conn.commit.assert_called_once()


def test_get_missing_returns_none(cursor):
    cursor.fetchone.return_value = None
    assert EventRepo().get("ghost") is None
    assert _params(cursor) == ("ghost",)


def test_get_found(cursor):
    cursor.fetchone.return_value = ROW
    assert EventRepo().get("abc")["title"] == "Meetup"


def test_list_all_maps_rows(cursor):
    cursor.fetchall.return_value = [ROW, dict(ROW, id="def")]
    assert [d["id"] for d in EventRepo().list_all()] == ["abc", "def"]


def test_update_writes_null_for_missing(cursor):
    EventRepo().update("abc", {"title": "Renamed"})
    assert _params(cursor) == ("Renamed", None, None, None, None, None, "abc")
    cursor.conn.commit.assert_called_once()


def test_delete(cursor):
    EventRepo().delete("abc")
    assert _params(cursor) == ("abc",)
    cursor.conn.commit.assert_called_once()


def test_query_params_follow_filters(cursor):
    cursor.fetchall.return_value = []
    start = datetime(2024, 5, 1, tzinfo=timezone.utc)
    end = datetime(2024, 5, 2, tzinfo=timezone.utc)
    EventRepo().query(event_type="social", date_from=start, date_to=end)
    assert _params(cursor) == ["social", start, end]


def test_query_type_only(cursor):
    cursor.fetchall.return_value = [ROW]
    assert EventRepo().query(event_type="social")[0]["id"] == "abc"
    assert _params(cursor) == ["social"]


def test_touch(cursor):
    EventRepo().touch("abc")
    assert _params(cursor) == ("abc",)
    cursor.conn.commit.assert_called_once()
