"""
Repository: SQL operations for the events table.

This file contains only DB interaction code. It maps event fields to SQL
parameters and converts DB rows to plain Python dicts ("documents")
suitable for JSON responses. Keep business rules out of this module.

Important notes:
- The table name comes from `settings.events_table` and is always quoted
  through `psycopg.sql.Identifier`.
- `id` is assigned by the database (`gen_random_uuid()`) and returned as
  an opaque string.
- Every insert and update stamps `updated_at = now()` so the stored value
  follows the database clock, not the caller's.
- Columns holding NULL are left out of the returned document, so a field
  overwritten with nothing reads back as absent.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from psycopg import sql

from db import get_conn
from settings import settings


# document field -> column
COLUMNS = {
    "title": "title",
    "description": "description",
    "date": "date",
    "location": "location",
    "organizer": "organizer",
    "eventType": "event_type",
}

SELECT_COLUMNS = "id, title, description, date, location, organizer, event_type, updated_at"


def _table() -> sql.Identifier:
    return sql.Identifier(settings.events_table)


def _to_document(row: Dict[str, Any]) -> Dict[str, Any]:
    doc: Dict[str, Any] = {"id": str(row["id"])}
    for field, column in COLUMNS.items():
        if row.get(column) is not None:
            doc[field] = row[column]
    if row.get("updated_at") is not None:
        doc["updatedAt"] = row["updated_at"]
    return doc


class EventRepo:
    """DB access only. No business logic here.

    Responsibilities:
    - Map event fields -> SQL parameters
    - Execute queries and return plain dict documents
    - Keep transaction/commit boundaries local and explicit
    """

    def add(self, fields: Dict[str, Any]) -> str:
        """Insert one event and return its generated id."""

        query = sql.SQL(
            "INSERT INTO {} (title, description, date, location, organizer, event_type, updated_at) "
            "VALUES (%s, %s, %s, %s, %s, %s, now()) RETURNING id"
        ).format(_table())
        params = tuple(fields.get(f) for f in COLUMNS)
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                new_id = cur.fetchone()["id"]
            conn.commit()
        return str(new_id)

    def list_all(self) -> List[Dict[str, Any]]:
        """Return every event, in whatever order the database yields them."""

        query = sql.SQL("SELECT " + SELECT_COLUMNS + " FROM {}").format(_table())
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(query)
                return [_to_document(r) for r in cur.fetchall()]

    def get(self, event_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one event by id, or None when it does not exist."""

        query = sql.SQL("SELECT " + SELECT_COLUMNS + " FROM {} WHERE id = %s").format(_table())
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (event_id,))
                row = cur.fetchone()
        return _to_document(row) if row else None

    def update(self, event_id: str, fields: Dict[str, Any]) -> None:
        """Overwrite every content field of `event_id`.

        Fields missing from `fields` are written as NULL. Updating an id
        that does not exist touches no rows and is not an error.
        """

        query = sql.SQL(
            "UPDATE {} SET title = %s, description = %s, date = %s, location = %s, "
            "organizer = %s, event_type = %s, updated_at = now() WHERE id = %s"
        ).format(_table())
        params = tuple(fields.get(f) for f in COLUMNS) + (event_id,)
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
            conn.commit()

    def delete(self, event_id: str) -> None:
        """Hard-delete `event_id`. Deleting a missing id is a no-op."""

        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(_table())
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (event_id,))
            conn.commit()

    def query(
        self,
        event_type: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Return events matching every given condition.

        `event_type` is an equality match; `date_from`/`date_to` bound a
        half-open window `[date_from, date_to)` on the event date.
        """

        conditions = []
        params: List[Any] = []
        if event_type is not None:
            conditions.append(sql.SQL("event_type = %s"))
            params.append(event_type)
        if date_from is not None:
            conditions.append(sql.SQL("date >= %s"))
            params.append(date_from)
        if date_to is not None:
            conditions.append(sql.SQL("date < %s"))
            params.append(date_to)

        query = sql.SQL("SELECT " + SELECT_COLUMNS + " FROM {}").format(_table())
        if conditions:
            query = query + sql.SQL(" WHERE ") + sql.SQL(" AND ").join(conditions)

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [_to_document(r) for r in cur.fetchall()]

    def touch(self, event_id: str) -> None:
        """Stamp `updated_at` with the database clock."""

        query = sql.SQL("UPDATE {} SET updated_at = now() WHERE id = %s").format(_table())
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (event_id,))
            conn.commit()

    def ping(self) -> None:
        """Lightweight DB health check. Raises on error.

        Used by the top-level `/health` endpoint to validate DB reachability.
        """

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
