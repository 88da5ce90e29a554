"""
Update trigger: keep `updated_at` fresh after every change to an event.

The database fires it. `install_sql()` builds an AFTER UPDATE row trigger
that sends `pg_notify(<channel>, id)` whenever a content column changes.
A worker running `listen()` receives each notification and stamps a new
server timestamp through `EventService.refresh_updated_at`.

The WHEN clause compares content columns only. The worker's own write
changes `updated_at` and nothing else, so it never fires the trigger again.

Failures are logged and dropped: nobody is waiting on this work, and one
bad notification must not stop the listener.

Run it next to the API:
    python trigger_events.py
"""

import logging
from typing import Optional

from psycopg import sql

from db import get_conn
from repo_events import EventRepo
from service_events import EventService
from settings import settings

logger = logging.getLogger(__name__)


def install_sql(table: Optional[str] = None, channel: Optional[str] = None) -> sql.Composed:
    """DDL for the notify function and the trigger on `table`."""

    table = table or settings.events_table
    channel = channel or settings.update_channel
    names = {
        "table": sql.Identifier(table),
        "fn": sql.Identifier(f"{table}_notify_updated"),
        "trg": sql.Identifier(f"{table}_updated"),
        "channel": sql.Literal(channel),
    }
    return sql.SQL(
        """
CREATE OR REPLACE FUNCTION {fn}() RETURNS trigger AS $$
BEGIN
    PERFORM pg_notify({channel}, NEW.id);
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS {trg} ON {table};

CREATE TRIGGER {trg}
AFTER UPDATE ON {table}
FOR EACH ROW
WHEN (
    (OLD.title, OLD.description, OLD.date, OLD.location, OLD.organizer, OLD.event_type)
    IS DISTINCT FROM
    (NEW.title, NEW.description, NEW.date, NEW.location, NEW.organizer, NEW.event_type)
)
EXECUTE FUNCTION {fn}();
"""
    ).format(**names)


def on_event_updated(service: EventService, event_id: str) -> None:
    """Refresh `updatedAt` on `event_id`. Never raises."""

    try:
        service.refresh_updated_at(event_id)
        logger.debug("Refreshed updatedAt for event %s", event_id)
    except Exception:
        logger.error("Error updating `updatedAt` field on update of %s", event_id, exc_info=True)


def listen(service: EventService, channel: Optional[str] = None) -> None:
    """Block on LISTEN and dispatch every notification to `on_event_updated`."""

    channel = channel or settings.update_channel
    with get_conn(autocommit=True) as conn:
        conn.execute(sql.SQL("LISTEN {}").format(sql.Identifier(channel)))
        logger.info("Listening for event updates on channel %s", channel)
        for notify in conn.notifies():
            on_event_updated(service, notify.payload)


if __name__ == "__main__":
    import logging_config  # noqa: F401

    try:
        listen(EventService(EventRepo()))
    except KeyboardInterrupt:
        logger.info("Update trigger stopped")
