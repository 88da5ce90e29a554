"""
Service / facade layer.

This module implements validation and normalization before any DB
interaction. It is free of SQL. It calls `EventRepo` to perform
database operations. Every handler in `main` and the update trigger go
through this service.

Key responsibilities:
- required-field checks on create (falsy counts as missing)
- parsing `date` strings into UTC timestamps
- turning a filter date into a whole-day window
- raising `InvalidEventError` for anything refused before the store call
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from models import EventIn, REQUIRED_FIELDS, parse_event_date
from repo_events import EventRepo

logger = logging.getLogger(__name__)


class InvalidEventError(ValueError):
    """Request data rejected before reaching the store.

    `message` is the short summary and `details` the human-readable
    explanation; both go straight into the failure envelope.
    """

    def __init__(self, message: str, details: str):
        super().__init__(details)
        self.message = message
        self.details = details


def _require_id(event_id: Optional[str]) -> str:
    if not event_id:
        raise InvalidEventError("Missing required fields", "Please provide an event id")
    return event_id


def _parse_date(value: Optional[str]):
    try:
        return parse_event_date(value)
    except ValueError as e:
        raise InvalidEventError("Invalid date", str(e))


class EventService:
    """Validation + normalization in front of `EventRepo`.

    Example usage:
        repo = EventRepo()
        svc = EventService(repo)
        svc.create_event(EventIn(title="Meetup", ...))
    """

    def __init__(self, repo: EventRepo):
        self.repo = repo

    def create_event(self, event: EventIn) -> Dict[str, Any]:
        """Validate and persist a new event.

        Returns the generated id together with the fields exactly as the
        caller sent them (the date stays the submitted string).

        Raises:
        - `InvalidEventError` when a required field is missing or empty,
          or when `date` cannot be parsed
        """

        submitted = event.model_dump()
        missing = [f for f in REQUIRED_FIELDS if not submitted.get(f)]
        if missing:
            logger.info("Rejecting create, missing fields: %s", ", ".join(missing))
            raise InvalidEventError(
                "Missing required fields", "Please provide all required fields"
            )

        fields = dict(submitted, date=_parse_date(event.date))
        new_id = self.repo.add(fields)
        logger.info("Created event %s", new_id)
        return {"id": new_id, **submitted}

    def list_events(self) -> List[Dict[str, Any]]:
        return self.repo.list_all()

    def get_event(self, event_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """Return the event or None. A missing event is not an error."""

        return self.repo.get(_require_id(event_id))

    def update_event(self, event_id: Optional[str], event: EventIn) -> None:
        """Overwrite every content field of an event.

        Fields absent from `event` are cleared rather than preserved. The
        update is attempted whether or not the id exists.
        """

        event_id = _require_id(event_id)
        fields = dict(event.model_dump(), date=_parse_date(event.date))
        self.repo.update(event_id, fields)
        logger.info("Updated event %s", event_id)

    def delete_event(self, event_id: Optional[str]) -> None:
        event_id = _require_id(event_id)
        self.repo.delete(event_id)
        logger.info("Deleted event %s", event_id)

    def filter_events(
        self, event_type: Optional[str] = None, date: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Return events matching `event_type` and/or the calendar day of `date`.

        At least one filter is required. An unparsable date matches
        nothing, so the result is an empty list rather than an error.
        """

        if not event_type and not date:
            raise InvalidEventError(
                "Missing required fields", "Please provide at least one filter"
            )

        date_from = date_to = None
        if date:
            try:
                day = parse_event_date(date)
            except ValueError:
                logger.info("Filter date %r is not a valid date, nothing matches", date)
                return []
            date_from = day.replace(hour=0, minute=0, second=0, microsecond=0)
            date_to = date_from + timedelta(days=1)

        return self.repo.query(
            event_type=event_type or None, date_from=date_from, date_to=date_to
        )

    def refresh_updated_at(self, event_id: str) -> None:
        """Stamp a fresh server timestamp on `event_id`."""

        self.repo.touch(event_id)

    def health_check(self) -> None:
        """Perform a lightweight DB ping via the repository."""

        self.repo.ping()
