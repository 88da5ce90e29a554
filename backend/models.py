"""
Pydantic models and parsing helpers used across the backend.

Only input shapes belong here. The store hands documents back as plain
dicts (see `repo_events`), so there is no output model.

Guidelines:
- Every content field is optional at the type level. Presence is a
    business rule enforced by `EventService`, which answers with the
    gateway's own "Missing required fields" envelope instead of a 422.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime, timezone


REQUIRED_FIELDS = (
    "title",
    "description",
    "date",
    "location",
    "organizer",
    "eventType",
)


class EventIn(BaseModel):
        """Body of a create or update request.

        Fields:
        - `title`, `description`, `location`, `organizer`: free text.
        - `date`: ISO-8601 date or date-time string ("2024-05-01",
          "2024-05-01T18:00:00Z"). Other formats such as "May 1, 2024" are
          rejected as an invalid date. Stored as a timestamp.
        - `eventType`: category used by the filter endpoint.

        JSON numbers are accepted for any field and kept as their string form.
        """

        model_config = ConfigDict(coerce_numbers_to_str=True)

        title: Optional[str] = None
        description: Optional[str] = None
        date: Optional[str] = None
        location: Optional[str] = None
        organizer: Optional[str] = None
        eventType: Optional[str] = None


def parse_event_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Date-only values ("2024-05-01") become midnight UTC. Naive date-times
    are read as UTC. Raises `ValueError` for anything unparsable.
    """

    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
