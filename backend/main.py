import logging_config  # noqa: F401  (configures logging on import)

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from pydantic import ValidationError

from models import EventIn
from repo_events import EventRepo
from responses import failure, method_not_allowed, now_millis, raw, success
from service_events import EventService, InvalidEventError

logger = logging.getLogger(__name__)

app = FastAPI(title="Events Gateway")

# Every route takes every method and checks it itself, so a wrong method
# still gets the failure envelope instead of the framework's default body.
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# One repo + service for the whole process. Routes receive it through
# `get_service` so tests can swap in a fake via `app.dependency_overrides`.
repo = EventRepo()
svc = EventService(repo)


def get_service() -> EventService:
    return svc


async def event_body(request: Request) -> Optional[EventIn]:
    """Parse the JSON body into `EventIn`.

    An empty body is an empty event; a body that is not a JSON object of
    strings or numbers gives None so the route can answer 400.
    """

    body = await request.body()
    if not body:
        return EventIn()
    try:
        return EventIn.model_validate_json(body)
    except ValidationError:
        return None


def _invalid(e: InvalidEventError, timestamp: int):
    return failure(400, e.message, e.details, timestamp)


def _bad_body(timestamp: int):
    return failure(400, "Invalid request body", "Request body must be a JSON object", timestamp)


@app.get("/health")
def health(svc: EventService = Depends(get_service)):
    try:
        svc.health_check()
        return {"ok": True}
    except Exception:
        logger.warning("DB health check failed", exc_info=True)
        return failure(500, "Health check failed", "Database is unreachable", now_millis())


@app.api_route("/createEvent", methods=ANY_METHOD)
def create_event(
    request: Request,
    event: Optional[EventIn] = Depends(event_body),
    svc: EventService = Depends(get_service),
):
    time_now = now_millis()
    if request.method != "POST":
        return method_not_allowed("POST", time_now)
    if event is None:
        return _bad_body(time_now)
    try:
        return success(201, svc.create_event(event), time_now)
    except InvalidEventError as e:
        return _invalid(e, time_now)
    except Exception:
        logger.warning("Error adding event", exc_info=True)
        return failure(500, "Error creating event", "Unable to create new event", time_now)


@app.api_route("/getAllEvents", methods=ANY_METHOD)
def get_all_events(request: Request, svc: EventService = Depends(get_service)):
    time_now = now_millis()
    if request.method != "GET":
        return method_not_allowed("GET", time_now)
    try:
        # 201 is what existing clients of this endpoint expect.
        return success(201, {"events": svc.list_events()}, time_now)
    except Exception:
        logger.warning("Error fetching events", exc_info=True)
        return failure(500, "Error fetching all event", "Unable to get all events", time_now)


@app.api_route("/getEventById", methods=ANY_METHOD)
def get_event_by_id(
    request: Request,
    event_id: Optional[str] = Query(None, alias="id"),
    svc: EventService = Depends(get_service),
):
    time_now = now_millis()
    if request.method != "GET":
        return method_not_allowed("GET", time_now)
    try:
        event = svc.get_event(event_id)
        return success(200, event or {}, time_now)
    except InvalidEventError as e:
        return _invalid(e, time_now)
    except Exception:
        logger.warning("Error fetching event %s", event_id, exc_info=True)
        return failure(500, "Error fetching event", "Unable to get event", time_now)


@app.api_route("/updateEvent", methods=ANY_METHOD)
def update_event(
    event_id: Optional[str] = Query(None, alias="id"),
    event: Optional[EventIn] = Depends(event_body),
    svc: EventService = Depends(get_service),
):
    time_now = now_millis()
    if event is None:
        return _bad_body(time_now)
    try:
        svc.update_event(event_id, event)
        return raw(200, {"message": "Event updated"})
    except InvalidEventError as e:
        return _invalid(e, time_now)
    except Exception:
        logger.warning("Error updating event %s", event_id, exc_info=True)
        return failure(500, "Error updating event", "Unable to update event", time_now)


@app.api_route("/deleteEvent", methods=ANY_METHOD)
def delete_event(
    event_id: Optional[str] = Query(None, alias="id"),
    svc: EventService = Depends(get_service),
):
    time_now = now_millis()
    try:
        svc.delete_event(event_id)
        return success(200, {"message": "Event deleted"}, time_now)
    except InvalidEventError as e:
        return _invalid(e, time_now)
    except Exception:
        logger.warning("Error deleting event %s", event_id, exc_info=True)
        return failure(500, "Error deleting event", "Unable to delete event", time_now)


@app.api_route("/filterEvents", methods=ANY_METHOD)
def filter_events(
    event_type: Optional[str] = Query(None, alias="eventType"),
    date: Optional[str] = None,
    svc: EventService = Depends(get_service),
):
    time_now = now_millis()
    try:
        # Bare array, no envelope: clients of this endpoint read the list directly.
        return raw(200, svc.filter_events(event_type=event_type, date=date))
    except InvalidEventError as e:
        return _invalid(e, time_now)
    except Exception:
        logger.warning("Error filtering events", exc_info=True)
        return failure(500, "Error filtering event", "Unable to filter event", time_now)
