"""Shared fixtures: an in-memory repository and a client wired to it."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from main import app, get_service
from service_events import EventService


class FakeEventRepo:
    """Dict-backed stand-in for `EventRepo` with the same method surface."""

    def __init__(self):
        self.docs: dict[str, dict] = {}
        self.calls: list[str] = []
        self._ids = itertools.count(1)

    def _store(self, event_id, fields):
        doc = {k: v for k, v in fields.items() if v is not None}
        doc["updatedAt"] = datetime.now(timezone.utc)
        self.docs[event_id] = doc

    def add(self, fields):
        self.calls.append("add")
        event_id = f"evt{next(self._ids)}"
        self._store(event_id, fields)
        return event_id

    def list_all(self):
        self.calls.append("list_all")
        return [{"id": i, **d} for i, d in self.docs.items()]

    def get(self, event_id):
        self.calls.append("get")
        doc = self.docs.get(event_id)
        return {"id": event_id, **doc} if doc is not None else None

    def update(self, event_id, fields):
        self.calls.append("update")
        if event_id in self.docs:
            self._store(event_id, fields)

    def delete(self, event_id):
        self.calls.append("delete")
        self.docs.pop(event_id, None)

    def query(self, event_type=None, date_from=None, date_to=None):
        self.calls.append("query")
        out = []
        for event_id, doc in self.docs.items():
            if event_type is not None and doc.get("eventType") != event_type:
                continue
            if date_from is not None and not (doc.get("date") and doc["date"] >= date_from):
                continue
            if date_to is not None and not (doc.get("date") and doc["date"] < date_to):
                continue
            out.append({"id": event_id, **doc})
        return out

    def touch(self, event_id):
        self.calls.append("touch")
        if event_id in self.docs:
            self.docs[event_id]["updatedAt"] = datetime.now(timezone.utc)

    def ping(self):
        self.calls.append("ping")


@pytest.fixture
def repo() -> FakeEventRepo:
    return FakeEventRepo()


@pytest.fixture
def service(repo) -> EventService:
    return EventService(repo)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def meetup() -> dict:
    return {
        "title": "Meetup",
        "description": "d",
        "date": "2024-05-01",
        "location": "Hall A",
        "organizer": "Org",
        "eventType": "social",
    }
