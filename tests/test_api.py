from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

import pytest

from src.worktime.worktime.calendars.model import CalendarConfig
from src.worktime.worktime.container import wire
from src.worktime.worktime.core.enums import TaskStatus
from src.worktime.worktime.core.exceptions import NotFoundError
from src.worktime.worktime.main import create_app
from src.worktime.worktime.tasks.model import Task

OFFICE = CalendarConfig(working_days=[1, 2, 3, 4, 5], start_time="09:00", end_time="17:00", timezone="UTC")
NIGHT = CalendarConfig(working_days=[1, 2, 3, 4, 5], start_time="22:00", end_time="06:00", timezone="UTC")


def utc(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 1, day, hour, minute, tzinfo=timezone.utc)


class InMemoryCalendarRepo:
    def __init__(self):
        self.calendars = {"dev-1": OFFICE, "dev-night": NIGHT, "dev-free": None}

    def get_for_developer(self, developer_id: str) -> Optional[CalendarConfig]:
        if developer_id == "dev-boom":
            raise RuntimeError("connection lost")
        if developer_id not in self.calendars:
            raise NotFoundError("Developer not found")
        return self.calendars[developer_id]


class InMemoryLeaveRepo:
    def list_approved(self, *, developer_id, start=None, end=None):
        return []


class InMemoryTaskRepo:
    def __init__(self):
        self.tasks = {
            "T1": Task("T1", 1, "Build login", TaskStatus.IN_PROGRESS, developer_id="dev-1", sla_deadline=utc(6, 17)),
            "T2": Task("T2", 2, "Fix report", TaskStatus.ASSIGNED, developer_id="dev-1", ack_deadline=utc(6, 17)),
        }

    def get_by_id(self, task_id):
        return self.tasks.get(task_id)

    def list_awaiting_acknowledgement(self):
        return [t for t in self.tasks.values() if t.status == TaskStatus.ASSIGNED and not t.late_acknowledgement]

    def mark_late_acknowledgement(self, task_id):
        self.tasks[task_id] = replace(self.tasks[task_id], late_acknowledgement=True)
        return True


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    container = wire(
        calendars_repo=InMemoryCalendarRepo(),
        leaves_repo=InMemoryLeaveRepo(),
        tasks_repo=InMemoryTaskRepo(),
    )
    app = create_app(container=container)
    return app.test_client()


def test_sla_deadline_endpoint_returns_deadline(client):
    resp = client.post(
        "/api/sla-deadline",
        json={"developer_id": "dev-1", "start_time": "2025-01-06T09:00:00Z", "sla_hours": 8},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["start_time"] == "2025-01-06T09:00:00+00:00"
    assert body["deadline"] == "2025-01-06T17:00:00+00:00"


def test_sla_hours_default_from_settings(client):
    resp = client.post("/api/sla-deadline", json={"developer_id": "dev-1", "start_time": "2025-01-06T15:00:00Z"})

    assert resp.status_code == 200
    assert resp.get_json()["sla_hours"] == 8.0
    assert resp.get_json()["deadline"] == "2025-01-07T15:00:00+00:00"


@pytest.mark.parametrize(
    "payload, status",
    [
        ({"developer_id": "dev-1", "sla_hours": -1}, 400),
        ({"developer_id": "dev-1", "start_time": "yesterday"}, 400),
        ({}, 400),
        ({"developer_id": "dev-free"}, 400),
        ({"developer_id": "dev-404"}, 404),
        ({"developer_id": "dev-night"}, 422),
    ],
)
def test_sla_deadline_errors_map_to_status_codes(client, payload, status):
    resp = client.post("/api/sla-deadline", json=payload)

    assert resp.status_code == status
    assert resp.get_json()["error"]


def test_missing_developer_and_missing_calendar_are_told_apart(client):
    missing_dev = client.post("/api/sla-deadline", json={"developer_id": "dev-404"})
    missing_cal = client.post("/api/sla-deadline", json={"developer_id": "dev-free"})

    assert (missing_dev.status_code, missing_dev.get_json()) == (404, {"error": "Developer not found"})
    assert (missing_cal.status_code, missing_cal.get_json()) == (400, {"error": "Developer has no availability calendar"})


def test_unexpected_failure_returns_generic_500(client):
    resp = client.post("/api/sla-deadline", json={"developer_id": "dev-boom"})

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "SLA calculation failed. Please try again."}


def test_ack_deadline_endpoint(client):
    resp = client.post("/api/ack-deadline", json={"developer_id": "dev-1", "assigned_at": "2025-01-06T16:50:00Z"})

    assert resp.status_code == 200
    assert resp.get_json()["deadline"] == "2025-01-07T09:20:00+00:00"


def test_task_sla_status_endpoint(client):
    resp = client.get("/api/tasks/T1/sla-status?now=2025-01-06T14:00:00Z")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["task_number"] == 1
    assert body["priority"] == 5
    assert body["priority_name"] == "active"
    assert body["sla"]["remaining_minutes"] == 180
    assert body["sla"]["label"] == "3h 0m left"


def test_task_without_sla_has_null_status(client):
    resp = client.get("/api/tasks/T2/sla-status?now=2025-01-06T14:00:00Z")

    assert resp.status_code == 200
    assert resp.get_json()["sla"] is None
    assert resp.get_json()["priority_name"] == "awaiting_acknowledgement"


def test_unknown_task_is_404(client):
    resp = client.get("/api/tasks/T9/sla-status")

    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Task not found"}


def test_check_late_acknowledgements_endpoint(client):
    resp = client.post("/api/tasks/check-late-acknowledgements", json={"now": "2025-01-06T17:30:00Z"})

    assert resp.status_code == 200
    assert resp.get_json() == {
        "success": True,
        "message": "Flagged 1 late acknowledgements",
        "count": 1,
        "task_ids": ["T2"],
    }

    again = client.post("/api/tasks/check-late-acknowledgements", json={"now": "2025-01-06T17:30:00Z"})
    assert again.get_json()["count"] == 0
