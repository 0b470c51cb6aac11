from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest

from src.gym_console.gym_console.attendance.events import ChangeEvent, parse_change_payload
from src.gym_console.gym_console.attendance.model import AttendanceRecord, AttendanceWrite
from src.gym_console.gym_console.core.exceptions import (
    RemoteWriteError,
    SubscriptionTeardownError,
    TransientFetchError,
)
from src.gym_console.gym_console.realtime.transport import Subscription
from src.gym_console.gym_console.users.model import GymUser


class InMemoryAttendance:
    """Behaves like the attendance table: upsert keyed by (user_id, date)."""

    def __init__(self, names: Optional[dict[str, str]] = None):
        self.rows: dict[str, dict] = {}
        self.names = names or {}
        self.fail_reads = False
        self.fail_writes = False
        self.read_calls = 0
        self.upsert_calls: list[list[AttendanceWrite]] = []
        self.deleted: list[str] = []
        self._next_id = 1
        self._clock = datetime(2024, 1, 1, 8, 0, 0)

    def add(self, *, user_id, date, status=None, check_in=None, check_out=None, duration=None) -> str:
        return self._insert({
            "user_id": str(user_id),
            "date": date,
            "status": status,
            "check_in": check_in,
            "check_out": check_out,
            "duration": duration,
        })

    def _insert(self, payload: dict) -> str:
        rid = str(self._next_id)
        self._next_id += 1
        self._clock += timedelta(minutes=1)
        self.rows[rid] = {"id": rid, "created_at": self._clock.isoformat(), **payload}
        return rid

    def _records(self, rows) -> list[AttendanceRecord]:
        out = []
        for r in rows:
            row = dict(r)
            name = self.names.get(row["user_id"])
            if name:
                row["gym_users"] = {"full_name": name}
            out.append(AttendanceRecord.from_row(row))
        return out

    def list_for_date(self, work_date: str):
        self.read_calls += 1
        if self.fail_reads:
            raise TransientFetchError("network down")
        rows = [r for r in self.rows.values() if r["date"] == work_date]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return self._records(rows)

    def list_for_user(self, user_id: str, *, start_date=None, end_date=None):
        self.read_calls += 1
        if self.fail_reads:
            raise TransientFetchError("network down")
        rows = [r for r in self.rows.values() if r["user_id"] == str(user_id)]
        if start_date:
            rows = [r for r in rows if r["date"] >= start_date]
        if end_date:
            rows = [r for r in rows if r["date"] <= end_date]
        rows.sort(key=lambda r: r["date"], reverse=True)
        return self._records(rows)

    def upsert_many(self, records):
        if self.fail_writes:
            raise RemoteWriteError("Saving attendance failed: conflict")
        self.upsert_calls.append(list(records))
        for w in records:
            payload = w.to_payload()
            existing = next(
                (r for r in self.rows.values() if r["user_id"] == payload["user_id"] and r["date"] == payload["date"]),
                None,
            )
            if existing:
                existing.update(payload)
            else:
                self._insert(payload)

    def delete_by_id(self, attendance_id: str):
        if self.fail_writes:
            raise RemoteWriteError("Deleting failed")
        self.deleted.append(str(attendance_id))
        self.rows.pop(str(attendance_id), None)

    def count_present_on(self, work_date: str) -> int:
        if self.fail_reads:
            raise TransientFetchError("network down")
        return sum(
            1 for r in self.rows.values() if r["date"] == work_date and (r["status"] or "").lower() == "present"
        )


class InMemoryUsers:
    def __init__(self, users: list[GymUser]):
        self.users = users
        self.fail = False
        self.updates: list = []

    def list_members(self):
        if self.fail:
            raise TransientFetchError("users down")
        return list(self.users)

    def count(self) -> int:
        if self.fail:
            raise TransientFetchError("users down")
        return len(self.users)

    def update(self, user_id, profile):
        if self.fail:
            raise RemoteWriteError("Updating user failed")
        self.updates.append((user_id, profile))
        self.users = [
            replace(u, name=profile.name, email=profile.email, phone=profile.phone, role=profile.role)
            if u.id == user_id
            else u
            for u in self.users
        ]


class FakeTransport:
    """Records subscriptions and lets tests push payloads into any of them."""

    def __init__(self):
        self.sinks: dict[int, object] = {}
        self.subscribed: list[Subscription] = []
        self.unsubscribed: list[Subscription] = []
        self.fail_teardown = False
        self.subscribe_error: Optional[Exception] = None
        self._next = 1

    async def subscribe(self, scope, sink):
        if self.subscribe_error is not None:
            raise self.subscribe_error
        handle = self._next
        self._next += 1
        self.sinks[handle] = sink
        sub = Subscription(scope=scope, handle=handle)
        self.subscribed.append(sub)
        return sub

    async def unsubscribe(self, subscription):
        self.unsubscribed.append(subscription)
        self.sinks.pop(subscription.handle, None)
        if self.fail_teardown:
            raise SubscriptionTeardownError("socket already closed")

    @property
    def active(self) -> list[int]:
        return list(self.sinks)

    def emit(self, payload, *, handle: Optional[int] = None, sink=None):
        target = sink or self.sinks[handle if handle is not None else max(self.sinks)]
        event = payload if isinstance(payload, ChangeEvent) else parse_change_payload(payload)
        target(event)


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance(names={"u1": "Alice Nguyen", "u2": "Bob Tran", "u3": "Carla Diaz"})


@pytest.fixture
def members():
    return [
        GymUser(id="u1", name="Alice Nguyen", email="alice@gym.test", phone="0901 111 222"),
        GymUser(id="u2", name="Bob Tran", email="bob.tran@Example.com", phone="0902 333 444", role="Admin"),
        GymUser(id="u3", name="Carla Diaz", email="carla@gym.test", status="Inactive"),
    ]


@pytest.fixture
def users_repo(members):
    return InMemoryUsers(members)


@pytest.fixture
def transport():
    return FakeTransport()
