from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError

from src.gym_console.gym_console.attendance.model import AttendanceWrite
from src.gym_console.gym_console.attendance.supabase_attendance_repository import SupabaseAttendanceRepository
from src.gym_console.gym_console.core.exceptions import RemoteWriteError, TransientFetchError
from src.gym_console.gym_console.database.connection import SupabaseConfig


class FakeQuery:
    """Records the builder chain and returns a canned response on execute()."""

    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response or SimpleNamespace(data=[], count=None)
        self.error = error

    def __getattr__(self, name):
        def step(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return step

    def execute(self):
        self.calls.append(("execute", (), {}))
        if self.error:
            raise self.error
        return self.response


class FakeClient:
    def __init__(self, query):
        self.query = query
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


class FakeConnection:
    def __init__(self, query):
        self.config = SupabaseConfig(url="http://sb", key="k")
        self._client = FakeClient(query)

    def client(self):
        return self._client


def repo_with(query):
    conn = FakeConnection(query)
    return SupabaseAttendanceRepository(conn), conn


def names(query):
    return [c[0] for c in query.calls]


def test_list_for_date_joins_user_name_and_orders_by_created():
    row = {
        "id": 3,
        "user_id": "u1",
        "date": "2024-01-05",
        "status": "present",
        "check_in": "08:00:00",
        "check_out": None,
        "duration": None,
        "created_at": "2024-01-05T08:00:00+00:00",
        "gym_users": {"full_name": "Alice Nguyen"},
    }
    query = FakeQuery(SimpleNamespace(data=[row]))
    repo, conn = repo_with(query)

    records = repo.list_for_date("2024-01-05")

    assert conn.client().tables == ["attendance"]
    assert names(query) == ["select", "eq", "order", "execute"]
    assert "gym_users(full_name)" in query.calls[0][1][0]
    assert query.calls[1][1] == ("date", "2024-01-05")
    assert query.calls[2] == ("order", ("created_at",), {"desc": True})
    assert records[0].user_name == "Alice Nguyen"
    assert records[0].id == "3"


def test_list_for_user_applies_optional_range():
    query = FakeQuery()
    repo, _ = repo_with(query)

    repo.list_for_user("u1", start_date="2024-01-01", end_date="2024-01-31")

    assert names(query) == ["select", "eq", "gte", "lte", "order", "execute"]
    assert query.calls[4] == ("order", ("date",), {"desc": True})


def test_list_for_user_without_range():
    query = FakeQuery()
    repo, _ = repo_with(query)

    assert repo.list_for_user("u1") == []
    assert "gte" not in names(query)


def test_upsert_conflicts_on_user_and_date():
    query = FakeQuery()
    repo, _ = repo_with(query)

    repo.upsert_many([AttendanceWrite(user_id="u1", date="2024-01-01", status="present")])

    name, args, kwargs = query.calls[0]
    assert name == "upsert"
    assert args[0][0]["status"] == "present"
    assert kwargs == {"on_conflict": "user_id,date"}


def test_upsert_api_error_becomes_remote_write_error():
    query = FakeQuery(error=APIError({"message": "permission denied", "code": "42501"}))
    repo, _ = repo_with(query)

    with pytest.raises(RemoteWriteError, match="permission denied"):
        repo.upsert_many([AttendanceWrite(user_id="u1", date="2024-01-01")])


def test_read_transport_error_becomes_transient():
    query = FakeQuery(error=httpx.ConnectError("connection refused"))
    repo, _ = repo_with(query)

    with pytest.raises(TransientFetchError):
        repo.list_for_date("2024-01-01")


def test_count_present_uses_exact_head_count():
    query = FakeQuery(SimpleNamespace(data=[], count=4))
    repo, _ = repo_with(query)

    assert repo.count_present_on("2024-01-01") == 4
    assert query.calls[0] == ("select", ("id",), {"count": "exact", "head": True})
    assert ("ilike", ("status", "present"), {}) in query.calls


def test_delete_filters_by_id():
    query = FakeQuery()
    repo, _ = repo_with(query)

    repo.delete_by_id("12")

    assert names(query) == ["delete", "eq", "execute"]
    assert query.calls[1][1] == ("id", "12")
