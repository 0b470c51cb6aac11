from datetime import datetime, timezone

from src.gym_console.gym_console.attendance.model import AttendanceRecord
from src.gym_console.gym_console.attendance.store import AttendanceStore


def rec(id, date, status=None, user_id="u1", **kw):
    return AttendanceRecord(id=str(id), user_id=user_id, date=date, status=status, **kw)


def test_replace_all_sorts_by_date_then_newest_created_first():
    store = AttendanceStore([
        rec(1, "2024-01-01", created_at=datetime(2024, 1, 1, 9, tzinfo=timezone.utc)),
        rec(2, "2024-01-02", created_at=datetime(2024, 1, 2, 9, tzinfo=timezone.utc)),
        rec(3, "2024-01-01", created_at=datetime(2024, 1, 1, 18, tzinfo=timezone.utc)),
    ])

    assert store.ids() == ["2", "3", "1"]


def test_replace_all_drops_duplicate_ids():
    store = AttendanceStore([rec(1, "2024-01-01"), rec(1, "2024-01-01", status="present")])

    assert store.ids() == ["1"]


def test_insert_puts_new_arrival_first_among_same_date():
    store = AttendanceStore([rec(1, "2024-01-02"), rec(2, "2024-01-02"), rec(3, "2024-01-01")])

    store.insert(rec(4, "2024-01-02"))

    assert store.ids() == ["4", "1", "2", "3"]


def test_insert_with_known_id_replaces_instead_of_duplicating():
    store = AttendanceStore([rec(1, "2024-01-02", status="absent")])

    store.insert(rec(1, "2024-01-02", status="present"))

    assert store.ids() == ["1"]
    assert store.get("1").status == "present"


def test_upsert_replaces_in_place_and_keeps_position_among_ties():
    store = AttendanceStore([rec(1, "2024-01-02"), rec(2, "2024-01-02"), rec(3, "2024-01-02")])

    store.upsert(rec(2, "2024-01-02", status="present"))

    assert store.ids() == ["1", "2", "3"]
    assert store.get("2").status == "present"


def test_upsert_resorts_when_date_changes():
    store = AttendanceStore([rec(1, "2024-01-03"), rec(2, "2024-01-02")])

    store.upsert(rec(2, "2024-01-05"))

    assert store.ids() == ["2", "1"]


def test_remove_missing_id_is_noop():
    store = AttendanceStore([rec(1, "2024-01-01")])

    assert store.remove("99") is False
    assert store.ids() == ["1"]


def test_realtime_rows_reuse_known_user_name():
    store = AttendanceStore([rec(1, "2024-01-01", user_id="u7", user_name="Dana")])

    store.insert(rec(2, "2024-01-02", user_id="u7"))

    assert store.get("2").user_name == "Dana"
