from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from .model import AttendanceRecord

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created_key(record: AttendanceRecord) -> datetime:
    ts = record.created_at
    if ts is None:
        return _EPOCH
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


class AttendanceStore:
    """Ordered in-memory attendance rows for one subject scope.

    Always sorted by date descending. Sorting is stable, so rows sharing a
    date keep their relative order: a freshly inserted row is placed first
    among its date, and a loaded snapshot keeps newest `created_at` first.
    Ids are unique within the store.
    """

    def __init__(self, records: Iterable[AttendanceRecord] = ()):
        self._records: list[AttendanceRecord] = []
        self._names: dict[str, str] = {}
        self.replace_all(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def snapshot(self) -> tuple[AttendanceRecord, ...]:
        return tuple(self._records)

    def ids(self) -> list[str]:
        return [r.id for r in self._records]

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        idx = self._index_of(str(record_id))
        return self._records[idx] if idx >= 0 else None

    def replace_all(self, records: Iterable[AttendanceRecord]) -> None:
        """Load a fetched snapshot, dropping anything held before."""
        seen: set[str] = set()
        ordered: list[AttendanceRecord] = []
        for r in sorted(records, key=_created_key, reverse=True):
            if r.id in seen:
                continue
            seen.add(r.id)
            ordered.append(r)
            if r.user_name:
                self._names[r.user_id] = r.user_name
        self._records = ordered
        self._sort()

    def clear(self) -> None:
        self._records = []
        self._names = {}

    def insert(self, record: AttendanceRecord) -> None:
        record = self._named(record)
        idx = self._index_of(record.id)
        if idx >= 0:
            del self._records[idx]
        self._records.insert(0, record)
        self._sort()

    def upsert(self, record: AttendanceRecord) -> None:
        """Replace by id in place, or insert when the id is not held yet."""
        idx = self._index_of(record.id)
        if idx < 0:
            self.insert(record)
            return
        record = self._named(record)
        self._records[idx] = record
        self._sort()

    def remove(self, record_id: str) -> bool:
        idx = self._index_of(str(record_id))
        if idx < 0:
            return False
        del self._records[idx]
        return True

    def _named(self, record: AttendanceRecord) -> AttendanceRecord:
        # Realtime rows carry no joined user name; reuse the one we already know.
        if record.user_name:
            self._names[record.user_id] = record.user_name
            return record
        known = self._names.get(record.user_id)
        return record.with_user_name(known) if known else record

    def _index_of(self, record_id: str) -> int:
        for i, r in enumerate(self._records):
            if r.id == record_id:
                return i
        return -1

    def _sort(self) -> None:
        self._records.sort(key=lambda r: r.date, reverse=True)
