from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_timestamp
from ..core.enums import AttendanceStatus


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _joined_name(row: Mapping[str, Any]) -> Optional[str]:
    joined = row.get("gym_users")
    if isinstance(joined, list):
        joined = joined[0] if joined else None
    if isinstance(joined, Mapping):
        name = joined.get("full_name")
        return str(name) if name else None
    name = row.get("user_name")
    return str(name) if name else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row for one member on one date.

    `date` is kept as the ISO string the store returns so ordering is a plain
    string comparison. `user_name` is joined in at fetch time and is not part
    of the row itself.
    """

    id: str
    user_id: str
    date: str
    status: Optional[str] = None
    check_in: str = ""
    check_out: str = ""
    duration: str = ""
    created_at: Optional[datetime] = None
    user_name: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return (self.status or "").lower() == AttendanceStatus.PRESENT.value

    def with_user_name(self, name: Optional[str]) -> "AttendanceRecord":
        return replace(self, user_name=name)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AttendanceRecord":
        """Normalize a raw table row (fetch or realtime) into a record.

        Raises KeyError/ValueError when the row has no id, user or date.
        """
        if row.get("id") is None:
            raise KeyError("id")
        if row.get("user_id") is None:
            raise KeyError("user_id")
        day = _text(row.get("date"))[:10]
        if len(day) != 10:
            raise ValueError(f"Invalid attendance date: {row.get('date')!r}")

        status = row.get("status")
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            date=day,
            status=str(status) if status else None,
            check_in=_text(row.get("check_in")),
            check_out=_text(row.get("check_out")),
            duration=_text(row.get("duration")),
            created_at=parse_timestamp(row.get("created_at")),
            user_name=_joined_name(row),
        )


@dataclass(frozen=True)
class AttendanceWrite:
    """Upsert payload keyed by (user_id, date)."""

    user_id: str
    date: str
    status: str = AttendanceStatus.ABSENT.value
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    duration: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "user_id": self.user_id,
            "date": self.date,
            "status": self.status or AttendanceStatus.ABSENT.value,
            "check_in": self.check_in or None,
            "check_out": self.check_out or None,
            "duration": self.duration or None,
        }


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    present: int
    absent: int
    rate: int

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DisplayRow:
    """Read-model for one rendered table row."""

    id: str
    user_name: str
    date: str
    check_in: str
    check_out: str
    duration: str
    status: str
    css_class: str
    placeholder: bool = False
    message: str = ""

    @classmethod
    def empty(cls, message: str) -> "DisplayRow":
        return cls(
            id="",
            user_name="",
            date="",
            check_in="",
            check_out="",
            duration="",
            status="",
            css_class="empty-state",
            placeholder=True,
            message=message,
        )

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SubjectScope:
    """Which rows a view displays: one day, or one member (optionally a date range)."""

    date: Optional[str] = None
    user_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @classmethod
    def for_date(cls, day: str) -> "SubjectScope":
        return cls(date=day)

    @classmethod
    def for_user(cls, user_id, *, start_date: Optional[str] = None, end_date: Optional[str] = None) -> "SubjectScope":
        return cls(user_id=str(user_id), start_date=start_date or None, end_date=end_date or None)

    @property
    def is_day(self) -> bool:
        return self.date is not None

    def contains(self, record: AttendanceRecord) -> bool:
        if self.is_day:
            return record.date == self.date
        if record.user_id != self.user_id:
            return False
        if self.start_date and record.date < self.start_date:
            return False
        if self.end_date and record.date > self.end_date:
            return False
        return True

    def realtime_filter(self) -> str:
        if self.is_day:
            return f"date=eq.{self.date}"
        return f"user_id=eq.{self.user_id}"

    def channel_name(self) -> str:
        if self.is_day:
            return f"public:attendance:date:{self.date}"
        return f"public:attendance:user:{self.user_id}"

    def __str__(self) -> str:
        if self.is_day:
            return f"date={self.date}"
        rng = ""
        if self.start_date or self.end_date:
            rng = f" [{self.start_date or ''}..{self.end_date or ''}]"
        return f"user={self.user_id}{rng}"
