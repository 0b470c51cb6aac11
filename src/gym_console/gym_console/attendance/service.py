from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import compute_duration
from ..common.validators import optional_clock, require_iso_date, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT, NO_RECORDS_FOR_DATE_MESSAGE, NO_RECORDS_MESSAGE
from ..core.enums import AttendanceStatus
from ..core.exceptions import RemoteWriteError, WriteValidationError
from ..users.repository import UserRepository
from .aggregate import aggregate
from .fetch import AttendanceFetcher
from .model import AttendanceRecord, AttendanceStats, AttendanceWrite, DisplayRow, SubjectScope
from .render import render
from .repository import AttendanceRepository
from .store import AttendanceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceView:
    """What a table view needs: rendered rows, stats and an optional transient notice."""

    rows: list[DisplayRow]
    stats: AttendanceStats
    error: Optional[str] = None
    records: tuple[AttendanceRecord, ...] = field(default=(), repr=False)

    def as_dict(self) -> dict:
        return {
            "rows": [r.as_dict() for r in self.rows],
            "stats": self.stats.as_dict(),
            "error": self.error,
        }


def build_view(
    records: Sequence[AttendanceRecord],
    *,
    search: str = "",
    limit: int = DEFAULT_HISTORY_LIMIT,
    error: Optional[str] = None,
    empty_message: str = NO_RECORDS_MESSAGE,
) -> AttendanceView:
    return AttendanceView(
        rows=render(records, search, limit, empty_message=empty_message),
        stats=aggregate(records),
        error=error,
        records=tuple(records),
    )


class AttendanceService:
    """Use cases: admin day view, member history, and attendance writes.

    The remote store is the source of truth: views are always built from a
    fresh fetch, and writes validate locally before anything is sent.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: Optional[UserRepository] = None,
        *,
        fetcher: Optional[AttendanceFetcher] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self._attendance = attendance
        self._users = users
        self._fetcher = fetcher or AttendanceFetcher(attendance)
        self._history_limit = int(history_limit)

    @property
    def fetcher(self) -> AttendanceFetcher:
        return self._fetcher

    @property
    def history_limit(self) -> int:
        return self._history_limit

    def view_for(self, scope: SubjectScope, *, search: str = "", limit: Optional[int] = None) -> AttendanceView:
        result = self._fetcher.fetch(scope)
        store = AttendanceStore(result.records)
        return build_view(
            store.snapshot(),
            search=search,
            limit=self._history_limit if limit is None else int(limit),
            error=str(result.error) if result.error else None,
            empty_message=NO_RECORDS_FOR_DATE_MESSAGE if scope.is_day else NO_RECORDS_MESSAGE,
        )

    def day_view(self, work_date: str, *, search: str = "", limit: Optional[int] = None) -> AttendanceView:
        return self.view_for(SubjectScope.for_date(work_date), search=search, limit=limit)

    def member_view(
        self,
        user_id,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> AttendanceView:
        scope = SubjectScope.for_user(user_id, start_date=start_date, end_date=end_date)
        return self.view_for(scope, limit=limit)

    @staticmethod
    def prepare(write: AttendanceWrite) -> AttendanceWrite:
        """Validate a write and derive its duration. Raises WriteValidationError."""
        user_id = require_non_empty(write.user_id, "user_id")
        work_date = require_iso_date(write.date, "date")
        check_in = optional_clock(write.check_in, "check_in")
        check_out = optional_clock(write.check_out, "check_out")

        duration = (write.duration or "").strip() or None
        if duration is None:
            try:
                duration = compute_duration(check_in, check_out)
            except ValueError:
                raise WriteValidationError("Invalid time range")

        return AttendanceWrite(
            user_id=user_id,
            date=work_date,
            status=(write.status or "").strip() or AttendanceStatus.ABSENT.value,
            check_in=check_in,
            check_out=check_out,
            duration=duration,
        )

    def save(self, write: AttendanceWrite) -> AttendanceWrite:
        return self.save_many([write])[0]

    def save_many(self, writes: Iterable[AttendanceWrite]) -> list[AttendanceWrite]:
        # Validate everything first: a single bad record means nothing is sent.
        prepared = [self.prepare(w) for w in writes]
        if not prepared:
            raise WriteValidationError("Nothing to save")
        try:
            self._attendance.upsert_many(prepared)
        except RemoteWriteError:
            logger.error("Upsert of %d attendance record(s) failed", len(prepared))
            raise
        logger.info("Saved %d attendance record(s)", len(prepared))
        return prepared

    def mark_all(
        self,
        *,
        work_date: str,
        status: str = AttendanceStatus.ABSENT.value,
        check_in: Optional[str] = None,
        check_out: Optional[str] = None,
        duration: Optional[str] = None,
    ) -> int:
        """Upsert the same attendance for every active member. Returns how many were saved."""
        work_date = require_iso_date(work_date, "date")
        if self._users is None:
            raise WriteValidationError("No member directory configured")
        members = [u for u in self._users.list_members() if u.is_active]
        if not members:
            return 0
        writes = [
            AttendanceWrite(
                user_id=u.id,
                date=work_date,
                status=status,
                check_in=check_in,
                check_out=check_out,
                duration=duration,
            )
            for u in members
        ]
        return len(self.save_many(writes))

    def delete(self, attendance_id) -> None:
        attendance_id = require_non_empty(attendance_id, "id")
        try:
            self._attendance.delete_by_id(attendance_id)
        except RemoteWriteError:
            logger.error("Delete of attendance %s failed", attendance_id)
            raise
        logger.info("Deleted attendance %s", attendance_id)
