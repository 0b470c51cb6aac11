from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import TransientFetchError
from .model import AttendanceRecord, SubjectScope
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    scope: SubjectScope
    records: tuple[AttendanceRecord, ...] = ()
    error: Optional[TransientFetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AttendanceFetcher:
    """Remote fetch adapter: one scoped query, normalized records, no exceptions.

    Day scopes come back newest `created_at` first, member scopes newest
    `date` first. On failure the result is empty and carries the error so the
    caller can show a transient notice.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def fetch(self, scope: SubjectScope) -> FetchResult:
        try:
            if scope.is_day:
                rows = self._attendance.list_for_date(scope.date)
            else:
                rows = self._attendance.list_for_user(
                    scope.user_id,
                    start_date=scope.start_date,
                    end_date=scope.end_date,
                )
        except TransientFetchError as e:
            logger.warning("Attendance fetch failed for %s: %s", scope, e)
            return FetchResult(scope=scope, error=e)
        except Exception as e:
            logger.exception("Unexpected error loading attendance for %s", scope)
            return FetchResult(scope=scope, error=TransientFetchError(f"Failed to load attendance: {e}"))

        logger.debug("Fetched %d attendance rows for %s", len(rows), scope)
        return FetchResult(scope=scope, records=tuple(rows))
