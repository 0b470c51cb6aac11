from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..common.datetime_utils import format_day_label, today_local
from ..core.constants import DEFAULT_RECENT_ROWS, DEFAULT_TREND_DAYS
from ..core.exceptions import TransientFetchError
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardData:
    total_users: int
    today_attendance: int
    trend: list[dict]
    recent: list[dict]

    def as_dict(self) -> dict:
        return {
            "total_users": self.total_users,
            "today_attendance": self.today_attendance,
            "trend": self.trend,
            "recent": self.recent,
        }


class DashboardService:
    """Admin dashboard: member count, today's present count, a daily trend and recent rows."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        attendance_service: AttendanceService,
        *,
        trend_days: int = DEFAULT_TREND_DAYS,
    ):
        self._attendance = attendance
        self._users = users
        self._attendance_service = attendance_service
        self._trend_days = int(trend_days)

    def present_trend(self, today: date) -> list[dict]:
        """Present count per day, oldest first. A day that fails to load counts as 0."""
        trend = []
        for i in range(self._trend_days - 1, -1, -1):
            day = today - timedelta(days=i)
            try:
                count = self._attendance.count_present_on(day.isoformat())
            except TransientFetchError as e:
                logger.warning("Trend count for %s failed: %s", day, e)
                count = 0
            trend.append({"date": format_day_label(day), "count": count})
        return trend

    def build(self, today: Optional[date] = None) -> DashboardData:
        today = today or today_local()

        try:
            total_users = self._users.count()
        except TransientFetchError as e:
            logger.warning("Dashboard user count failed: %s", e)
            total_users = 0

        trend = self.present_trend(today)
        today_view = self._attendance_service.day_view(today.isoformat(), limit=DEFAULT_RECENT_ROWS)
        recent = [r.as_dict() for r in today_view.rows if not r.placeholder]

        return DashboardData(
            total_users=total_users,
            today_attendance=trend[-1]["count"] if trend else 0,
            trend=trend,
            recent=recent,
        )
