from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.fetch import AttendanceFetcher
from .attendance.service import AttendanceService
from .attendance.session import AttendanceViewSession, ViewListener
from .attendance.supabase_attendance_repository import SupabaseAttendanceRepository
from .core.constants import ATTENDANCE_TABLE, DEFAULT_HISTORY_LIMIT, USERS_TABLE
from .dashboard.service import DashboardService
from .database.connection import SupabaseConfig, SupabaseConnection
from .realtime.transport import SupabaseRealtimeTransport
from .users.service import UserService
from .users.supabase_user_repository import SupabaseUserRepository


@dataclass(frozen=True)
class Container:
    conn: SupabaseConnection

    attendance_repo: SupabaseAttendanceRepository
    users_repo: SupabaseUserRepository
    realtime: SupabaseRealtimeTransport

    attendance_service: AttendanceService
    dashboard_service: DashboardService
    user_service: UserService

    def new_session(self, *, on_change: Optional[ViewListener] = None, limit: Optional[int] = None) -> AttendanceViewSession:
        """A fresh live view session; the caller owns it and must close it."""
        return AttendanceViewSession(self.attendance_service, self.realtime, on_change=on_change, limit=limit)


def build_container(*, supabase_config: dict) -> Container:
    config = SupabaseConfig(
        url=str(supabase_config["url"]),
        key=str(supabase_config["key"]),
        attendance_table=str(supabase_config.get("attendance_table", ATTENDANCE_TABLE)),
        users_table=str(supabase_config.get("users_table", USERS_TABLE)),
    )
    conn = SupabaseConnection.get_instance(config)

    attendance_repo = SupabaseAttendanceRepository(conn)
    users_repo = SupabaseUserRepository(conn)
    realtime = SupabaseRealtimeTransport(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        fetcher=AttendanceFetcher(attendance_repo),
        history_limit=int(supabase_config.get("history_limit", DEFAULT_HISTORY_LIMIT)),
    )
    dashboard_service = DashboardService(attendance_repo, users_repo, attendance_service)
    user_service = UserService(users_repo)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        users_repo=users_repo,
        realtime=realtime,
        attendance_service=attendance_service,
        dashboard_service=dashboard_service,
        user_service=user_service,
    )
