from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import RemoteWriteError, TransientFetchError
from ..database.connection import SupabaseConnection
from ..database.supabase_base import count_of, remote_call, rows_of
from .model import AttendanceRecord, AttendanceWrite
from .repository import AttendanceRepository

RECORD_COLUMNS = "id,user_id,date,status,check_in,check_out,duration,created_at"


class SupabaseAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn
        self._table = conn.config.attendance_table
        self._users_table = conn.config.users_table

    def _query(self):
        return self._conn.client().table(self._table)

    def list_for_date(self, work_date: str) -> Sequence[AttendanceRecord]:
        with remote_call(TransientFetchError, f"Loading attendance for {work_date}"):
            res = (
                self._query()
                .select(f"{RECORD_COLUMNS},{self._users_table}(full_name)")
                .eq("date", work_date)
                .order("created_at", desc=True)
                .execute()
            )
        return [AttendanceRecord.from_row(r) for r in rows_of(res)]

    def list_for_user(
        self,
        user_id: str,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        with remote_call(TransientFetchError, f"Loading attendance for user {user_id}"):
            q = self._query().select(RECORD_COLUMNS).eq("user_id", user_id)
            if start_date:
                q = q.gte("date", start_date)
            if end_date:
                q = q.lte("date", end_date)
            res = q.order("date", desc=True).execute()
        return [AttendanceRecord.from_row(r) for r in rows_of(res)]

    def upsert_many(self, records: Sequence[AttendanceWrite]) -> None:
        payload = [r.to_payload() for r in records]
        if not payload:
            return
        with remote_call(RemoteWriteError, "Saving attendance"):
            self._query().upsert(payload, on_conflict="user_id,date").execute()

    def delete_by_id(self, attendance_id: str) -> None:
        with remote_call(RemoteWriteError, f"Deleting attendance {attendance_id}"):
            self._query().delete().eq("id", attendance_id).execute()

    def count_present_on(self, work_date: str) -> int:
        with remote_call(TransientFetchError, f"Counting attendance for {work_date}"):
            res = (
                self._query()
                .select("id", count="exact", head=True)
                .eq("date", work_date)
                .ilike("status", AttendanceStatus.PRESENT.value)
                .execute()
            )
        return count_of(res)
