from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceWrite


class AttendanceRepository(Protocol):
    """Remote attendance table.

    Note (DIP): services and the fetch adapter depend on this interface, not on
    the Supabase client. Read failures raise TransientFetchError, write
    failures raise RemoteWriteError.
    """

    def list_for_date(self, work_date: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: str,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_many(self, records: Sequence[AttendanceWrite]) -> None:
        raise NotImplementedError

    def delete_by_id(self, attendance_id: str) -> None:
        raise NotImplementedError

    def count_present_on(self, work_date: str) -> int:
        raise NotImplementedError
