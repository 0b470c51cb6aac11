from __future__ import annotations

from typing import Iterable, Optional

from ..common.datetime_utils import format_time
from ..core.constants import DEFAULT_HISTORY_LIMIT, NO_RECORDS_MESSAGE, UNKNOWN_USER_NAME
from .model import AttendanceRecord, DisplayRow


def _to_row(r: AttendanceRecord) -> DisplayRow:
    status = r.status or "Absent"
    return DisplayRow(
        id=r.id,
        user_name=r.user_name or UNKNOWN_USER_NAME,
        date=r.date,
        check_in=format_time(r.check_in),
        check_out=format_time(r.check_out),
        duration=r.duration or "--",
        status=status,
        css_class="status-present" if r.is_present else "status-absent",
    )


def render(
    snapshot: Iterable[AttendanceRecord],
    search: Optional[str] = "",
    limit: int = DEFAULT_HISTORY_LIMIT,
    *,
    empty_message: str = NO_RECORDS_MESSAGE,
) -> list[DisplayRow]:
    """Project a snapshot into display rows.

    Filters by a case-insensitive substring of the displayed user name, keeps
    store order and truncates to `limit`. Never returns an empty list: no
    matches yields a single placeholder row.
    """
    term = (search or "").strip().lower()
    rows: list[DisplayRow] = []
    for record in snapshot:
        if len(rows) >= max(int(limit), 0):
            break
        if term and term not in (record.user_name or UNKNOWN_USER_NAME).lower():
            continue
        rows.append(_to_row(record))

    if not rows:
        return [DisplayRow.empty(empty_message)]
    return rows
