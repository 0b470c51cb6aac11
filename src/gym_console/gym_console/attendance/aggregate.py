from __future__ import annotations

from typing import Iterable

from .model import AttendanceRecord, AttendanceStats


def attendance_rate(present: int, total: int) -> int:
    """Percentage of present rows, rounded half up (66.5 -> 67)."""
    if total <= 0:
        return 0
    return (present * 200 + total) // (2 * total)


def aggregate(snapshot: Iterable[AttendanceRecord]) -> AttendanceStats:
    """Summary statistics over a store snapshot.

    Every status other than "present" (case-insensitive), including a missing
    one, counts as absent, so present + absent == total always holds.
    """
    total = 0
    present = 0
    for record in snapshot:
        total += 1
        if record.is_present:
            present += 1
    return AttendanceStats(
        total=total,
        present=present,
        absent=total - present,
        rate=attendance_rate(present, total),
    )
