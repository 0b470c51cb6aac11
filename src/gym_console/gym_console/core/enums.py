from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role stored in gym_users.role."""

    ADMIN = "Admin"
    MEMBER = "Member"


class AttendanceStatus(str, Enum):
    """Known attendance statuses. The column itself is free text."""

    PRESENT = "present"
    ABSENT = "absent"


class ChangeKind(str, Enum):
    """Operation carried by a realtime change notification."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    UNKNOWN = "unknown"
