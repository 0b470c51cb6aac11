from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from ..core.enums import Role


@dataclass(frozen=True)
class GymUser:
    """Domain entity: a gym member profile (row of gym_users).

    Note: Plain data object, no remote access here.
    """

    id: str
    name: str
    email: str = ""
    phone: str = ""
    role: str = Role.MEMBER.value
    status: str = "Active"
    joined: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == "Active"

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "GymUser":
        created = row.get("created_at") or ""
        return cls(
            id=str(row["id"]),
            name=row.get("full_name") or "",
            email=row.get("email") or "",
            phone=row.get("phone") or "",
            role=row.get("role") or Role.MEMBER.value,
            joined=str(created).split("T")[0],
        )

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name, email or phone."""
        term = (term or "").strip().lower()
        if not term:
            return True
        return term in self.name.lower() or term in self.email.lower() or term in self.phone.lower()

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ProfileUpdate:
    """Editable columns of a gym_users row."""

    name: str
    email: str
    phone: str = ""
    role: str = Role.MEMBER.value

    def to_payload(self) -> dict:
        return {
            "full_name": self.name,
            "email": self.email,
            "phone": self.phone or None,
            "role": self.role,
        }
