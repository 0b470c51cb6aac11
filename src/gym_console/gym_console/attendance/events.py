from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import ChangeKind
from ..core.exceptions import RealtimeProtocolError
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """Normalized realtime change notification.

    insert/update carry `record`; delete carries `record_id`; unknown carries
    neither and asks the consumer to resynchronize.
    """

    kind: ChangeKind
    record: Optional[AttendanceRecord] = None
    record_id: Optional[str] = None
    reason: str = ""

    @classmethod
    def insert(cls, record: AttendanceRecord) -> "ChangeEvent":
        return cls(kind=ChangeKind.INSERT, record=record, record_id=record.id)

    @classmethod
    def update(cls, record: AttendanceRecord) -> "ChangeEvent":
        return cls(kind=ChangeKind.UPDATE, record=record, record_id=record.id)

    @classmethod
    def delete(cls, record_id) -> "ChangeEvent":
        return cls(kind=ChangeKind.DELETE, record_id=str(record_id))

    @classmethod
    def unknown(cls, reason: str = "") -> "ChangeEvent":
        return cls(kind=ChangeKind.UNKNOWN, reason=reason)


def _first_mapping(payload: Mapping[str, Any], *keys: str) -> Optional[Mapping[str, Any]]:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, Mapping) and value:
            return value
    return None


def _kind_of(payload: Mapping[str, Any]) -> str:
    for key in ("eventType", "type", "event", "action"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value.strip().lower()
    return ""


def _decode(payload: Mapping[str, Any]) -> ChangeEvent:
    # realtime-py nests the postgres change under "data"
    inner = payload.get("data")
    if isinstance(inner, Mapping) and _kind_of(inner):
        payload = inner

    kind = _kind_of(payload)
    new_row = _first_mapping(payload, "new", "record", "new_record")
    old_row = _first_mapping(payload, "old", "old_record")

    if kind in (ChangeKind.INSERT.value, ChangeKind.UPDATE.value):
        if new_row is None:
            raise RealtimeProtocolError(f"{kind} event without a row")
        try:
            record = AttendanceRecord.from_row(new_row)
        except (KeyError, ValueError) as e:
            raise RealtimeProtocolError(f"{kind} event with malformed row: {e}") from e
        if kind == ChangeKind.INSERT.value:
            return ChangeEvent.insert(record)
        return ChangeEvent.update(record)

    if kind == ChangeKind.DELETE.value:
        row = old_row or new_row
        if row is None or row.get("id") is None:
            raise RealtimeProtocolError("delete event without an id")
        return ChangeEvent.delete(row["id"])

    raise RealtimeProtocolError(f"unrecognized event kind {kind!r}")


def parse_change_payload(payload: Any) -> ChangeEvent:
    """Turn a raw realtime payload into a ChangeEvent.

    Accepts the shapes the Supabase clients deliver (`eventType/new/old`,
    `type/record/old_record`, optionally nested under `data`). Anything else
    becomes an UNKNOWN event instead of raising.
    """
    if not isinstance(payload, Mapping):
        logger.warning("Realtime payload is not a mapping: %r", type(payload))
        return ChangeEvent.unknown("payload is not a mapping")
    try:
        return _decode(payload)
    except RealtimeProtocolError as e:
        logger.warning("Realtime protocol error, will resync: %s", e)
        return ChangeEvent.unknown(str(e))
