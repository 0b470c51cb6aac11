from __future__ import annotations

import logging
from enum import Enum

from ..core.enums import ChangeKind
from .events import ChangeEvent
from .model import SubjectScope
from .store import AttendanceStore

logger = logging.getLogger(__name__)


class MergeResult(str, Enum):
    APPLIED = "applied"
    IGNORED = "ignored"
    RESYNC = "resync"


class MergeEngine:
    """Applies realtime change events to one scope's store, one at a time.

    The engine never reorders or batches; callers feed events in receipt
    order. A RESYNC result means the caller must discard the store and fetch
    the scope again.
    """

    def __init__(self, store: AttendanceStore, scope: SubjectScope):
        self._store = store
        self._scope = scope

    @property
    def scope(self) -> SubjectScope:
        return self._scope

    def apply(self, event: ChangeEvent) -> MergeResult:
        if event.kind == ChangeKind.INSERT and event.record is not None:
            if not self._scope.contains(event.record):
                return MergeResult.IGNORED
            self._store.insert(event.record)
            return MergeResult.APPLIED

        if event.kind == ChangeKind.UPDATE and event.record is not None:
            if not self._scope.contains(event.record):
                # Row moved out of this view (e.g. its date changed).
                removed = self._store.remove(event.record.id)
                return MergeResult.APPLIED if removed else MergeResult.IGNORED
            self._store.upsert(event.record)
            return MergeResult.APPLIED

        if event.kind == ChangeKind.DELETE and event.record_id is not None:
            if self._store.remove(event.record_id):
                return MergeResult.APPLIED
            return MergeResult.IGNORED

        logger.info("Resync requested for %s: %s", self._scope, event.reason or event.kind.value)
        return MergeResult.RESYNC
