from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable, Optional

from ..core.constants import (
    NO_RECORDS_FOR_DATE_MESSAGE,
    NO_RECORDS_MESSAGE,
    REALTIME_UNAVAILABLE_NOTICE,
    REALTIME_UPDATE_NOTICE,
)
from ..core.exceptions import SubscriptionError, SubscriptionTeardownError
from ..realtime.transport import RealtimeTransport, Subscription
from .events import ChangeEvent
from .fetch import FetchResult
from .merge import MergeEngine, MergeResult
from .model import AttendanceRecord, AttendanceWrite, SubjectScope
from .service import AttendanceService, AttendanceView, build_view
from .store import AttendanceStore

logger = logging.getLogger(__name__)

ViewListener = Callable[[AttendanceView, Optional[str]], None]


class AttendanceViewSession:
    """State of one live attendance view: scope, store, subscription, consumer.

    Created when a view is activated and closed when it goes away. Realtime
    events are queued and applied one at a time by a single consumer task.
    Every scope change bumps a generation counter; queued events and fetch
    results from an older generation are dropped, so a previous subject can
    never touch the current store.

    The remote store stays authoritative: `save`/`delete` always re-fetch the
    scope afterwards. A fetch that completes after realtime events have been
    applied overwrites them with its snapshot.
    """

    def __init__(
        self,
        service: AttendanceService,
        transport: RealtimeTransport,
        *,
        on_change: Optional[ViewListener] = None,
        search: str = "",
        limit: Optional[int] = None,
    ):
        self._service = service
        self._fetcher = service.fetcher
        self._transport = transport
        self._on_change = on_change
        self.search = search
        self.limit = service.history_limit if limit is None else int(limit)

        self._store = AttendanceStore()
        self._scope: Optional[SubjectScope] = None
        self._engine: Optional[MergeEngine] = None
        self._subscription: Optional[Subscription] = None
        self._generation = 0
        self._queue: asyncio.Queue[tuple[int, ChangeEvent]] = asyncio.Queue()
        self._consumer: Optional[asyncio.Task] = None
        self.last_error: Optional[str] = None
        self.fetch_count = 0

    async def __aenter__(self) -> "AttendanceViewSession":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    @property
    def scope(self) -> Optional[SubjectScope]:
        return self._scope

    @property
    def live(self) -> bool:
        """Whether realtime changes are currently being merged."""
        return self._subscription is not None

    def snapshot(self) -> tuple[AttendanceRecord, ...]:
        return self._store.snapshot()

    def view(self, search: Optional[str] = None, limit: Optional[int] = None) -> AttendanceView:
        empty = NO_RECORDS_FOR_DATE_MESSAGE if self._scope and self._scope.is_day else NO_RECORDS_MESSAGE
        return build_view(
            self._store.snapshot(),
            search=self.search if search is None else search,
            limit=self.limit if limit is None else int(limit),
            error=self.last_error,
            empty_message=empty,
        )

    async def open(self, scope: SubjectScope) -> AttendanceView:
        return await self.switch_scope(scope)

    async def switch_scope(self, scope: SubjectScope) -> AttendanceView:
        self._generation += 1
        generation = self._generation

        await self._teardown()
        self._scope = scope
        self._store.clear()
        self._engine = MergeEngine(self._store, scope)
        self._ensure_consumer()

        await self._load(generation)
        if generation != self._generation:
            return self.view()

        try:
            subscription = await self._transport.subscribe(scope, self._sink(generation))
        except SubscriptionError as e:
            logger.warning("Live updates unavailable for %s: %s", scope, e)
            return self._without_live_updates(generation)
        except Exception:
            logger.exception("Unexpected error subscribing to %s", scope)
            return self._without_live_updates(generation)

        if generation != self._generation:
            # Superseded while subscribing.
            await self._release(subscription)
        else:
            self._subscription = subscription
            logger.info("Attendance view subscribed to %s", scope)
        return self.view()

    async def refresh(self) -> AttendanceView:
        if self._scope is not None:
            await self._load(self._generation)
        return self.view()

    async def resync(self) -> AttendanceView:
        """Discard the local store and fetch the current scope again."""
        self._store.clear()
        return await self.refresh()

    def set_search(self, search: str) -> AttendanceView:
        self.search = search or ""
        self._publish(None)
        return self.view()

    async def save(self, write: AttendanceWrite) -> AttendanceWrite:
        saved = await asyncio.to_thread(self._service.save, write)
        await self.refresh()
        return saved

    async def delete(self, attendance_id) -> None:
        await asyncio.to_thread(self._service.delete, attendance_id)
        await self.refresh()

    async def wait_idle(self) -> None:
        """Wait until every queued event has been applied."""
        await self._queue.join()

    async def close(self) -> None:
        self._generation += 1
        await self._teardown()
        if self._consumer is not None:
            self._consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer
            self._consumer = None
        self._store.clear()
        self._scope = None
        self._engine = None

    def _sink(self, generation: int):
        def put(event: ChangeEvent) -> None:
            self._queue.put_nowait((generation, event))

        return put

    def _ensure_consumer(self) -> None:
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.get_running_loop().create_task(self._consume())

    async def _consume(self) -> None:
        while True:
            generation, event = await self._queue.get()
            try:
                if generation != self._generation or self._engine is None:
                    logger.debug("Dropping %s event from a previous scope", event.kind.value)
                    continue
                result = self._engine.apply(event)
                if result == MergeResult.RESYNC:
                    await self.resync()
                elif result == MergeResult.APPLIED:
                    self._publish(REALTIME_UPDATE_NOTICE)
            finally:
                self._queue.task_done()

    async def _load(self, generation: int) -> Optional[FetchResult]:
        scope = self._scope
        self.fetch_count += 1
        result = await asyncio.to_thread(self._fetcher.fetch, scope)
        if generation != self._generation or scope != self._scope:
            logger.debug("Discarding fetch for %s, scope changed", scope)
            return None
        if result.ok:
            self._store.replace_all(result.records)
            self.last_error = None
        else:
            self.last_error = str(result.error)
        self._publish(self.last_error)
        return result

    def _without_live_updates(self, generation: int) -> AttendanceView:
        if generation == self._generation:
            self.last_error = self.last_error or REALTIME_UNAVAILABLE_NOTICE
            self._publish(self.last_error)
        return self.view()

    async def _teardown(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await self._release(subscription)

    async def _release(self, subscription: Subscription) -> None:
        try:
            await self._transport.unsubscribe(subscription)
        except SubscriptionTeardownError as e:
            logger.warning("Ignoring teardown failure: %s", e)

    def _publish(self, notice: Optional[str]) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self.view(), notice)
        except Exception:
            logger.exception("Attendance view listener failed")
