from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from ..attendance.events import ChangeEvent, parse_change_payload
from ..attendance.model import SubjectScope
from ..core.constants import REALTIME_SCHEMA
from ..core.exceptions import SubscriptionError, SubscriptionTeardownError
from ..database.connection import SupabaseConnection

logger = logging.getLogger(__name__)

EventSink = Callable[[ChangeEvent], None]


@dataclass
class Subscription:
    scope: SubjectScope
    handle: Any = None


class RealtimeTransport(Protocol):
    """Change feed for one scope. Delivered events are already normalized."""

    async def subscribe(self, scope: SubjectScope, sink: EventSink) -> Subscription:
        """Raises SubscriptionError when the channel cannot be opened."""
        raise NotImplementedError

    async def unsubscribe(self, subscription: Subscription) -> None:
        """Raises SubscriptionTeardownError when the channel cannot be removed."""
        raise NotImplementedError


class SupabaseRealtimeTransport(RealtimeTransport):
    """postgres_changes channel on the attendance table, filtered by scope."""

    def __init__(self, conn: SupabaseConnection, *, table: Optional[str] = None, schema: str = REALTIME_SCHEMA):
        self._conn = conn
        self._table = table or conn.config.attendance_table
        self._schema = schema

    async def subscribe(self, scope: SubjectScope, sink: EventSink) -> Subscription:
        """Raises SubscriptionError when the channel cannot be opened."""

        def on_payload(payload: dict) -> None:
            logger.debug("Attendance realtime payload for %s: %r", scope, payload)
            sink(parse_change_payload(payload))

        def on_status(status, err: Optional[Exception] = None) -> None:
            if err:
                logger.warning("Attendance subscription %s: %s (%s)", scope, status, err)
            else:
                logger.info("Attendance subscription %s: %s", scope, status)

        try:
            client = await self._conn.async_client()
            channel = client.channel(scope.channel_name())
            channel.on_postgres_changes(
                "*",
                callback=on_payload,
                table=self._table,
                schema=self._schema,
                filter=scope.realtime_filter(),
            )
            await channel.subscribe(on_status)
        except Exception as e:
            raise SubscriptionError(f"Could not subscribe to {scope}: {e}") from e
        return Subscription(scope=scope, handle=channel)

    async def unsubscribe(self, subscription: Subscription) -> None:
        if subscription.handle is None:
            return
        try:
            client = await self._conn.async_client()
            await client.remove_channel(subscription.handle)
        except Exception as e:
            raise SubscriptionTeardownError(f"Could not remove channel for {subscription.scope}: {e}") from e
