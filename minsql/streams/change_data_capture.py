"""Change data capture: per-table change events fanned out to subscribers."""

from __future__ import annotations

import asyncio
import itertools
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

_QUEUE_SIZE = 1000
_CSV_HEADER = "change_id,change_type,table,timestamp\n"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChangeType(Enum):
    INSERT = "Insert"
    UPDATE = "Update"
    DELETE = "Delete"


@dataclass(frozen=True)
class ChangeEvent:
    change_id: int
    change_type: ChangeType
    table: str
    before: Any
    after: Any
    timestamp: datetime
    transaction_id: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "change_id": self.change_id,
            "change_type": self.change_type.value,
            "table": self.table,
            "before": self.before,
            "after": self.after,
            "timestamp": self.timestamp.isoformat(),
            "transaction_id": self.transaction_id,
        }


@dataclass
class CDCSubscription:
    """Interest in changes to ``tables``; no ``operations`` means every kind."""

    id: str
    tables: list[str] = field(default_factory=list)
    operations: list[ChangeType] = field(default_factory=list)
    filter: str | None = None

    def matches(self, table: str, change_type: ChangeType) -> bool:
        return table in self.tables and (not self.operations or change_type in self.operations)


class ChangeDataCapture:
    """Numbers changes from 1, keeps a log of them and delivers them to subscribers."""

    def __init__(
        self, clock: Callable[[], datetime] = _utcnow, queue_size: int = _QUEUE_SIZE
    ) -> None:
        self._clock = clock
        self._queue_size = queue_size
        self._ids = itertools.count(1)
        self._subscriptions: dict[str, tuple[CDCSubscription, asyncio.Queue[ChangeEvent]]] = {}
        self._log: list[ChangeEvent] = []

    def subscribe(self, subscription: CDCSubscription) -> asyncio.Queue[ChangeEvent]:
        """Register ``subscription`` and return the queue its events arrive on."""
        queue: asyncio.Queue[ChangeEvent] = asyncio.Queue(maxsize=self._queue_size)
        self._subscriptions[subscription.id] = (subscription, queue)
        return queue

    def unsubscribe(self, subscription_id: str) -> None:
        self._subscriptions.pop(subscription_id, None)

    async def emit_change(
        self,
        change_type: ChangeType,
        table: str,
        before: Any = None,
        after: Any = None,
        transaction_id: int = 0,
    ) -> ChangeEvent:
        """Record a change and deliver it to every matching subscriber."""
        event = ChangeEvent(
            change_id=next(self._ids),
            change_type=change_type,
            table=table,
            before=before,
            after=after,
            timestamp=self._clock(),
            transaction_id=transaction_id,
        )
        self._log.append(event)
        for subscription, queue in list(self._subscriptions.values()):
            if subscription.matches(table, change_type):
                await queue.put(event)
        return event

    def get_change_log(
        self,
        table: str | None = None,
        since: datetime | None = None,
        limit: int | None = None,
    ) -> list[ChangeEvent]:
        """Logged changes, oldest first, optionally for one table and from ``since`` on."""
        matching = [
            e
            for e in self._log
            if (table is None or e.table == table) and (since is None or e.timestamp >= since)
        ]
        return matching if limit is None else matching[:limit]

    def export_changes(self, format: str, table: str | None = None) -> str:
        """Render the logged changes as ``json`` or ``csv``."""
        events = self.get_change_log(table)
        if format == "json":
            return json.dumps([e.to_dict() for e in events], indent=2, default=str)
        if format == "csv":
            rows = (
                f"{e.change_id},{e.change_type.value},{e.table},{e.timestamp.isoformat()}\n"
                for e in events
            )
            return _CSV_HEADER + "".join(rows)
        raise ValueError(f"Unsupported format: {format}")

    def list_subscriptions(self) -> list[CDCSubscription]:
        return [subscription for subscription, _ in self._subscriptions.values()]