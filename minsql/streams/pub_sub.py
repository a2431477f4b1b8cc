"""Channel-based publish/subscribe with a bounded message history."""

from __future__ import annotations

import asyncio
import itertools
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

_QUEUE_SIZE = 1000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    channel: str
    payload: Any
    timestamp: datetime
    headers: dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class Subscription:
    """The receiving end of one channel subscription."""

    def __init__(self, channel: str, queue_size: int = _QUEUE_SIZE) -> None:
        self.channel = channel
        self._queue: asyncio.Queue[Message] = asyncio.Queue(maxsize=queue_size)
        self.closed = False

    async def receive(self) -> Message:
        """Wait for the next message; raise RuntimeError once closed."""
        if self.closed:
            raise RuntimeError("subscription is closed")
        return await self._queue.get()

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        """Stop receiving; the broker skips and later drops closed subscriptions."""
        self.closed = True

    async def _deliver(self, message: Message) -> None:
        await self._queue.put(message)


class PubSubBroker:
    """Routes messages to channel subscribers and remembers the latest ones."""

    def __init__(self, max_history: int, clock: Callable[[], datetime] = _utcnow) -> None:
        self.max_history = max_history
        self._clock = clock
        self._channels: dict[str, list[Subscription]] = {}
        self._history: deque[Message] = deque(maxlen=max(max_history, 0))

    def subscribe(self, channel: str) -> Subscription:
        subscription = Subscription(channel)
        self._channels.setdefault(channel, []).append(subscription)
        return subscription

    async def publish(self, channel: str, payload: Any) -> Message:
        return await self.publish_with_headers(channel, payload, {})

    async def publish_with_headers(
        self, channel: str, payload: Any, headers: dict[str, str]
    ) -> Message:
        """Store the message and deliver it to every open subscriber of ``channel``."""
        message = Message(channel, payload, self._clock(), dict(headers))
        self._history.append(message)
        for subscriber in list(self._channels.get(channel, ())):
            if not subscriber.closed:
                await subscriber._deliver(message)
        return message

    def get_message_history(self, channel: str | None = None, limit: int = 100) -> list[Message]:
        """The most recent messages, newest first, optionally for one channel."""
        matching = (m for m in reversed(self._history) if channel is None or m.channel == channel)
        return list(itertools.islice(matching, max(limit, 0)))

    def list_channels(self) -> list[str]:
        return list(self._channels)

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    def cleanup_dead_subscribers(self) -> int:
        """Drop closed subscriptions; return how many were dropped."""
        removed = 0
        for channel, subscribers in self._channels.items():
            alive = [s for s in subscribers if not s.closed]
            removed += len(subscribers) - len(alive)
            self._channels[channel] = alive
        return removed