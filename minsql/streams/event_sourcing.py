"""Event store with per-aggregate versioning, snapshots and replay."""

from __future__ import annotations

import copy
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VersionMismatchError(ValueError):
    """Raised when an event does not carry the next version of its aggregate."""


@dataclass
class Event:
    aggregate_id: str
    aggregate_type: str
    event_type: str
    version: int
    event_data: Any = None
    timestamp: datetime = field(default_factory=_utcnow)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class Aggregate:
    id: str
    aggregate_type: str
    version: int = 0
    state: Any = None


Reducer = Callable[[Any, Event], Any]


class EventStore:
    """Append-only events; an optional ``reducer`` folds them into a state.

    Without a reducer, replaying events leaves the starting state unchanged.
    """

    def __init__(self, reducer: Optional[Reducer] = None) -> None:
        self._reducer = reducer
        self._events: list[Event] = []
        self._aggregates: dict[str, Aggregate] = {}
        self._snapshots: dict[str, tuple[int, Any]] = {}

    def append_event(self, event: Event) -> None:
        """Store ``event``; its version must be one past its aggregate's."""
        aggregate = self._aggregates.setdefault(
            event.aggregate_id, Aggregate(event.aggregate_id, event.aggregate_type)
        )
        expected = aggregate.version + 1
        if event.version != expected:
            raise VersionMismatchError(
                f"Version mismatch: expected {expected}, got {event.version}"
            )
        aggregate.version = event.version
        self._events.append(event)

    def get_events(self, aggregate_id: str, from_version: int | None = None) -> list[Event]:
        return [
            replace(e)
            for e in self._events
            if e.aggregate_id == aggregate_id
            and (from_version is None or e.version >= from_version)
        ]

    def get_aggregate_state(self, aggregate_id: str) -> Aggregate | None:
        aggregate = self._aggregates.get(aggregate_id)
        return None if aggregate is None else replace(aggregate)

    def create_snapshot(self, aggregate_id: str, version: int, state: Any) -> None:
        self._snapshots[aggregate_id] = (version, copy.deepcopy(state))

    def get_snapshot(self, aggregate_id: str) -> tuple[int, Any] | None:
        snapshot = self._snapshots.get(aggregate_id)
        return None if snapshot is None else (snapshot[0], copy.deepcopy(snapshot[1]))

    def rebuild_aggregate(self, aggregate_id: str) -> Any:
        """Replay events from the latest snapshot (or from nothing) into a state."""
        snapshot = self.get_snapshot(aggregate_id)
        if snapshot is None:
            state, events = None, self.get_events(aggregate_id)
        else:
            version, state = snapshot
            events = self.get_events(aggregate_id, version + 1)
        if self._reducer is None:
            return state
        for event in events:
            state = self._reducer(state, event)
        return state

    def get_event_stream(
        self, aggregate_type: str | None = None, from_timestamp: datetime | None = None
    ) -> list[Event]:
        return [
            replace(e)
            for e in self._events
            if (aggregate_type is None or e.aggregate_type == aggregate_type)
            and (from_timestamp is None or e.timestamp >= from_timestamp)
        ]

    def purge_old_events(self, before: datetime) -> int:
        """Drop events older than ``before``; return how many were dropped."""
        kept = [e for e in self._events if e.timestamp >= before]
        removed = len(self._events) - len(kept)
        self._events = kept
        return removed