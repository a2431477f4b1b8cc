"""Transaction identifiers and MVCC snapshots."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True, order=True)
class TransactionId:
    """A transaction identifier; ``next()`` hands out increasing ids from 1."""

    value: int

    _counter: ClassVar[itertools.count] = itertools.count(1)
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def next(cls) -> "TransactionId":
        """Return a fresh, process-wide unique identifier."""
        with cls._lock:
            return cls(next(cls._counter))


@dataclass
class Snapshot:
    """The view of the database a transaction sees.

    ``logical_time`` is the clock reading the snapshot was taken at.
    """

    xid: TransactionId
    logical_time: Any
    active_xids: list[TransactionId] = field(default_factory=list)

    def _is_other_active(self, xid: TransactionId) -> bool:
        return xid in self.active_xids and xid != self.xid

    def is_visible(
        self, tuple_xmin: TransactionId, tuple_xmax: TransactionId | None = None
    ) -> bool:
        """Decide whether a tuple created by ``tuple_xmin`` and deleted by
        ``tuple_xmax`` (if any) is visible in this snapshot."""
        if tuple_xmin.value > self.xid.value:
            return False
        if self._is_other_active(tuple_xmin):
            return False
        if tuple_xmax is None:
            return True
        if tuple_xmax.value == 0:
            return True
        if tuple_xmax.value > self.xid.value:
            return True
        return self._is_other_active(tuple_xmax)