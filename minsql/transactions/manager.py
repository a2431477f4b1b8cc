"""Transaction lifecycle: begin, commit and abort."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from minsql.transactions.snapshot import Snapshot, TransactionId


class TransactionNotFoundError(LookupError):
    """Raised when a transaction id is not among the active transactions."""


class TransactionState(Enum):
    ACTIVE = "active"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass
class Transaction:
    snapshot: Snapshot
    logical_time: Any
    id: TransactionId = field(default_factory=TransactionId.next)
    state: TransactionState = TransactionState.ACTIVE

    def commit(self) -> None:
        self.state = TransactionState.COMMITTED

    def abort(self) -> None:
        self.state = TransactionState.ABORTED


class TransactionManager:
    """Keeps the set of active transactions."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: dict[TransactionId, Transaction] = {}

    def __contains__(self, xid: object) -> bool:
        return xid in self._active

    def __len__(self) -> int:
        return len(self._active)

    def begin(self, logical_time: Any) -> TransactionId:
        """Start a transaction whose snapshot sees the currently active ones."""
        with self._lock:
            snapshot = Snapshot(TransactionId.next(), logical_time, list(self._active))
            transaction = Transaction(snapshot, logical_time)
            self._active[transaction.id] = transaction
            return transaction.id

    def _finish(self, xid: TransactionId, commit: bool) -> Transaction:
        with self._lock:
            transaction = self._active.pop(xid, None)
        if transaction is None:
            raise TransactionNotFoundError("Transaction not found")
        if commit:
            transaction.commit()
        else:
            transaction.abort()
        return transaction

    def commit(self, xid: TransactionId) -> None:
        self._finish(xid, commit=True)

    def abort(self, xid: TransactionId) -> None:
        self._finish(xid, commit=False)

    def get_snapshot(self, xid: TransactionId) -> Snapshot:
        transaction = self._active.get(xid)
        if transaction is None:
            raise TransactionNotFoundError("Transaction not found")
        return transaction.snapshot