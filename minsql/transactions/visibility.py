"""Tuple visibility and update checks against a snapshot."""

from __future__ import annotations

from minsql.transactions.snapshot import Snapshot, TransactionId


class VisibilityChecker:
    """Answers whether tuples may be read or updated under a snapshot."""

    def is_tuple_visible(
        self, snapshot: Snapshot, xmin: TransactionId, xmax: TransactionId | None
    ) -> bool:
        return snapshot.is_visible(xmin, xmax)

    def can_update(self, snapshot: Snapshot, tuple_xmax: TransactionId | None) -> bool:
        """A tuple can be updated unless some transaction has already deleted it."""
        return tuple_xmax is None or tuple_xmax.value == 0