"""Snapshots for bringing a lagging replica up to date."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Snapshot:
    last_included_index: int
    last_included_term: int
    data: bytes


class StateSync:
    """Creates snapshots and accepts installed ones."""

    def __init__(self) -> None:
        self.last_installed: Snapshot | None = None

    def create_snapshot(self, last_index: int, last_term: int, state: bytes) -> Snapshot:
        return Snapshot(
            last_included_index=last_index,
            last_included_term=last_term,
            data=bytes(state),
        )

    def install_snapshot(self, snapshot: Snapshot) -> None:
        """Accept ``snapshot`` as the most recently installed state."""
        self.last_installed = snapshot