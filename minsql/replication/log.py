"""In-memory replication log with commit and apply positions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LogEntryType(Enum):
    WRITE = "write"
    CONFIG = "config"
    SNAPSHOT = "snapshot"


@dataclass
class LogEntry:
    term: int
    index: int
    entry_type: LogEntryType
    data: bytes = b""


@dataclass
class ReplicationLog:
    """An ordered list of entries plus the commit and last-applied indexes."""

    entries: list[LogEntry] = field(default_factory=list)
    commit_index: int = 0
    last_applied: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def get(self, index: int) -> LogEntry | None:
        """Return the entry at zero-based position ``index``, or None."""
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def last_index(self) -> int:
        return len(self.entries)

    def last_term(self) -> int:
        return self.entries[-1].term if self.entries else 0

    def commit(self, index: int) -> None:
        self.commit_index = index

    def apply(self, index: int) -> None:
        self.last_applied = index

    def truncate(self, from_index: int) -> None:
        """Drop every entry at position ``from_index`` and after."""
        keep = max(from_index, 0)
        self.entries = self.entries[:keep]