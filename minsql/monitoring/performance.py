"""Recent query timings and latency statistics."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

_SLOWEST_KEPT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class QueryPerformance:
    query: str
    execution_time: timedelta
    rows_returned: int
    timestamp: datetime


@dataclass(frozen=True)
class PerformanceStats:
    avg_query_time: timedelta = timedelta()
    p50_query_time: timedelta = timedelta()
    p95_query_time: timedelta = timedelta()
    p99_query_time: timedelta = timedelta()
    slowest_queries: list[QueryPerformance] = field(default_factory=list)
    total_queries: int = 0


class PerformanceMonitor:
    """Keeps the last ``max_history`` queries and summarises their latency."""

    def __init__(self, max_history: int, clock: Callable[[], datetime] = _utcnow) -> None:
        self.max_history = max_history
        self._clock = clock
        self._lock = threading.Lock()
        # A full history always makes room for the newest query.
        self._queries: deque[QueryPerformance] = deque(maxlen=max(max_history, 1))

    def record_query(self, query: str, execution_time: timedelta, rows_returned: int) -> None:
        record = QueryPerformance(query, execution_time, rows_returned, self._clock())
        with self._lock:
            self._queries.append(record)

    def get_stats(self) -> PerformanceStats:
        with self._lock:
            queries = list(self._queries)
        if not queries:
            return PerformanceStats()

        times = sorted(q.execution_time for q in queries)
        count = len(times)
        slowest = sorted(queries, key=lambda q: q.execution_time, reverse=True)
        return PerformanceStats(
            avg_query_time=sum(times, timedelta()) / count,
            p50_query_time=times[count // 2],
            p95_query_time=times[int(count * 0.95)],
            p99_query_time=times[int(count * 0.99)],
            slowest_queries=slowest[:_SLOWEST_KEPT],
            total_queries=count,
        )

    def get_slow_queries(self, threshold: timedelta) -> list[QueryPerformance]:
        """Queries that took strictly longer than ``threshold``, oldest first."""
        with self._lock:
            return [q for q in self._queries if q.execution_time > threshold]

    def clear_history(self) -> None:
        with self._lock:
            self._queries.clear()