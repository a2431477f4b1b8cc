"""Process-wide counters for queries, statements and transactions."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import Counter

logger = logging.getLogger(__name__)

_QUERIES = "queries"
_EXECUTIONS = "executions"
_COMMITS = "commits"
_ABORTS = "aborts"


class MetricsRegistry:
    """Thread-safe counters with a periodic logging loop."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[str] = Counter()

    def _increment(self, name: str) -> None:
        with self._lock:
            self._counts[name] += 1

    def increment_queries(self) -> None:
        self._increment(_QUERIES)

    def increment_executions(self) -> None:
        self._increment(_EXECUTIONS)

    def increment_commits(self) -> None:
        self._increment(_COMMITS)

    def increment_aborts(self) -> None:
        self._increment(_ABORTS)

    def queries(self) -> int:
        return self._counts[_QUERIES]

    def executions(self) -> int:
        return self._counts[_EXECUTIONS]

    def commits(self) -> int:
        return self._counts[_COMMITS]

    def aborts(self) -> int:
        return self._counts[_ABORTS]

    async def report_loop(self, interval: float = 60.0) -> None:
        """Log all counters now and then every ``interval`` seconds, until cancelled."""
        while True:
            logger.info(
                "Metrics: queries=%d, executions=%d, commits=%d, aborts=%d",
                self.queries(),
                self.executions(),
                self.commits(),
                self.aborts(),
            )
            await asyncio.sleep(interval)