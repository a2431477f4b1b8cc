"""Audit trail of queries, logins and schema changes."""

from __future__ import annotations

import itertools
import json
import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

_CSV_HEADER = "event_id,event_type,timestamp,user,success\n"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _fraction(ts: datetime) -> str:
    micro = ts.microsecond
    if micro == 0:
        return ""
    if micro % 1000 == 0:
        return f".{micro // 1000:03d}"
    return f".{micro:06d}"


def _display(ts: datetime) -> str:
    return f"{ts:%Y-%m-%d %H:%M:%S}{_fraction(ts)} UTC"


def _rfc3339(ts: datetime) -> str:
    return f"{ts:%Y-%m-%dT%H:%M:%S}{_fraction(ts)}Z"


class AuditEventType(Enum):
    QUERY_EXECUTION = "QueryExecution"
    DATA_MODIFICATION = "DataModification"
    SCHEMA_CHANGE = "SchemaChange"
    AUTHENTICATION = "Authentication"
    AUTHORIZATION = "Authorization"
    CONFIGURATION_CHANGE = "ConfigurationChange"


@dataclass
class AuditEvent:
    event_type: AuditEventType
    user: str
    success: bool = True
    timestamp: datetime = field(default_factory=_utcnow)
    query: str | None = None
    table: str | None = None
    error_message: str | None = None
    ip_address: str | None = None
    event_id: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type.value,
            "timestamp": _rfc3339(self.timestamp),
            "user": self.user,
            "query": self.query,
            "table": self.table,
            "success": self.success,
            "error_message": self.error_message,
            "ip_address": self.ip_address,
        }


class AuditLogger:
    """Stores audit events in order, numbering them from 1."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: list[AuditEvent] = []
        self._ids = itertools.count(1)

    def log_event(self, event: AuditEvent) -> int:
        """Store a copy of ``event`` under a fresh id and return that id."""
        with self._lock:
            stored = replace(event, event_id=next(self._ids))
            self._events.append(stored)
        logger.info(
            "AUDIT: event_id=%d, type=%s, user=%s, success=%s",
            stored.event_id,
            stored.event_type.value,
            stored.user,
            stored.success,
        )
        return stored.event_id

    def log_query(self, user: str, query: str, success: bool, error: str | None = None) -> int:
        return self.log_event(
            AuditEvent(
                AuditEventType.QUERY_EXECUTION, user, success, query=query, error_message=error
            )
        )

    def log_authentication(self, user: str, success: bool, ip_address: str | None = None) -> int:
        return self.log_event(
            AuditEvent(AuditEventType.AUTHENTICATION, user, success, ip_address=ip_address)
        )

    def log_schema_change(self, user: str, query: str, table: str) -> int:
        return self.log_event(
            AuditEvent(AuditEventType.SCHEMA_CHANGE, user, True, query=query, table=table)
        )

    def query_logs(
        self,
        user: str | None = None,
        event_type: AuditEventType | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> list[AuditEvent]:
        """Events matching every filter given; the time bounds are inclusive."""

        def matches(e: AuditEvent) -> bool:
            return (
                (user is None or e.user == user)
                and (event_type is None or e.event_type is event_type)
                and (start_time is None or e.timestamp >= start_time)
                and (end_time is None or e.timestamp <= end_time)
            )

        with self._lock:
            return [replace(e) for e in self._events if matches(e)]

    def export_logs(self, format: str) -> str:
        """Render all events as ``json`` or ``csv``."""
        with self._lock:
            events = list(self._events)
        if format == "json":
            return json.dumps([e.to_dict() for e in events], indent=2)
        if format == "csv":
            rows = (
                f"{e.event_id},{e.event_type.value},{_display(e.timestamp)},"
                f"{e.user},{'true' if e.success else 'false'}\n"
                for e in events
            )
            return _CSV_HEADER + "".join(rows)
        raise ValueError(f"Unsupported format: {format}")