"""Operational alerts with acknowledgement and expiry."""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from enum import Enum

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AlertNotFoundError(LookupError):
    """Raised when an alert id is unknown."""


class AlertSeverity(Enum):
    INFO = "Info"
    WARNING = "Warning"
    CRITICAL = "Critical"


@dataclass
class Alert:
    id: int
    severity: AlertSeverity
    message: str
    timestamp: datetime
    acknowledged: bool = False


class AlertManager:
    """Keeps raised alerts and tracks which have been acknowledged."""

    def __init__(self, clock: Clock = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._alerts: list[Alert] = []
        self._ids = itertools.count(1)

    def raise_alert(self, severity: AlertSeverity, message: str) -> int:
        """Record a new alert and return its id."""
        with self._lock:
            alert_id = next(self._ids)
            self._alerts.append(Alert(alert_id, severity, message, self._clock()))
        logger.warning("ALERT [%s]: %d - %s", severity.name, alert_id, message)
        return alert_id

    def acknowledge_alert(self, alert_id: int) -> None:
        """Mark an alert acknowledged; raise :class:`AlertNotFoundError` if unknown."""
        with self._lock:
            for alert in self._alerts:
                if alert.id == alert_id:
                    alert.acknowledged = True
                    return
        raise AlertNotFoundError(f"Alert not found: {alert_id}")

    def get_active_alerts(self) -> list[Alert]:
        with self._lock:
            return [replace(a) for a in self._alerts if not a.acknowledged]

    def get_critical_alerts(self) -> list[Alert]:
        with self._lock:
            return [
                replace(a)
                for a in self._alerts
                if not a.acknowledged and a.severity is AlertSeverity.CRITICAL
            ]

    def clear_old_alerts(self, hours: float) -> None:
        """Forget acknowledged alerts older than ``hours`` hours."""
        cutoff = self._clock() - timedelta(hours=hours)
        with self._lock:
            self._alerts = [a for a in self._alerts if a.timestamp > cutoff or not a.acknowledged]