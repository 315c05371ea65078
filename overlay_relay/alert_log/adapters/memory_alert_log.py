"""In-memory alert log adapter (process lifetime retention)."""

import dataclasses
import logging
import threading
from typing import Dict, List, Optional, Tuple

from overlay_relay.alert_log.ports.alert_log_port import IAlertLog
from overlay_relay.core.alert import Alert, AppendResult

logger = logging.getLogger(__name__)


class MemoryAlertLog(IAlertLog):
    """In-memory alert log; cleared only by a process restart."""

    def __init__(self):
        """Initialize an empty alert log."""
        self._alerts: List[Alert] = []
        self._by_id: Dict[str, Alert] = {}
        self._lock = threading.Lock()

    def append(self, alert: Alert) -> AppendResult:
        """
        Append an alert unless its id was already recorded.

        The first record for an id is final; a later alert with the same id
        is ignored even if its fields differ. A timestamp earlier than the
        last recorded one is raised to it so timestamps never go backwards
        in log order.

        Args:
            alert: Alert to record

        Returns:
            INSERTED for a new id, DUPLICATE_IGNORED otherwise
        """
        with self._lock:
            if alert.id in self._by_id:
                return AppendResult.DUPLICATE_IGNORED

            if self._alerts and alert.timestamp < self._alerts[-1].timestamp:
                alert = dataclasses.replace(alert, timestamp=self._alerts[-1].timestamp)

            self._alerts.append(alert)
            self._by_id[alert.id] = alert
            size = len(self._alerts)

        logger.debug("Alert %s appended (log size %s)", alert.id, size)
        return AppendResult.INSERTED

    def snapshot(self) -> Tuple[Alert, ...]:
        """
        Get a point-in-time copy of the log, oldest first.

        Returns:
            Immutable sequence of alerts
        """
        with self._lock:
            return tuple(self._alerts)

    def get(self, alert_id: str) -> Optional[Alert]:
        """
        Get a recorded alert by id.

        Args:
            alert_id: Alert identifier

        Returns:
            The recorded alert or None if not found
        """
        return self._by_id.get(alert_id)

    def __len__(self) -> int:
        return len(self._alerts)
