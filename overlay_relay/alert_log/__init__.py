"""Alert log module."""

from overlay_relay.alert_log.adapters.memory_alert_log import MemoryAlertLog
from overlay_relay.alert_log.ports.alert_log_port import IAlertLog

__all__ = [
    "IAlertLog",
    "MemoryAlertLog",
]
