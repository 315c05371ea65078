"""Adapters (implementations) for alert log module."""

from overlay_relay.alert_log.adapters.memory_alert_log import MemoryAlertLog

__all__ = [
    "MemoryAlertLog",
]
