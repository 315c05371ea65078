"""Ports (interfaces) for alert log module."""

from overlay_relay.alert_log.ports.alert_log_port import IAlertLog

__all__ = [
    "IAlertLog",
]
