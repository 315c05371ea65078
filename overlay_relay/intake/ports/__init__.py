"""Ports (interfaces) for intake module."""

from overlay_relay.intake.ports.logger_port import ILogger

__all__ = [
    "ILogger",
]
