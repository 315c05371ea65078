"""Structlog logger adapter."""

from typing import Dict, Any

import structlog

from overlay_relay.intake.ports.logger_port import ILogger


class StructlogLogger(ILogger):
    """Structlog implementation for logging."""

    def __init__(self, name: str = "overlay_relay.intake"):
        """
        Initialize structlog logger.

        Args:
            name: Logger name bound to every entry
        """
        self._logger = structlog.get_logger(name)

    def log(self, level: str, message: str, **kwargs) -> None:
        """
        Log a message.

        Args:
            level: Log level
            message: Log message
            **kwargs: Additional context
        """
        getattr(self._logger, level.lower())(message, **kwargs)

    def log_structured(self, data: Dict[str, Any]) -> None:
        """
        Log structured data.

        Args:
            data: Dictionary of structured data; ``event`` becomes the message
        """
        fields = dict(data)
        event = fields.pop("event", "structured_log")
        self._logger.info(event, **fields)
