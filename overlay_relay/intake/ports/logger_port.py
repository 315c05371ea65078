"""Port for intake event logging."""

from abc import ABC, abstractmethod
from typing import Dict, Any


class ILogger(ABC):
    """Interface for logging intake events."""

    @abstractmethod
    def log(self, level: str, message: str, **kwargs) -> None:
        """
        Log a message.

        Args:
            level: Log level (debug, info, warning, error)
            message: Log message
            **kwargs: Additional context (event type, alert id, ...)
        """
        pass

    @abstractmethod
    def log_structured(self, data: Dict[str, Any]) -> None:
        """
        Log structured data.

        Args:
            data: Dictionary with an ``event`` key and its context
        """
        pass
