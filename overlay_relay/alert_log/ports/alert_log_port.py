"""Port for the alert log."""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from overlay_relay.core.alert import Alert, AppendResult


class IAlertLog(ABC):
    """Interface for the ordered, append-only log of alerts seen so far."""

    @abstractmethod
    def append(self, alert: Alert) -> AppendResult:
        """
        Append an alert unless its id was already recorded.

        Args:
            alert: Alert to record

        Returns:
            INSERTED for a new id, DUPLICATE_IGNORED otherwise
        """
        pass

    @abstractmethod
    def snapshot(self) -> Tuple[Alert, ...]:
        """
        Get a point-in-time copy of the log, oldest first.

        Returns:
            Immutable sequence of alerts
        """
        pass

    @abstractmethod
    def get(self, alert_id: str) -> Optional[Alert]:
        """
        Get a recorded alert by id.

        Args:
            alert_id: Alert identifier

        Returns:
            The recorded alert or None if not found
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def __contains__(self, alert_id: object) -> bool:
        return isinstance(alert_id, str) and self.get(alert_id) is not None
