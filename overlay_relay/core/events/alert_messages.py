from typing import Any, Iterable

from overlay_relay.core.alert import Alert

ALL_ALERTS = "all_alerts"
NEW_ALERT = "new_alert"


def create_all_alerts_message(alerts: Iterable[Alert]) -> dict[str, Any]:
    """Create the catch-up message sent once to a newly connected viewer.

    Args:
        alerts: Alerts in log order, oldest first

    Returns:
        Message dictionary for the WebSocket
    """
    return {"event": ALL_ALERTS, "data": [alert.to_dict() for alert in alerts]}


def create_new_alert_message(alert: Alert) -> dict[str, Any]:
    """Create the live message pushed to every viewer for a new alert."""
    return {"event": NEW_ALERT, "data": alert.to_dict()}
