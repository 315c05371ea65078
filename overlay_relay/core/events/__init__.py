from .alert_messages import (
    ALL_ALERTS,
    NEW_ALERT,
    create_all_alerts_message,
    create_new_alert_message,
)
