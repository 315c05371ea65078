from .alert_relay import AlertRelay, ViewerConnection
