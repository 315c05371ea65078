from typing import Any, Optional

from pydantic import BaseModel


class WebhookAck(BaseModel):
    """Acknowledgement returned to the payment provider."""

    status: str  # ok, duplicate, ignored
    alert_id: str | None = None


class AlertListResponse(BaseModel):
    """Alert history, oldest first."""

    alerts: list[dict[str, Any]]


class QRCodeResponse(BaseModel):
    qrcode: str


class HealthResponse(BaseModel):
    status: str
    service: str
    alerts: int
    viewers: int
    webhook_secret_configured: Optional[bool] = None
