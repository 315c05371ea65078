"""
Pydantic models exposed to the API layer (requests/responses).
"""

from .alerts import (
    AlertListResponse,
    HealthResponse,
    QRCodeResponse,
    WebhookAck,
)
from .payments import CustomerInfo, PaymentLinkRequest, PaymentLinkResponse
