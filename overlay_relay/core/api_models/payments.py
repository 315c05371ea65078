from typing import Optional, Any, Dict

from pydantic import BaseModel, Field


class CustomerInfo(BaseModel):
    """Customer details forwarded to the payment provider."""

    name: str = "Supporter"
    email: str = ""
    contact: str = ""


class PaymentLinkRequest(BaseModel):
    """Request to create a donation payment link."""

    amount: Optional[float] = Field(default=None, gt=0, description="Amount in major units")
    customer: Optional[CustomerInfo] = None
    purpose: Optional[str] = None


class PaymentLinkResponse(BaseModel):
    """Created link, or the provider's error message."""

    success: bool
    link: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
