"""Payment link service - donation link requests with defaults applied."""

import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Optional

from overlay_relay.core.api_models import CustomerInfo, PaymentLinkRequest
from overlay_relay.payments.ports.payment_link_port import IPaymentLinkProvider


class PaymentLinkService:
    """Service for creating donation payment links."""

    def __init__(
        self,
        provider: IPaymentLinkProvider,
        currency: str = "INR",
        default_amount: float = 10,
        default_purpose: str = "Donation",
        default_customer_name: str = "Supporter",
        reference_prefix: str = "don",
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize payment link service with injected dependencies.

        Args:
            provider: Payment provider implementation
            currency: Currency of every link
            default_amount: Amount in major units when the request has none
            default_purpose: Link description when the request has none
            default_customer_name: Customer name when the request has no customer
            reference_prefix: Prefix of the link's reference id
            clock: Source of epoch seconds for the reference id
        """
        self.provider = provider
        self.currency = currency
        self.default_amount = default_amount
        self.default_purpose = default_purpose
        self.default_customer_name = default_customer_name
        self.reference_prefix = reference_prefix
        self._clock = clock

    def build_request(self, request: PaymentLinkRequest) -> Dict[str, Any]:
        """
        Build the provider request body.

        Args:
            request: Incoming link request

        Returns:
            Provider request with the amount converted to minor units
        """
        amount = request.amount if request.amount is not None else self.default_amount
        customer = request.customer or CustomerInfo(name=self.default_customer_name)

        return {
            "amount": _to_minor_units(amount),
            "currency": self.currency,
            "accept_partial": False,
            "description": request.purpose or self.default_purpose,
            "reference_id": f"{self.reference_prefix}-{int(self._clock() * 1000)}",
            "customer": customer.model_dump(),
            "notify": {"sms": False, "email": False},
            "reminder_enable": False,
        }

    async def create(self, request: Optional[PaymentLinkRequest] = None) -> Dict[str, Any]:
        """
        Create a payment link.

        Args:
            request: Incoming link request; defaults apply when None

        Returns:
            The created link as returned by the provider

        Raises:
            PaymentLinkError: If the provider call fails
        """
        body = self.build_request(request or PaymentLinkRequest())
        return await self.provider.create_payment_link(body)


def _to_minor_units(amount: float) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
