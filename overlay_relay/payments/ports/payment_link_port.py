"""Port for payment link creation."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IPaymentLinkProvider(ABC):
    """Interface for a payment provider that issues payment links."""

    @abstractmethod
    async def create_payment_link(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a payment link.

        Args:
            request: Provider request body (amount in minor units, customer, ...)

        Returns:
            The created link as returned by the provider

        Raises:
            PaymentLinkError: If the provider rejects the request or is unreachable
        """
        pass
