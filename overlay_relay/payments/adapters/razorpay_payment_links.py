import logging
from typing import Any, Dict, Optional

import httpx

from overlay_relay.core.exceptions import PaymentLinkError
from overlay_relay.payments.ports.payment_link_port import IPaymentLinkProvider

logger = logging.getLogger(__name__)


class RazorpayPaymentLinkProvider(IPaymentLinkProvider):
    """
    Payment link client for the Razorpay REST API.

    Responsibility: Manage communication with the provider.
    """

    def __init__(
        self,
        key_id: Optional[str],
        key_secret: Optional[str],
        api_base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the provider client.

        Args:
            key_id: API key id
            key_secret: API key secret
            api_base_url: Provider API base URL
            timeout: Timeout for the requests (default: 30.0)
            transport: Optional httpx transport, used by tests
        """
        self._key_id = key_id
        self._key_secret = key_secret
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def create_payment_link(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a payment link with the provider.

        Args:
            request: Provider request body

        Returns:
            Created payment link entity

        Raises:
            PaymentLinkError: If there is an error in the communication
        """
        if not self._key_id or not self._key_secret:
            raise PaymentLinkError("Payment provider credentials are not configured")

        try:
            async with httpx.AsyncClient(
                base_url=self._api_base_url,
                auth=(self._key_id, self._key_secret),
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                logger.info("Creating payment link: %s", request.get("reference_id"))
                response = await client.post("/payment_links", json=request)
                if response.is_error:
                    raise PaymentLinkError(
                        _provider_error_message(response),
                        details={"status_code": response.status_code},
                    )
                data = response.json()
                logger.info("Payment link created: %s", data.get("id"))
                return data

        except PaymentLinkError:
            raise
        except httpx.HTTPError as e:
            logger.error(f"HTTP error from the payment provider: {e}")
            raise PaymentLinkError(
                message="Error communicating with the payment provider",
                details={"error": str(e), "api_base_url": self._api_base_url},
            ) from e
        except ValueError as e:
            logger.error(f"Unreadable response from the payment provider: {e}")
            raise PaymentLinkError(
                message="Unexpected response from the payment provider",
                details={"error": str(e)},
            ) from e


def _provider_error_message(response: httpx.Response) -> str:
    """Extract the provider's error description from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("description"):
            return str(error["description"])
        if isinstance(error, str) and error:
            return error

    return f"Payment provider returned HTTP {response.status_code}"
