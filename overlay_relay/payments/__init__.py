"""Payment link module."""

from overlay_relay.payments.adapters.razorpay_payment_links import RazorpayPaymentLinkProvider
from overlay_relay.payments.payment_link_service import PaymentLinkService
from overlay_relay.payments.ports.payment_link_port import IPaymentLinkProvider

__all__ = [
    "PaymentLinkService",
    "IPaymentLinkProvider",
    "RazorpayPaymentLinkProvider",
]
