"""Adapters (implementations) for payment link module."""

from overlay_relay.payments.adapters.razorpay_payment_links import RazorpayPaymentLinkProvider

__all__ = [
    "RazorpayPaymentLinkProvider",
]
