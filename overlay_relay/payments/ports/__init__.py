"""Ports (interfaces) for payment link module."""

from overlay_relay.payments.ports.payment_link_port import IPaymentLinkProvider

__all__ = [
    "IPaymentLinkProvider",
]
