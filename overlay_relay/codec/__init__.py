"""Provider event codec."""

from overlay_relay.codec.alert_codec import HANDLED_EVENT_TYPES, AlertCodec
from overlay_relay.codec.payload_shapes import PaymentEntity, PaymentLinkEntity, PayloadShape

__all__ = [
    "AlertCodec",
    "HANDLED_EVENT_TYPES",
    "PayloadShape",
    "PaymentEntity",
    "PaymentLinkEntity",
]
