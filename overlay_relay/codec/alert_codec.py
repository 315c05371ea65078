"""Normalization of provider webhook events into alerts."""

import itertools
import logging
from datetime import datetime
from decimal import Decimal, DecimalException
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional

from overlay_relay.codec.payload_shapes import PayloadShape, match_shape
from overlay_relay.core.alert import Alert, utc_now
from overlay_relay.core.exceptions import MalformedPayloadError, UnhandledEventTypeError

logger = logging.getLogger(__name__)

HANDLED_EVENT_TYPES: FrozenSet[str] = frozenset(
    {"payment.captured", "payment.authorized", "payment.link.paid"}
)

_MINOR_UNITS = Decimal(100)
_CENTS = Decimal("0.01")

# Process-wide so ids synthesized by different codec instances never collide
_fallback_sequence = itertools.count(1)


class AlertCodec:
    """Decode provider events into canonical alerts."""

    def __init__(
        self,
        default_name: str = "Anonymous",
        default_currency: str = "INR",
        fallback_id_prefix: str = "alert",
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the codec.

        Args:
            default_name: Name used when the payload carries none
            default_currency: Currency used when the payload carries none
            fallback_id_prefix: Prefix for ids synthesized when the provider sends none
            clock: Source of the recorded timestamp
        """
        self.default_name = default_name
        self.default_currency = default_currency
        self.fallback_id_prefix = fallback_id_prefix
        self._clock = clock

    def decode(
        self,
        event_type: Optional[str],
        payload: Any,
        raw: Optional[Dict[str, Any]] = None,
    ) -> Alert:
        """
        Decode a provider event into an alert.

        Args:
            event_type: Provider event name, e.g. ``payment.captured``
            payload: The event's ``payload`` object
            raw: Full provider envelope to retain on the alert

        Returns:
            Alert built from the first recognized payload shape

        Raises:
            UnhandledEventTypeError: If the event type does not produce alerts
            MalformedPayloadError: If the payload is not an object
        """
        if not isinstance(event_type, str) or event_type not in HANDLED_EVENT_TYPES:
            raise UnhandledEventTypeError(event_type)

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise MalformedPayloadError(
                "Event payload must be an object",
                details={"event_type": event_type, "payload_type": type(payload).__name__},
            )

        shape = match_shape(payload)
        timestamp = self._clock()

        if shape is None:
            logger.debug("No known entity in %s payload; using defaults", event_type)

        return Alert(
            id=self._payment_id(shape, timestamp),
            name=(shape.payer_name() if shape else None) or self.default_name,
            amount=self._major_amount(shape),
            currency=(shape.currency() if shape else None) or self.default_currency,
            timestamp=timestamp,
            raw=dict(raw) if raw is not None else dict(payload),
        )

    def _payment_id(self, shape: Optional[PayloadShape], timestamp: datetime) -> str:
        payment_id = shape.payment_id() if shape else None
        if payment_id:
            return payment_id
        millis = int(timestamp.timestamp() * 1000)
        return f"{self.fallback_id_prefix}-{millis}-{next(_fallback_sequence)}"

    @staticmethod
    def _major_amount(shape: Optional[PayloadShape]) -> Optional[Decimal]:
        minor = shape.amount_minor() if shape else None
        if minor is None:
            return None
        try:
            return (minor / _MINOR_UNITS).quantize(_CENTS)
        except DecimalException:
            # Too large for the decimal context
            logger.warning("Amount %s is out of range; recording no amount", minor)
            return None
