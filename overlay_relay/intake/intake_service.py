"""Webhook intake service - verify, decode, record and publish."""

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from overlay_relay.alert_log.ports.alert_log_port import IAlertLog
from overlay_relay.codec.alert_codec import AlertCodec
from overlay_relay.core.alert import AppendResult
from overlay_relay.core.exceptions import (
    InvalidSignatureError,
    MalformedPayloadError,
    UnhandledEventTypeError,
)
from overlay_relay.core.realtime import AlertRelay
from overlay_relay.intake.ports.logger_port import ILogger
from overlay_relay.intake.webhook_verifier import verify_signature


class IntakeStatus(str, Enum):
    """Terminal state of one webhook call."""

    APPENDED = "appended"
    DUPLICATE_IGNORED = "duplicate_ignored"
    IGNORED = "ignored"
    REJECTED_SIGNATURE = "rejected_signature"
    REJECTED_MALFORMED = "rejected_malformed"


@dataclass(frozen=True)
class IntakeResult:
    """Outcome of handling a webhook call."""

    status: IntakeStatus
    alert_id: Optional[str] = None
    event_type: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status not in (
            IntakeStatus.REJECTED_SIGNATURE,
            IntakeStatus.REJECTED_MALFORMED,
        )


class IntakeService:
    """Service turning provider webhooks into published alerts."""

    def __init__(
        self,
        webhook_secret: Optional[str],
        codec: AlertCodec,
        alert_log: IAlertLog,
        relay: AlertRelay,
        logger: ILogger,
    ):
        """
        Initialize intake service with injected dependencies.

        Args:
            webhook_secret: Secret shared with the provider; unset rejects every call
            codec: Provider event decoder
            alert_log: Log new alerts are appended to
            relay: Relay notified of newly inserted alerts
            logger: Logger implementation
        """
        self.webhook_secret = webhook_secret
        self.codec = codec
        self.alert_log = alert_log
        self.relay = relay
        self.logger = logger

    def handle(self, raw_body: bytes, signature: Optional[str]) -> IntakeResult:
        """
        Handle one webhook call.

        Runs without suspending, so the append and the publish of an alert
        are never interleaved with another call's on the same event loop.

        Args:
            raw_body: Unparsed request body
            signature: Value of the signature header, if any

        Returns:
            IntakeResult describing what happened
        """
        try:
            self._verify(raw_body, signature)
            envelope = self._parse(raw_body)
        except InvalidSignatureError as exc:
            self.logger.log("warning", "Invalid webhook signature", reason=exc.message)
            return IntakeResult(status=IntakeStatus.REJECTED_SIGNATURE)
        except MalformedPayloadError as exc:
            self.logger.log("warning", "Malformed webhook body", reason=exc.message)
            return IntakeResult(status=IntakeStatus.REJECTED_MALFORMED)

        event = envelope.get("event")
        event_type = _as_text(event)
        self.logger.log("info", "Received webhook event", event_type=event_type)

        try:
            alert = self.codec.decode(event, envelope.get("payload"), raw=envelope)
        except UnhandledEventTypeError:
            self.logger.log("info", "Ignoring webhook event", event_type=event_type)
            return IntakeResult(status=IntakeStatus.IGNORED, event_type=event_type)
        except MalformedPayloadError as exc:
            self.logger.log("warning", "Malformed webhook payload", event_type=event_type, reason=exc.message)
            return IntakeResult(status=IntakeStatus.REJECTED_MALFORMED, event_type=event_type)

        if self.alert_log.append(alert) is AppendResult.DUPLICATE_IGNORED:
            self.logger.log("info", "Duplicate alert ignored", alert_id=alert.id, event_type=event_type)
            return IntakeResult(
                status=IntakeStatus.DUPLICATE_IGNORED,
                alert_id=alert.id,
                event_type=event_type,
            )

        # The log may have adjusted the timestamp; publish what was stored
        stored = self.alert_log.get(alert.id) or alert
        viewers = self.relay.publish(stored)

        self.logger.log_structured({
            "event": "alert_published",
            "alert_id": stored.id,
            "event_type": event_type,
            "amount": str(stored.amount) if stored.amount is not None else None,
            "currency": stored.currency,
            "viewers": viewers,
        })
        return IntakeResult(status=IntakeStatus.APPENDED, alert_id=stored.id, event_type=event_type)

    def _verify(self, raw_body: bytes, signature: Optional[str]) -> None:
        if not self.webhook_secret:
            raise InvalidSignatureError("Webhook secret is not configured")
        if not signature:
            raise InvalidSignatureError("Missing signature header")
        if not verify_signature(raw_body, signature, self.webhook_secret):
            raise InvalidSignatureError("Signature mismatch")

    @staticmethod
    def _parse(raw_body: bytes) -> Dict[str, Any]:
        try:
            envelope = json.loads(raw_body, parse_constant=_reject_constant, parse_float=_finite_float)
        except ValueError as exc:
            raise MalformedPayloadError("Body is not valid JSON", details={"error": str(exc)}) from exc

        if not isinstance(envelope, dict):
            raise MalformedPayloadError(
                "Body must be a JSON object",
                details={"body_type": type(envelope).__name__},
            )
        return envelope


def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


# Bodies holding NaN, Infinity or out-of-range floats are malformed
def _reject_constant(name: str) -> float:
    raise ValueError(f"Non-finite number {name} is not allowed")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number {text} is out of range")
    return value
