from enum import Enum


class RelayException(Exception):
    """Base exception for relay errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidSignatureError(RelayException):
    """The webhook body was not signed with the shared secret."""

    pass


class DecodeErrorKind(str, Enum):
    """Reasons a provider event could not be turned into an alert."""

    UNHANDLED_EVENT_TYPE = "unhandled_event_type"
    MALFORMED_PAYLOAD = "malformed_payload"


class DecodeError(RelayException):
    """Base error raised by the alert codec."""

    kind: DecodeErrorKind


class UnhandledEventTypeError(DecodeError):
    """Event type is valid but not one that produces an alert."""

    kind = DecodeErrorKind.UNHANDLED_EVENT_TYPE

    def __init__(self, event_type: str | None) -> None:
        super().__init__(
            f"Unhandled event type: {event_type!r}",
            details={"event_type": event_type},
        )
        self.event_type = event_type


class MalformedPayloadError(DecodeError):
    """Body or payload cannot be read as structured data."""

    kind = DecodeErrorKind.MALFORMED_PAYLOAD


class PaymentLinkError(RelayException):
    """Error creating a payment link with the provider."""

    pass


class QRCodeError(RelayException):
    """Error rendering a QR code image."""

    pass
