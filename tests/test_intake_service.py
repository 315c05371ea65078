"""
Tests for the webhook intake service.

The relay is replaced by a recorder so publishes can be counted directly.
"""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List

import pytest

from overlay_relay.alert_log import MemoryAlertLog
from overlay_relay.codec import AlertCodec
from overlay_relay.core.alert import Alert
from overlay_relay.intake import IntakeService, IntakeStatus

from conftest import WEBHOOK_SECRET


class RecordingRelay:
    """Relay double remembering every published alert."""

    def __init__(self, viewers: int = 2) -> None:
        self.published: List[Alert] = []
        self.viewers = viewers

    def publish(self, alert: Alert) -> int:
        self.published.append(alert)
        return self.viewers


@pytest.fixture
def alert_log() -> MemoryAlertLog:
    return MemoryAlertLog()


@pytest.fixture
def relay() -> RecordingRelay:
    return RecordingRelay()


@pytest.fixture
def service(alert_log, relay, recording_logger, clock) -> IntakeService:
    return IntakeService(
        webhook_secret=WEBHOOK_SECRET,
        codec=AlertCodec(clock=clock),
        alert_log=alert_log,
        relay=relay,
        logger=recording_logger,
    )


def test_captured_payment_appended_and_published_once(service, alert_log, relay, make_event, encode, sign):
    """Test a redelivered webhook is acknowledged but published only once."""
    body = encode(make_event(payment_id="pay_123", amount=50000, currency="INR"))

    first = service.handle(body, sign(body))
    second = service.handle(body, sign(body))

    assert first.status is IntakeStatus.APPENDED
    assert first.alert_id == "pay_123"
    assert second.status is IntakeStatus.DUPLICATE_IGNORED
    assert second.accepted
    assert len(alert_log) == 1
    assert len(relay.published) == 1

    alert = relay.published[0]
    assert alert.id == "pay_123"
    assert alert.amount == Decimal("500.00")
    assert alert.currency == "INR"


def test_unrecognized_event_ignored(service, alert_log, relay, make_event, encode, sign):
    """Test an unhandled event type is acknowledged without recording anything."""
    body = encode(make_event(event="refund.created"))

    result = service.handle(body, sign(body))

    assert result.status is IntakeStatus.IGNORED
    assert result.accepted
    assert result.event_type == "refund.created"
    assert len(alert_log) == 0
    assert relay.published == []


def test_tampered_signature_rejected(service, alert_log, relay, make_event, encode, sign, recording_logger):
    body = encode(make_event())
    signature = sign(body)
    tampered = ("0" if signature[0] != "0" else "1") + signature[1:]

    result = service.handle(body, tampered)

    assert result.status is IntakeStatus.REJECTED_SIGNATURE
    assert not result.accepted
    assert len(alert_log) == 0
    assert relay.published == []
    assert recording_logger.levels() == ["warning"]


def test_tampered_body_rejected(service, alert_log, make_event, encode, sign):
    body = encode(make_event(amount=50000))
    signature = sign(body)
    forged = encode(make_event(amount=5000000))

    assert service.handle(forged, signature).status is IntakeStatus.REJECTED_SIGNATURE
    assert len(alert_log) == 0


def test_missing_signature_rejected(service, make_event, encode):
    body = encode(make_event())
    assert service.handle(body, None).status is IntakeStatus.REJECTED_SIGNATURE


def test_unset_secret_rejects_everything(alert_log, relay, recording_logger, make_event, encode, sign):
    """Test nothing is accepted while the webhook secret is unconfigured."""
    service = IntakeService(
        webhook_secret=None,
        codec=AlertCodec(),
        alert_log=alert_log,
        relay=relay,
        logger=recording_logger,
    )
    body = encode(make_event())

    assert service.handle(body, sign(body)).status is IntakeStatus.REJECTED_SIGNATURE
    assert len(alert_log) == 0


@pytest.mark.parametrize(
    "body",
    [b"{not json", b"[1, 2, 3]", b'"payment.captured"', b"\xff\xfe"],
)
def test_unreadable_body_rejected(service, alert_log, sign, body):
    """Test a correctly signed body that is not a JSON object is rejected."""
    result = service.handle(body, sign(body))

    assert result.status is IntakeStatus.REJECTED_MALFORMED
    assert not result.accepted
    assert len(alert_log) == 0


def test_non_object_payload_rejected(service, alert_log, encode, sign):
    body = encode({"event": "payment.captured", "payload": ["pay_1"]})

    result = service.handle(body, sign(body))

    assert result.status is IntakeStatus.REJECTED_MALFORMED
    assert result.event_type == "payment.captured"
    assert len(alert_log) == 0


def test_missing_event_type_ignored(service, alert_log, encode, sign):
    body = encode({"payload": {"payment": {"entity": {"id": "pay_1"}}}})

    result = service.handle(body, sign(body))

    assert result.status is IntakeStatus.IGNORED
    assert result.event_type is None
    assert len(alert_log) == 0


def test_pretty_printed_body_verified_as_sent(service, make_event, sign):
    """Test the signature is checked against the exact bytes received."""
    body = json.dumps(make_event(payment_id="pay_pretty"), indent=4).encode("utf-8")

    result = service.handle(body, sign(body))

    assert result.status is IntakeStatus.APPENDED
    assert result.alert_id == "pay_pretty"


def test_raw_envelope_kept_on_alert(service, alert_log, make_event, encode, sign):
    envelope = make_event(payment_id="pay_raw")
    body = encode(envelope)

    service.handle(body, sign(body))

    assert alert_log.get("pay_raw").raw == envelope


def test_published_alert_is_the_stored_one(alert_log, relay, recording_logger, make_event, encode, sign):
    """Test the alert pushed to viewers carries the timestamp the log kept."""
    later = datetime(2024, 3, 1, 19, 0, tzinfo=timezone.utc)
    alert_log.append(Alert(id="pay_0", name="Asha", amount=None, currency="INR", timestamp=later))
    service = IntakeService(
        webhook_secret=WEBHOOK_SECRET,
        codec=AlertCodec(clock=lambda: later - timedelta(minutes=5)),
        alert_log=alert_log,
        relay=relay,
        logger=recording_logger,
    )
    body = encode(make_event(payment_id="pay_1"))

    service.handle(body, sign(body))

    assert relay.published[0].timestamp == later
    assert relay.published[0] is alert_log.get("pay_1")


def test_publish_logged_as_structured_event(service, make_event, encode, sign, recording_logger):
    body = encode(make_event(payment_id="pay_log", amount=150000))

    service.handle(body, sign(body))

    published = [e for e in recording_logger.entries if e.get("event") == "alert_published"]
    assert published == [
        {
            "level": "structured",
            "event": "alert_published",
            "alert_id": "pay_log",
            "event_type": "payment.captured",
            "amount": "1500.00",
            "currency": "INR",
            "viewers": 2,
        }
    ]


@pytest.mark.parametrize("event", [["payment.captured"], 42, {"name": "payment.captured"}])
def test_non_string_event_type_ignored(service, alert_log, encode, sign, recording_logger, event):
    """Test a non-string event type is ignored and never echoed back."""
    body = encode({"event": event, "payload": {"payment": {"entity": {"id": "pay_1"}}}})

    result = service.handle(body, sign(body))

    assert result.status is IntakeStatus.IGNORED
    assert result.event_type is None
    assert len(alert_log) == 0
    assert all(entry.get("event_type") is None for entry in recording_logger.entries)


def test_oversized_amount_recorded_without_amount(service, alert_log, relay, make_event, encode, sign):
    """Test an amount too large for the decimal context is recorded as no amount."""
    body = encode(make_event(payment_id="pay_odd", amount=10 ** 40))

    result = service.handle(body, sign(body))

    assert result.status is IntakeStatus.APPENDED
    assert alert_log.get("pay_odd").amount is None
    assert relay.published[0].to_dict()["amount"] is None


@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN", "1e400"])
def test_non_finite_number_rejected(service, alert_log, relay, sign, literal):
    """Test a body with a non-finite number is rejected before anything is recorded."""
    body = (
        '{"event": "payment.captured", "payload": {"payment": {"entity": '
        '{"id": "pay_odd", "amount": %s}}}}' % literal
    ).encode("utf-8")

    result = service.handle(body, sign(body))

    assert result.status is IntakeStatus.REJECTED_MALFORMED
    assert len(alert_log) == 0
    assert relay.published == []
