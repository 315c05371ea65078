"""
Pytest configuration and shared fixtures for relay tests.

Async tests run in pytest-asyncio auto mode (see pyproject.toml).
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from overlay_relay.config import LoggingConfig, ProviderConfig, RelayConfig
from overlay_relay.container import RelayContainer
from overlay_relay.intake.ports.logger_port import ILogger
from overlay_relay.intake.webhook_verifier import compute_signature
from overlay_relay.relay_app import create_app

WEBHOOK_SECRET = "whsec_test_4f1c"


class RecordingLogger(ILogger):
    """ILogger that keeps every entry for assertions."""

    def __init__(self) -> None:
        self.entries: List[Dict[str, Any]] = []

    def log(self, level: str, message: str, **kwargs) -> None:
        self.entries.append({"level": level, "message": message, **kwargs})

    def log_structured(self, data: Dict[str, Any]) -> None:
        self.entries.append({"level": "structured", **data})

    def levels(self) -> List[str]:
        return [entry["level"] for entry in self.entries]


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.current = start or datetime(2024, 3, 1, 18, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    """Build a provider envelope with a payment entity."""

    def _make_event(
        event: str = "payment.captured",
        payment_id: Optional[str] = "pay_123",
        amount: Any = 50000,
        currency: Optional[str] = "INR",
        **entity_fields: Any,
    ) -> Dict[str, Any]:
        entity: Dict[str, Any] = dict(entity_fields)
        if payment_id is not None:
            entity["id"] = payment_id
        if amount is not None:
            entity["amount"] = amount
        if currency is not None:
            entity["currency"] = currency
        return {
            "entity": "event",
            "event": event,
            "payload": {"payment": {"entity": entity}},
        }

    return _make_event


@pytest.fixture
def encode() -> Callable[[Dict[str, Any]], bytes]:
    def _encode(envelope: Dict[str, Any]) -> bytes:
        return json.dumps(envelope).encode("utf-8")

    return _encode


@pytest.fixture
def sign() -> Callable[[bytes], str]:
    def _sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
        return compute_signature(body, secret)

    return _sign


@pytest.fixture
def relay_config() -> RelayConfig:
    return RelayConfig(
        razorpay=ProviderConfig(
            webhook_secret=WEBHOOK_SECRET,
            key_id="rzp_test_key",
            key_secret="rzp_test_secret",
        ),
        logging=LoggingConfig(type="print"),
    )


@pytest.fixture
def container(relay_config: RelayConfig) -> RelayContainer:
    container = RelayContainer()
    container.config.override(providers.Object(relay_config))
    return container


@pytest.fixture
def client(container: RelayContainer) -> TestClient:
    """Test client sharing one event loop between HTTP calls and WebSockets."""
    app = create_app(container)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def post_webhook(client: TestClient, encode, sign) -> Callable[..., Any]:
    def _post(envelope: Dict[str, Any], signature: Optional[str] = None, header: str = "X-Signature"):
        body = encode(envelope)
        return client.post(
            "/razorpay-webhook",
            content=body,
            headers={header: signature if signature is not None else sign(body)},
        )

    return _post


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()
