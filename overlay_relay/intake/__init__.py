"""Webhook intake module."""

from overlay_relay.intake.intake_service import IntakeResult, IntakeService, IntakeStatus
from overlay_relay.intake.ports.logger_port import ILogger
from overlay_relay.intake.webhook_verifier import compute_signature, verify_signature

__all__ = [
    "IntakeService",
    "IntakeResult",
    "IntakeStatus",
    "ILogger",
    "compute_signature",
    "verify_signature",
]
