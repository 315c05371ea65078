"""Dependency injection container for relay components."""

from dependency_injector import containers, providers

from overlay_relay.alert_log.adapters.memory_alert_log import MemoryAlertLog
from overlay_relay.codec.alert_codec import AlertCodec
from overlay_relay.config import RelayConfig
from overlay_relay.core.qrcode_service import QRCodeService
from overlay_relay.core.realtime import AlertRelay
from overlay_relay.intake.adapters.print_logger import PrintLogger
from overlay_relay.intake.adapters.structlog_logger import StructlogLogger
from overlay_relay.intake.intake_service import IntakeService
from overlay_relay.intake.ports.logger_port import ILogger
from overlay_relay.payments.adapters.razorpay_payment_links import RazorpayPaymentLinkProvider
from overlay_relay.payments.payment_link_service import PaymentLinkService


def build_intake_logger(logger_type: str) -> ILogger:
    """Create the intake logger selected by configuration."""
    if logger_type == "print":
        return PrintLogger()
    if logger_type == "structlog":
        return StructlogLogger()
    raise ValueError(f"Unknown logger type: {logger_type!r} (expected 'structlog' or 'print')")


class RelayContainer(containers.DeclarativeContainer):
    """Dependency injection container for relay components."""

    # Configuration
    config = providers.Singleton(RelayConfig)

    # Alert log: the single process-wide store
    alert_log = providers.Singleton(MemoryAlertLog)

    # Realtime relay
    relay = providers.Singleton(
        AlertRelay,
        alert_log=alert_log,
        max_queue_size=config.provided.alert.viewer_queue_size,
    )

    # Codec
    codec = providers.Factory(
        AlertCodec,
        default_name=config.provided.alert.default_name,
        default_currency=config.provided.alert.default_currency,
        fallback_id_prefix=config.provided.alert.fallback_id_prefix,
    )

    logger = providers.Singleton(build_intake_logger, logger_type=config.provided.logging.type)

    # Intake Service
    intake_service = providers.Singleton(
        IntakeService,
        webhook_secret=config.provided.razorpay.webhook_secret,
        codec=codec,
        alert_log=alert_log,
        relay=relay,
        logger=logger,
    )

    # Payment links
    payment_link_provider = providers.Singleton(
        RazorpayPaymentLinkProvider,
        key_id=config.provided.razorpay.key_id,
        key_secret=config.provided.razorpay.key_secret,
        api_base_url=config.provided.razorpay.api_base_url,
        timeout=config.provided.razorpay.timeout,
    )

    payment_link_service = providers.Factory(
        PaymentLinkService,
        provider=payment_link_provider,
        currency=config.provided.payment_link.currency,
        default_amount=config.provided.payment_link.default_amount,
        default_purpose=config.provided.payment_link.default_purpose,
        default_customer_name=config.provided.payment_link.default_customer_name,
        reference_prefix=config.provided.payment_link.reference_prefix,
    )

    qrcode_service = providers.Factory(QRCodeService)
