import logging

import structlog
from fastapi import FastAPI


logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and route structlog through it.

    Args:
        level: Root log level name
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def register_startup_events(app: FastAPI) -> None:
    """
    Register startup/shutdown handlers in the FastAPI app.

    Logging is configured on startup; on shutdown every viewer
    connection is closed so its writer task ends with the server.
    """

    @app.on_event("startup")
    async def _on_startup() -> None:  # pragma: no cover - framework hook
        container = app.state.container
        config = container.config()
        configure_logging(config.logging.level)

        if not config.razorpay.webhook_secret:
            logger.warning("RAZORPAY_WEBHOOK_SECRET is not set; every webhook will be rejected")

        logger.info("Startup hooks initialized (alert log + relay)")

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:  # pragma: no cover - framework hook
        relay = app.state.container.relay()
        await relay.close()
        logger.info("Relay closed; %s alerts were recorded", len(app.state.container.alert_log()))
