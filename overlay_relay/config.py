"""Configuration classes using Pydantic BaseSettings."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OVERLAY_SERVER_", case_sensitive=False
    )

    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    cors_origins: List[str] = ["*"]


class ProviderConfig(BaseSettings):
    """Payment provider (Razorpay) credentials and API settings."""

    model_config = SettingsConfigDict(
        env_prefix="RAZORPAY_", case_sensitive=False
    )

    key_id: Optional[str] = None
    key_secret: Optional[str] = None
    webhook_secret: Optional[str] = None
    api_base_url: str = "https://api.razorpay.com/v1"
    timeout: float = Field(default=30.0, gt=0)


class AlertConfig(BaseSettings):
    """Alert normalization and fan-out configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OVERLAY_ALERT_", case_sensitive=False
    )

    default_name: str = "Anonymous"
    default_currency: str = "INR"
    fallback_id_prefix: str = "alert"
    viewer_queue_size: int = Field(default=100, ge=1)  # pending messages before a viewer is dropped


class PaymentLinkConfig(BaseSettings):
    """Defaults for donation payment links."""

    model_config = SettingsConfigDict(
        env_prefix="OVERLAY_PAYMENT_LINK_", case_sensitive=False
    )

    default_amount: float = Field(default=10, gt=0)  # major units
    currency: str = "INR"
    default_purpose: str = "Donation"
    default_customer_name: str = "Supporter"
    reference_prefix: str = "don"


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OVERLAY_LOGGING_", case_sensitive=False
    )

    type: str = "structlog"  # 'structlog' or 'print'
    level: str = "INFO"


class RelayConfig(BaseSettings):
    """Main relay configuration."""

    model_config = SettingsConfigDict(
        env_prefix="",
    )

    # Sections read the environment when RelayConfig is instantiated
    server: ServerConfig = Field(default_factory=ServerConfig)
    razorpay: ProviderConfig = Field(default_factory=ProviderConfig)
    alert: AlertConfig = Field(default_factory=AlertConfig)
    payment_link: PaymentLinkConfig = Field(default_factory=PaymentLinkConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
