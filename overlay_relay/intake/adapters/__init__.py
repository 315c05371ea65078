"""Adapters (implementations) for intake module."""

from overlay_relay.intake.adapters.print_logger import PrintLogger
from overlay_relay.intake.adapters.structlog_logger import StructlogLogger

__all__ = [
    "StructlogLogger",
    "PrintLogger",
]
