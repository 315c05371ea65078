"""Donation overlay relay: webhook intake and real-time alert fan-out."""

__version__ = "0.1.0"
