"""Shared domain types, realtime relay and application wiring helpers."""
