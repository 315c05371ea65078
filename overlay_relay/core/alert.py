"""Canonical alert record distributed to overlay viewers."""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AppendResult(str, Enum):
    """Outcome of appending an alert to the alert log."""

    INSERTED = "inserted"
    DUPLICATE_IGNORED = "duplicate_ignored"


@dataclass(frozen=True)
class Alert:
    """A normalized donation event.

    Attributes:
        id: Provider payment id, or a synthesized id unique within the process
        name: Display name of the contributor
        amount: Amount in major currency units, None when the provider sent none
        currency: Three letter currency code
        timestamp: When this service recorded the alert (UTC)
        raw: Original provider envelope, kept for audit only
    """

    id: str
    name: str
    amount: Optional[Decimal]
    currency: str
    timestamp: datetime = field(default_factory=utc_now)
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Alert id must be a non-empty string")
        # The alert owns its copy of the envelope
        object.__setattr__(self, "raw", copy.deepcopy(self.raw))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the alert to its JSON form for viewers and the history API."""
        return {
            "id": self.id,
            "name": self.name,
            "amount": float(self.amount) if self.amount is not None else None,
            "currency": self.currency,
            "timestamp": self.timestamp.isoformat(),
            "ts": int(self.timestamp.timestamp() * 1000),
            "raw": copy.deepcopy(self.raw),
        }
