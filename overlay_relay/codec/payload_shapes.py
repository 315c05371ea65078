"""Known provider payload shapes and the fields read from each of them."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Mapping, Optional, Tuple


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_decimal(value: Any) -> Optional[Decimal]:
    # bool is an int subclass; a true/false flag is never an amount
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        parsed = Decimal(value)
    elif isinstance(value, float):
        parsed = Decimal(str(value))
    elif isinstance(value, str) and value.strip():
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    # NaN and Infinity are never amounts
    return parsed if parsed.is_finite() else None


@dataclass(frozen=True)
class PayloadShape:
    """
    Base for a tagged provider entity.

    Subclasses declare where the entity lives inside the webhook payload
    and which entity fields carry the amount.
    """

    entity: Mapping[str, Any]

    tag: ClassVar[str] = "unknown"
    path: ClassVar[Tuple[str, ...]] = ()
    amount_fields: ClassVar[Tuple[str, ...]] = ("amount",)
    name_fields: ClassVar[Tuple[str, ...]] = ("contact", "customer_name", "name")

    @classmethod
    def match(cls, payload: Mapping[str, Any]) -> Optional["PayloadShape"]:
        """Return the shape if the payload carries this entity, else None."""
        node: Any = payload
        for key in cls.path:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        if not isinstance(node, Mapping):
            return None
        return cls(entity=node)

    def amount_minor(self) -> Optional[Decimal]:
        for key in self.amount_fields:
            amount = _as_decimal(self.entity.get(key))
            if amount is not None:
                return amount
        return None

    def payer_name(self) -> Optional[str]:
        for key in self.name_fields:
            name = _non_empty_str(self.entity.get(key))
            if name:
                return name
            if key == "customer_name":
                customer = self.entity.get("customer")
                if isinstance(customer, Mapping):
                    name = _non_empty_str(customer.get("name"))
                    if name:
                        return name
        return None

    def payment_id(self) -> Optional[str]:
        return _non_empty_str(self.entity.get("id"))

    def currency(self) -> Optional[str]:
        currency = _non_empty_str(self.entity.get("currency"))
        return currency.upper() if currency else None


@dataclass(frozen=True)
class PaymentEntity(PayloadShape):
    """A direct payment: ``payload.payment.entity``."""

    tag = "payment"
    path = ("payment", "entity")


@dataclass(frozen=True)
class PaymentLinkEntity(PayloadShape):
    """A paid payment link: ``payload.payment_link.entity``."""

    tag = "payment_link"
    path = ("payment_link", "entity")
    amount_fields = ("amount", "amount_paid")


# Priority order: a payment.link.paid event carries both entities and the
# payment entity describes what was actually paid.
PAYLOAD_SHAPES = (PaymentEntity, PaymentLinkEntity)


def match_shape(payload: Mapping[str, Any]) -> Optional[PayloadShape]:
    """Return the first known shape present in the payload."""
    for shape in PAYLOAD_SHAPES:
        matched = shape.match(payload)
        if matched is not None:
            return matched
    return None
