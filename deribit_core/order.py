"""
Order: one row of the order file, as sent to the venue's private API.

Mutable while the parser fills it in; treated as read-only afterwards. Required
attributes always exist (zero/empty defaults). Optional attributes are None
until a value is parsed for them, and only then are they serialized.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

# Text attributes that accept a vocabulary enum member.
_TEXT_ATTRIBUTES = (
    "direction",
    "order_type",
    "time_in_force",
    "trigger",
    "advanced",
    "linked_order_type",
    "trigger_fill_condition",
)

# Attributes that are absent (None) unless explicitly set.
OPTIONAL_ATTRIBUTES = (
    "price",
    "time_in_force",
    "display_amount",
    "post_only",
    "reject_post_only",
    "reduce_only",
    "trigger_price",
    "trigger_offset",
    "trigger",
    "advanced",
    "mmp",
    "valid_until",
    "linked_order_type",
    "trigger_fill_condition",
)


@dataclass
class Order:
    """An order record. No venue order ID; no fill state here."""

    id: int = 0
    direction: str = ""
    amount: float = 0.0
    contracts: float = 0.0
    instrument_name: str = ""
    label: str = ""
    order_type: str = ""

    price: float | None = None
    time_in_force: str | None = None
    display_amount: float | None = None
    post_only: bool | None = None
    reject_post_only: bool | None = None
    reduce_only: bool | None = None
    trigger_price: float | None = None
    trigger_offset: float | None = None
    trigger: str | None = None
    advanced: str | None = None
    mmp: bool | None = None
    valid_until: int | None = None
    linked_order_type: str | None = None
    trigger_fill_condition: str | None = None

    def __post_init__(self) -> None:
        # Vocabulary enum members are stored as their wire keyword.
        for name in _TEXT_ATTRIBUTES:
            value = getattr(self, name)
            if isinstance(value, Enum):
                setattr(self, name, value.value)

    def is_set(self, attribute: str) -> bool:
        """True if an optional attribute was given a value. Required attributes are always set."""
        if attribute not in OPTIONAL_ATTRIBUTES:
            if attribute not in _ATTRIBUTE_NAMES:
                raise AttributeError(f"Order has no attribute {attribute!r}")
            return True
        return getattr(self, attribute) is not None

    def present_optionals(self) -> dict[str, object]:
        """Optional attributes that were set, in declaration order."""
        return {
            name: getattr(self, name)
            for name in OPTIONAL_ATTRIBUTES
            if getattr(self, name) is not None
        }


_ATTRIBUTE_NAMES = frozenset(f.name for f in fields(Order))
