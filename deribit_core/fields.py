"""
Field catalog: header name -> order attribute and value kind.

Built once at import and read-only afterwards. Lookup is an exact,
case-sensitive match; an unknown name maps to None ("unrecognized") and its
values are skipped, never treated as an error.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class FieldKind(Enum):
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldSpec:
    """One known column: its header/wire name, the Order attribute it fills, and how to convert it."""

    name: str
    attribute: str
    kind: FieldKind
    optional: bool = False


ORDER_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("id", "id", FieldKind.INTEGER),
    FieldSpec("direction", "direction", FieldKind.TEXT),
    FieldSpec("amount", "amount", FieldKind.FLOAT),
    FieldSpec("contracts", "contracts", FieldKind.FLOAT),
    FieldSpec("instrument_name", "instrument_name", FieldKind.TEXT),
    FieldSpec("label", "label", FieldKind.TEXT),
    FieldSpec("type", "order_type", FieldKind.TEXT),
    FieldSpec("price", "price", FieldKind.FLOAT, optional=True),
    FieldSpec("time_in_force", "time_in_force", FieldKind.TEXT, optional=True),
    FieldSpec("post_only", "post_only", FieldKind.BOOLEAN, optional=True),
    FieldSpec("reject_post_only", "reject_post_only", FieldKind.BOOLEAN, optional=True),
    FieldSpec("reduce_only", "reduce_only", FieldKind.BOOLEAN, optional=True),
    FieldSpec("trigger_price", "trigger_price", FieldKind.FLOAT, optional=True),
    FieldSpec("trigger_offset", "trigger_offset", FieldKind.FLOAT, optional=True),
    FieldSpec("trigger", "trigger", FieldKind.TEXT, optional=True),
    FieldSpec("display_amount", "display_amount", FieldKind.FLOAT, optional=True),
    FieldSpec("advanced", "advanced", FieldKind.TEXT, optional=True),
    FieldSpec("mmp", "mmp", FieldKind.BOOLEAN, optional=True),
    FieldSpec("valid_until", "valid_until", FieldKind.INTEGER, optional=True),
    FieldSpec("linked_order_type", "linked_order_type", FieldKind.TEXT, optional=True),
    FieldSpec("trigger_fill_condition", "trigger_fill_condition", FieldKind.TEXT, optional=True),
)

FIELD_CATALOG: Mapping[str, FieldSpec] = MappingProxyType({f.name: f for f in ORDER_FIELDS})

ColumnMapping = tuple[FieldSpec | None, ...]


def lookup_field(name: str) -> FieldSpec | None:
    """Catalog entry for a header name, or None if the name is not recognized."""
    return FIELD_CATALOG.get(name)


def build_column_mapping(header_names: Iterable[str]) -> ColumnMapping:
    """One slot per header column, in column order. Unknown names give None slots."""
    return tuple(lookup_field(name) for name in header_names)
