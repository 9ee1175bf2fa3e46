"""
DataFrame adapters for orders.

orders_to_frame gives one row per Order and one column per catalog field, so a
parsed batch can be inspected with pandas. orders_from_frame goes the other way
with the parser's rules: columns are matched by header name, unknown columns are
ignored, and missing/NaN/blank cells leave the attribute at its default/absent state.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

from deribit_core import Order, ProcessorConfig
from deribit_core.convert import INT64_MAX, INT64_MIN, to_bool, to_float, to_int
from deribit_core.errors import FormatError
from deribit_core.fields import ORDER_FIELDS, FieldKind, FieldSpec, build_column_mapping

COLUMNS = tuple(f.name for f in ORDER_FIELDS)


def orders_to_frame(orders: Sequence[Order]) -> pd.DataFrame:
    """
    Tabulate orders.

    Parameters
    ----------
    orders : sequence of Order
        Parsed orders.

    Returns
    -------
    pd.DataFrame
        Columns named as the order file header (id, direction, ..., type, ...),
        one row per order in input order. Absent optionals are None.
    """
    rows = [[getattr(order, f.attribute) for f in ORDER_FIELDS] for order in orders]
    return pd.DataFrame(rows, columns=list(COLUMNS))


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def _convert_number(spec: FieldSpec, value: Any, strict: bool) -> Any:
    """Numeric cell into a numeric field, without a round trip through text."""
    if spec.kind is FieldKind.FLOAT:
        return float(value)
    if not np.isfinite(value) or (strict and not float(value).is_integer()):
        if strict:
            raise ValueError(f"invalid integer: {value!r}")
        return 0
    result = int(value)
    if not INT64_MIN <= result <= INT64_MAX:
        if strict:
            raise ValueError(f"integer out of 64-bit range: {value!r}")
        return 0
    return result


def _convert_text(spec: FieldSpec, text: str, strict: bool) -> Any:
    if spec.kind is FieldKind.TEXT:
        return text
    if spec.kind is FieldKind.FLOAT:
        return to_float(text, strict=strict)
    if spec.kind is FieldKind.INTEGER:
        return to_int(text, strict=strict)
    return to_bool(text)


def orders_from_frame(df: pd.DataFrame, config: ProcessorConfig | None = None) -> list[Order]:
    """
    Build orders from a DataFrame whose columns are order file header names.

    Parameters
    ----------
    df : pd.DataFrame
        One row per order. Column names are matched exactly (case-sensitive).
    config : ProcessorConfig, optional
        strict_numeric is honored; other settings do not apply.

    Returns
    -------
    list of Order
        One order per row, in row order.

    Raises
    ------
    FormatError
        In strict mode, when a numeric cell is not a valid number.
    """
    strict = (config or ProcessorConfig()).strict_numeric
    mapping = build_column_mapping(str(c) for c in df.columns)
    orders: list[Order] = []
    for row_number, row in enumerate(df.itertuples(index=False, name=None)):
        order = Order()
        for spec, value in zip(mapping, row):
            if spec is None or _is_missing(value):
                continue
            try:
                if (
                    spec.kind in (FieldKind.FLOAT, FieldKind.INTEGER)
                    and isinstance(value, (int, float, np.integer, np.floating))
                    and not isinstance(value, (bool, np.bool_))
                ):
                    converted = _convert_number(spec, value, strict)
                else:
                    text = str(value).rstrip(" \r").lstrip(" ")
                    if not text:
                        continue
                    converted = _convert_text(spec, text, strict)
            except ValueError as e:
                raise FormatError(f"Row {row_number}, field {spec.name!r}: {e}") from e
            setattr(order, spec.attribute, converted)
        orders.append(order)
    return orders
