"""
deribit-core: order file -> JSON-RPC request payloads for Deribit's private API.

Two stages: OrderCsvParser (delimited text with a header row -> Order records)
and JsonRpcBuilder (Order + request id -> newline-delimited JSON-RPC requests).
No network transport, no authentication, no order-state tracking.
"""

__version__ = "0.1.0"

from deribit_core.order import Order
from deribit_core.fields import FIELD_CATALOG, FieldKind, FieldSpec, lookup_field
from deribit_core.config import ProcessorConfig
from deribit_core.errors import ConfigError, FormatError, OrderIOError, ProcessorError, StateError
from deribit_core.types import (
    AdvancedType,
    Direction,
    LinkedOrderType,
    OrderKind,
    ParserState,
    ProcessingStatus,
    TimeInForce,
    TriggerFillCondition,
    TriggerType,
)
from deribit_core.csv_parser import OrderCsvParser, parse_orders
from deribit_core.json_builder import JsonRpcBuilder, build_payload
from deribit_core.log import configure_logging

__all__ = [
    "Order",
    "FIELD_CATALOG",
    "FieldKind",
    "FieldSpec",
    "lookup_field",
    "ProcessorConfig",
    "ProcessorError",
    "OrderIOError",
    "FormatError",
    "StateError",
    "ConfigError",
    "ParserState",
    "ProcessingStatus",
    "Direction",
    "OrderKind",
    "TimeInForce",
    "TriggerType",
    "AdvancedType",
    "LinkedOrderType",
    "TriggerFillCondition",
    "OrderCsvParser",
    "parse_orders",
    "JsonRpcBuilder",
    "build_payload",
    "configure_logging",
]
