"""
JSON-RPC request builder: Order + request id -> one line of wire-ready JSON.

Output shape, one request per line:

    {"id":<id>,"jsonrpc":"2.0","method":"private/<direction>","params":{...}}

Params are value-gated: amount/contracts only when > 0, required text only when
non-empty, optionals only when set (and text optionals only when non-empty).
Floats use C "%.10g" formatting. Strings are written verbatim unless
escape_strings is enabled in the config.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from deribit_core.config import DEFAULT_CONFIG, ProcessorConfig
from deribit_core.fields import FIELD_CATALOG, FieldKind, FieldSpec
from deribit_core.order import Order

JSON_PREFIX = b'{"id":'
JSONRPC_FIELD = b',"jsonrpc":"2.0","method":"private/'
PARAMS_PREFIX = b'","params":{'
JSON_SUFFIX = b"}}"
NEWLINE = b"\n"
TRUE = b"true"
FALSE = b"false"

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"

# Emission order of params. Differs from catalog order (display_amount moves up).
PARAM_ORDER = (
    "amount",
    "contracts",
    "instrument_name",
    "label",
    "type",
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

_PARAMS: tuple[tuple[FieldSpec, bytes], ...] = tuple(
    (FIELD_CATALOG[name], b'"' + name.encode("ascii") + b'":') for name in PARAM_ORDER
)


class OutputBuffer:
    """
    Growable byte region with a write cursor.

    Capacity is tracked explicitly: a write that does not fit multiplies the
    capacity by the growth factor (repeatedly if needed) before copying, so
    earlier bytes keep their offsets.
    """

    def __init__(
        self,
        capacity: int,
        growth_factor: int = 2,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._buf = bytearray(capacity)
        self._position = 0
        self._growth_factor = growth_factor
        self._log = logger if logger is not None else logging.getLogger(__name__)

    @property
    def capacity(self) -> int:
        return len(self._buf)

    @property
    def position(self) -> int:
        return self._position

    def reset(self) -> None:
        """Rewind the cursor. Capacity is kept."""
        self._position = 0

    def ensure_capacity(self, needed: int) -> None:
        required = self._position + needed
        capacity = len(self._buf)
        if required <= capacity:
            return
        while capacity < required:
            capacity *= self._growth_factor
        self._buf.extend(bytes(capacity - len(self._buf)))
        self._log.debug("JsonRpcBuilder buffer expanded to: %d bytes", capacity)

    def write(self, data: bytes) -> None:
        n = len(data)
        self.ensure_capacity(n)
        pos = self._position
        self._buf[pos:pos + n] = data
        self._position = pos + n

    def getvalue(self) -> bytes:
        """Bytes written since the last reset, independent of capacity."""
        return bytes(self._buf[:self._position])


class JsonRpcBuilder:
    """
    Append JSON-RPC order requests to a reusable buffer.

    Usage:
        builder = JsonRpcBuilder()
        for request_id, order in enumerate(orders, start=5275):
            builder.append_request(order, request_id)
        payload = builder.get_result()
    """

    def __init__(
        self,
        config: ProcessorConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._buffer = OutputBuffer(
            self.config.initial_buffer_size,
            self.config.buffer_growth_factor,
            logger=self._log,
        )
        self._float_format = f"%.{self.config.double_precision}g"
        self._escape = self.config.escape_strings
        self._log.debug("JsonRpcBuilder initialized with buffer size: %d", self._buffer.capacity)

    @property
    def position(self) -> int:
        return self._buffer.position

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    def reset(self) -> None:
        self._buffer.reset()
        self._log.debug("JsonRpcBuilder buffer reset")

    def get_result(self) -> bytes:
        return self._buffer.getvalue()

    def append_request(self, order: Order, request_id: int) -> None:
        """Append one complete request object for order, followed by a newline."""
        out = self._buffer
        out.write(JSON_PREFIX)
        out.write(b"%d" % request_id)
        out.write(JSONRPC_FIELD)
        out.write(self._encode_text(order.direction))
        out.write(PARAMS_PREFIX)

        first = True
        for spec, key in _PARAMS:
            value = getattr(order, spec.attribute)
            if not self._should_emit(spec, value):
                continue
            if not first:
                out.write(b",")
            out.write(key)
            out.write(self._render(spec.kind, value))
            first = False

        out.write(JSON_SUFFIX)
        out.write(NEWLINE)

    def build_payload(self, orders: Iterable[Order], start_id: int | None = None) -> bytes:
        """Reset, append every order with consecutive ids from start_id, and return the bytes."""
        request_id = self.config.initial_message_id if start_id is None else start_id
        self.reset()
        for order in orders:
            self.append_request(order, request_id)
            request_id += 1
        return self.get_result()

    @staticmethod
    def _should_emit(spec: FieldSpec, value: object) -> bool:
        if spec.optional:
            if value is None:
                return False
            return spec.kind is not FieldKind.TEXT or value != ""
        if spec.kind is FieldKind.TEXT:
            return value != ""
        return 0.0 < value  # type: ignore[operator]

    def _render(self, kind: FieldKind, value: object) -> bytes:
        if kind is FieldKind.FLOAT:
            return (self._float_format % value).encode("ascii")
        if kind is FieldKind.INTEGER:
            return b"%d" % value
        if kind is FieldKind.BOOLEAN:
            return TRUE if value else FALSE
        return b'"' + self._encode_text(value) + b'"'  # type: ignore[arg-type]

    def _encode_text(self, text: str) -> bytes:
        if self._escape:
            text = json.dumps(text, ensure_ascii=False)[1:-1]
        return text.encode(TEXT_ENCODING, TEXT_ERRORS)


def build_payload(
    orders: Iterable[Order],
    start_id: int | None = None,
    config: ProcessorConfig | None = None,
) -> bytes:
    """Serialize orders to newline-delimited JSON-RPC requests with consecutive ids."""
    return JsonRpcBuilder(config).build_payload(orders, start_id)
