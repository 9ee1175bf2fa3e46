"""
Order file parser: delimited text with a header row -> list of Order.

The whole file is loaded into one bytes buffer. Lines and fields are located
by offset (bytes.find), and a slice is only taken when a value is assigned to
an Order. The header row is mapped onto the field catalog once per load; every
data row is then dispatched by column position.

State: NOT_LOADED -> LOADING -> LOADED -> PARSING -> COMPLETE, with ERROR
reachable from LOADING (I/O failure) and PARSING (no header, or a malformed
number in strict mode). Only load() leaves ERROR.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from deribit_core.config import DEFAULT_CONFIG, ProcessorConfig
from deribit_core.convert import to_bool, to_float, to_int
from deribit_core.errors import FormatError, OrderIOError, ProcessorError, StateError
from deribit_core.fields import ColumnMapping, FieldKind, FieldSpec, build_column_mapping
from deribit_core.order import Order
from deribit_core.types import ParserState

_SPACE = 0x20
_CARRIAGE_RETURN = 0x0D
TEXT_ENCODING = "utf-8"
# Undecodable bytes survive a decode/encode round trip unchanged.
TEXT_ERRORS = "surrogateescape"


class OrderCsvParser:
    """
    Load an order file and parse it into Order records.

    load() / load_bytes() never raise; they return False and move to ERROR.
    parse_all() never raises; on failure it returns [] and the reason is kept
    in last_error (StateError, FormatError).
    """

    def __init__(
        self,
        config: ProcessorConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._buffer: bytes | None = None
        self._state = ParserState.NOT_LOADED
        self._headers: tuple[str, ...] = ()
        self._mapping: ColumnMapping = ()
        self._last_error: ProcessorError | None = None
        self._field_delimiter = self.config.field_delimiter_byte
        self._line_delimiter = self.config.line_delimiter_byte

    # --- state ---

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._buffer is not None

    @property
    def file_size(self) -> int:
        return len(self._buffer) if self._buffer is not None else 0

    @property
    def headers(self) -> tuple[str, ...]:
        """Header names of the last parsed file, untrimmed."""
        return self._headers

    @property
    def column_mapping(self) -> ColumnMapping:
        """Catalog entry (or None) per header column of the last parsed file."""
        return self._mapping

    @property
    def last_error(self) -> ProcessorError | None:
        return self._last_error

    def _fail(self, error: ProcessorError) -> None:
        self._state = ParserState.ERROR
        self._last_error = error

    def _begin_load(self) -> None:
        self._state = ParserState.LOADING
        self._buffer = None
        self._headers = ()
        self._mapping = ()
        self._last_error = None

    # --- loading ---

    def load(self, path: str | Path) -> bool:
        """Read the whole file into memory. Returns False (state ERROR) if it cannot be opened or read in full."""
        self._begin_load()
        try:
            with open(path, "rb") as fh:
                expected = os.fstat(fh.fileno()).st_size
                data = fh.read()
        except OSError as e:
            self._log.error("Failed to open CSV file: %s (%s)", path, e)
            self._fail(OrderIOError(f"Failed to open CSV file: {path}"))
            return False

        if len(data) < expected:
            self._log.error("Failed to read CSV file: %s (%d of %d bytes)", path, len(data), expected)
            self._fail(OrderIOError(f"Failed to read CSV file: {path}"))
            return False

        self._buffer = data
        self._state = ParserState.LOADED
        self._log.debug("CSV file loaded successfully. Size: %d bytes", len(data))
        return True

    def load_bytes(self, data: bytes | bytearray | memoryview) -> bool:
        """Load an in-memory buffer instead of a file. Same state transitions as load()."""
        self._begin_load()
        self._buffer = bytes(data)
        self._state = ParserState.LOADED
        self._log.debug("CSV buffer loaded. Size: %d bytes", len(self._buffer))
        return True

    # --- parsing ---

    def parse_all(self) -> list[Order]:
        """
        Parse every non-empty data line into an Order, in file order.

        Returns [] if nothing is loaded (StateError) or the buffer has no line
        terminator at all (FormatError: no header).
        """
        if self._state is not ParserState.LOADED or self._buffer is None:
            self._log.error("Cannot parse orders - file not loaded (state=%s)", self._state.value)
            self._last_error = StateError(f"Cannot parse orders in state {self._state.value}")
            return []

        self._state = ParserState.PARSING
        buf = self._buffer
        end = len(buf)

        header_end = buf.find(self._line_delimiter)
        if header_end == -1:
            self._log.error("No header line found in CSV")
            self._fail(FormatError("No header line found"))
            return []

        self._parse_headers(buf, 0, header_end)

        orders: list[Order] = []
        pos = header_end + 1
        line_number = 1
        while pos < end:
            line_end = buf.find(self._line_delimiter, pos)
            if line_end == -1:
                line_end = end
            line_number += 1

            if line_end > pos:
                order = Order()
                try:
                    self._parse_data_line(buf, pos, line_end, order, line_number)
                except FormatError as e:
                    self._log.error("%s", e)
                    self._fail(e)
                    return []
                orders.append(order)

            pos = line_end + 1

        self._state = ParserState.COMPLETE
        self._log.info("Parsed %d orders from CSV", len(orders))
        return orders

    def _split(self, buf: bytes, start: int, end: int, limit: int | None = None) -> Iterator[tuple[int, int]]:
        """Yield (start, stop) offsets of each delimited field in buf[start:end]."""
        pos = start
        count = 0
        while pos < end and (limit is None or count < limit):
            stop = buf.find(self._field_delimiter, pos, end)
            if stop == -1:
                stop = end
            yield pos, stop
            pos = stop + 1
            count += 1

    def _parse_headers(self, buf: bytes, start: int, end: int) -> None:
        names = [
            buf[s:e].decode(TEXT_ENCODING, TEXT_ERRORS)
            for s, e in self._split(buf, start, end)
        ]
        self._headers = tuple(names)
        self._mapping = build_column_mapping(self._headers)
        self._log.debug("Parsed %d CSV headers", len(self._headers))

    def _parse_data_line(self, buf: bytes, start: int, end: int, order: Order, line_number: int) -> None:
        mapping = self._mapping
        for column, (s, e) in enumerate(self._split(buf, start, end, len(mapping))):
            while e > s and buf[e - 1] in (_SPACE, _CARRIAGE_RETURN):
                e -= 1
            while s < e and buf[s] == _SPACE:
                s += 1
            spec = mapping[column]
            if e > s and spec is not None:
                self._assign(order, spec, buf[s:e], line_number)

    def _assign(self, order: Order, spec: FieldSpec, raw: bytes, line_number: int) -> None:
        text = raw.decode(TEXT_ENCODING, TEXT_ERRORS)
        strict = self.config.strict_numeric
        try:
            if spec.kind is FieldKind.TEXT:
                value: object = text
            elif spec.kind is FieldKind.FLOAT:
                value = to_float(text, strict=strict)
            elif spec.kind is FieldKind.INTEGER:
                value = to_int(text, strict=strict)
            else:
                value = to_bool(text)
        except ValueError as e:
            raise FormatError(f"Line {line_number}, field {spec.name!r}: {e}") from e
        setattr(order, spec.attribute, value)


def parse_orders(data: bytes | str, config: ProcessorConfig | None = None) -> list[Order]:
    """Parse an in-memory order file. Raises FormatError if it cannot be parsed."""
    parser = OrderCsvParser(config)
    parser.load_bytes(data.encode(TEXT_ENCODING) if isinstance(data, str) else data)
    orders = parser.parse_all()
    if parser.state is ParserState.ERROR and parser.last_error is not None:
        raise parser.last_error
    return orders
