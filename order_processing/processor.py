"""
Order processor: orchestrates parse -> build -> write for one order file.

Each phase is timed; status moves IDLE -> PARSING -> BUILDING -> WRITING ->
COMPLETE, or FAILED on the first error (which is logged and re-raised).
Request ids continue across runs of the same processor.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from deribit_core import JsonRpcBuilder, Order, OrderCsvParser, ProcessorConfig
from deribit_core.errors import FormatError, OrderIOError, ProcessorError
from deribit_core.types import ParserState, ProcessingStatus


@dataclass(frozen=True)
class PhaseTimings:
    """Wall-clock duration of each phase, in microseconds."""

    parse_us: int = 0
    build_us: int = 0
    write_us: int = 0
    total_us: int = 0


@dataclass
class ProcessingResult:
    """Output of one OrderProcessor.process() run."""

    orders: list[Order] = field(default_factory=list)
    payload: bytes = b""
    timings: PhaseTimings = field(default_factory=PhaseTimings)
    first_request_id: int | None = None
    last_request_id: int | None = None
    input_path: str | None = None
    output_path: str | None = None

    @property
    def processed_order_count(self) -> int:
        return len(self.orders)

    @property
    def parse_time_us(self) -> int:
        return self.timings.parse_us

    @property
    def build_time_us(self) -> int:
        return self.timings.build_us

    @property
    def write_time_us(self) -> int:
        return self.timings.write_us

    @property
    def total_time_us(self) -> int:
        return self.timings.total_us


def _elapsed_us(start: float, end: float) -> int:
    return int((end - start) * 1_000_000)


class OrderProcessor:
    """
    Convert an order file into a file of JSON-RPC requests.

    Flow: load + parse (OrderCsvParser) -> build (JsonRpcBuilder, consecutive
    ids from config.initial_message_id) -> write. A load failure raises
    OrderIOError, a parse failure FormatError, a write failure OrderIOError.
    """

    def __init__(
        self,
        config: ProcessorConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or ProcessorConfig()
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._next_request_id = self.config.initial_message_id
        self._status = ProcessingStatus.IDLE
        self._last_result: ProcessingResult | None = None
        self._log.debug("OrderProcessor initialized with message ID: %d", self._next_request_id)

    @property
    def status(self) -> ProcessingStatus:
        return self._status

    @property
    def next_request_id(self) -> int:
        return self._next_request_id

    @property
    def last_result(self) -> ProcessingResult | None:
        return self._last_result

    def process(self, input_path: str | Path, output_path: str | Path) -> ProcessingResult:
        """Run all three phases. Raises ProcessorError (after logging) on failure."""
        self._log.info("Processing orders from %s to %s", input_path, output_path)
        self._status = ProcessingStatus.PARSING
        start = time.perf_counter()

        try:
            parse_start = time.perf_counter()
            orders = self.parse_order_file(input_path)
            parse_end = time.perf_counter()
            self._log.info("Parsed %d orders", len(orders))

            self._status = ProcessingStatus.BUILDING
            first_id = self._next_request_id
            build_start = time.perf_counter()
            payload = self.build_payload(orders)
            build_end = time.perf_counter()
            self._log.debug("Built JSON payload with size: %d", len(payload))

            self._status = ProcessingStatus.WRITING
            write_start = time.perf_counter()
            self.write_output_file(output_path, payload)
            write_end = time.perf_counter()
        except ProcessorError as e:
            self._status = ProcessingStatus.FAILED
            self._log.error("Processing failed: %s", e)
            raise

        timings = PhaseTimings(
            parse_us=_elapsed_us(parse_start, parse_end),
            build_us=_elapsed_us(build_start, build_end),
            write_us=_elapsed_us(write_start, write_end),
            total_us=_elapsed_us(start, write_end),
        )
        result = ProcessingResult(
            orders=orders,
            payload=payload,
            timings=timings,
            first_request_id=first_id if orders else None,
            last_request_id=self._next_request_id - 1 if orders else None,
            input_path=str(input_path),
            output_path=str(output_path),
        )
        self._last_result = result
        self._status = ProcessingStatus.COMPLETE
        self._log.info(
            "Processing complete. Orders: %d Total time: %d μs",
            result.processed_order_count,
            timings.total_us,
        )
        return result

    def parse_order_file(self, path: str | Path) -> list[Order]:
        """Load and parse one order file."""
        parser = OrderCsvParser(self.config, logger=self._log)
        if not parser.load(path):
            self._log.error("Failed to load file: %s", path)
            raise parser.last_error or OrderIOError(f"Failed to load CSV file: {path}")

        self._log.debug("File loaded. Size: %d bytes", parser.file_size)
        orders = parser.parse_all()
        if parser.state is ParserState.ERROR:
            raise parser.last_error or FormatError(f"Failed to parse CSV file: {path}")
        return orders

    def build_payload(self, orders: list[Order]) -> bytes:
        """Serialize orders with consecutive request ids, advancing the processor's id counter."""
        builder = JsonRpcBuilder(self.config, logger=self._log)
        for order in orders:
            builder.append_request(order, self._next_request_id)
            self._next_request_id += 1
        return builder.get_result()

    def write_output_file(self, path: str | Path, content: bytes) -> None:
        try:
            with open(path, "wb") as fh:
                fh.write(content)
        except OSError as e:
            self._log.error("Failed to write output file: %s (%s)", path, e)
            raise OrderIOError(f"Failed to write output file: {path}") from e
        self._log.info("Output written successfully: %s", path)
