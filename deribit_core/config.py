"""
Processor configuration: buffer sizing, delimiters, id seed, formatting, file defaults.

One frozen record consumed by the parser, the builder and the processor.
Environment overrides use the DERIBIT_ prefix (e.g. DERIBIT_INITIAL_MESSAGE_ID=1).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from deribit_core.errors import ConfigError

ENV_PREFIX = "DERIBIT_"

_TRUE_VALUES = ("true", "1", "yes")


@dataclass(frozen=True)
class ProcessorConfig:
    """
    Tunables for one processing run.

    Attributes:
        initial_buffer_size: Starting capacity of the JSON output buffer, in bytes.
        buffer_growth_factor: Capacity multiplier applied when an append does not fit.
        max_field_count: Expected header column count (capacity hint, not a limit).
        max_order_count: Expected order count (capacity hint, not a limit).
        field_delimiter: Single character separating columns.
        line_delimiter: Single character terminating lines.
        initial_message_id: JSON-RPC id of the first request.
        double_precision: Significant digits when rendering floats.
        strict_numeric: Reject malformed numbers instead of reading them as 0.
        escape_strings: JSON-escape string values (off: written verbatim).
        input_file, output_file, log_file: Defaults for the command line.
    """

    initial_buffer_size: int = 40960
    buffer_growth_factor: int = 2
    max_field_count: int = 32
    max_order_count: int = 10000
    field_delimiter: str = ","
    line_delimiter: str = "\n"
    initial_message_id: int = 5275
    double_precision: int = 10
    strict_numeric: bool = False
    escape_strings: bool = False
    input_file: str = "deribit_orders.txt"
    output_file: str = "output.txt"
    log_file: str = "deribit_processor.log"

    def __post_init__(self) -> None:
        if self.initial_buffer_size <= 0:
            raise ConfigError("initial_buffer_size must be positive")
        if self.buffer_growth_factor < 2:
            raise ConfigError("buffer_growth_factor must be at least 2")
        if self.max_field_count <= 0:
            raise ConfigError("max_field_count must be positive")
        if self.max_order_count <= 0:
            raise ConfigError("max_order_count must be positive")
        if not 1 <= self.double_precision <= 17:
            raise ConfigError("double_precision must be between 1 and 17")
        for name in ("field_delimiter", "line_delimiter"):
            value = getattr(self, name)
            if len(value.encode("utf-8")) != 1:
                raise ConfigError(f"{name} must be a single-byte character, got {value!r}")
        if self.field_delimiter == self.line_delimiter:
            raise ConfigError("field_delimiter and line_delimiter must differ")

    @property
    def field_delimiter_byte(self) -> bytes:
        return self.field_delimiter.encode("utf-8")

    @property
    def line_delimiter_byte(self) -> bytes:
        return self.line_delimiter.encode("utf-8")

    def with_overrides(self, **overrides: Any) -> ProcessorConfig:
        """Copy with the given fields replaced. None values are ignored."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, environ: Mapping[str, str] | None = None) -> ProcessorConfig:
        """
        Build a config from defaults plus <prefix><FIELD_NAME> environment variables.

        Integer fields are parsed with int(); boolean fields accept true/1/yes
        (case-insensitive) as true and anything else as false.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(prefix + f.name.upper())
            if raw is None:
                continue
            default = f.default
            if isinstance(default, bool):
                overrides[f.name] = raw.strip().lower() in _TRUE_VALUES
            elif isinstance(default, int):
                try:
                    overrides[f.name] = int(raw)
                except ValueError as e:
                    raise ConfigError(f"{prefix}{f.name.upper()} must be an integer, got {raw!r}") from e
            else:
                overrides[f.name] = raw
        return cls(**overrides)


DEFAULT_CONFIG = ProcessorConfig()
