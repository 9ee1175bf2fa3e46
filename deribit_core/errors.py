"""
Error types raised (or recorded) by the core and the processor.

Each maps onto a builtin so callers can catch either the specific class or the
builtin it extends.
"""

from __future__ import annotations


class ProcessorError(Exception):
    """Base class for all order-processing errors."""


class OrderIOError(ProcessorError, OSError):
    """Input could not be opened/read in full, or output could not be written."""


class FormatError(ProcessorError, ValueError):
    """Input is malformed: no header line, or (strict mode) an invalid number."""


class StateError(ProcessorError, RuntimeError):
    """Operation invoked in the wrong lifecycle phase."""


class ConfigError(ProcessorError, ValueError):
    """Invalid ProcessorConfig value."""
