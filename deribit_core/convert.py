"""
Text-to-value conversion for order fields.

Permissive by default: the longest valid numeric prefix is used and text with
no numeric prefix becomes zero, the way C's strtod/from_chars behave. With
strict=True anything that is not entirely a valid number raises ValueError.
"""

from __future__ import annotations

import re

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_PREFIX = re.compile(r"-?[0-9]+")
_FLOAT_PREFIX = re.compile(
    r"""
    [+-]?
    (?:
        (?P<hex>0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?)
        | (?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?
        | inf(?:inity)?
        | nan
    )
    """,
    re.VERBOSE | re.IGNORECASE,
)
# Leading whitespace strtod skips.
_C_SPACE = " \t\n\v\f\r"

TRUE_INITIALS = ("t", "T", "1")


def to_int(text: str, *, strict: bool = False) -> int:
    """Parse a signed 64-bit integer. Out-of-range values become 0."""
    match = _INT_PREFIX.match(text)
    if match is None or (strict and match.end() != len(text)):
        if strict:
            raise ValueError(f"invalid integer: {text!r}")
        return 0
    value = int(match.group())
    if not INT64_MIN <= value <= INT64_MAX:
        if strict:
            raise ValueError(f"integer out of 64-bit range: {text!r}")
        return 0
    return value


def to_float(text: str, *, strict: bool = False) -> float:
    """Parse a 64-bit float (decimal, exponent, hexadecimal, inf or nan)."""
    stripped = text.lstrip(_C_SPACE)
    match = _FLOAT_PREFIX.match(stripped)
    if match is None or (strict and match.end() != len(stripped)):
        if strict:
            raise ValueError(f"invalid number: {text!r}")
        return 0.0
    if match.group("hex"):
        try:
            return float.fromhex(match.group())
        except OverflowError:
            # strtod saturates to HUGE_VAL
            return float("-inf") if stripped.startswith("-") else float("inf")
    return float(match.group())


def to_bool(text: str) -> bool:
    """True if the first character is t, T or 1. The rest is not looked at."""
    return text[:1] in TRUE_INITIALS
