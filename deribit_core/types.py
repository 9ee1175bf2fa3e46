"""
Lifecycle states and venue vocabulary.

The state enums drive the parser and the processor. The vocabulary enums list
the keywords the venue accepts. Order stores a member passed for a text field as
its keyword; parsed text is passed through as-is and never validated.
"""

from __future__ import annotations

from enum import Enum


class ParserState(Enum):
    """Lifecycle of an OrderCsvParser. ERROR is left only by loading again."""

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    PARSING = "parsing"
    COMPLETE = "complete"
    ERROR = "error"


class ProcessingStatus(Enum):
    """Phase of an OrderProcessor run."""

    IDLE = "idle"
    PARSING = "parsing"
    BUILDING = "building"
    WRITING = "writing"
    COMPLETE = "complete"
    FAILED = "failed"


class Direction(Enum):
    BUY = "buy"
    SELL = "sell"


class OrderKind(Enum):
    LIMIT = "limit"
    MARKET = "market"
    STOP_LIMIT = "stop_limit"
    STOP_MARKET = "stop_market"
    TAKE_LIMIT = "take_limit"
    TAKE_MARKET = "take_market"
    MARKET_LIMIT = "market_limit"
    TRAILING_STOP = "trailing_stop"


class TimeInForce(Enum):
    GOOD_TIL_CANCELLED = "good_til_cancelled"
    GOOD_TIL_DAY = "good_til_day"
    FILL_OR_KILL = "fill_or_kill"
    IMMEDIATE_OR_CANCEL = "immediate_or_cancel"


class TriggerType(Enum):
    INDEX_PRICE = "index_price"
    MARK_PRICE = "mark_price"
    LAST_PRICE = "last_price"


class AdvancedType(Enum):
    """Advanced order type (options only)."""

    USD = "usd"
    IMPLIED_VOLATILITY = "implv"


class LinkedOrderType(Enum):
    ONE_TRIGGERS_OTHER = "one_triggers_other"
    ONE_CANCELS_OTHER = "one_cancels_other"
    ONE_TRIGGERS_ONE_CANCELS_OTHER = "one_triggers_one_cancels_other"


class TriggerFillCondition(Enum):
    FIRST_HIT = "first_hit"
    COMPLETE_FILL = "complete_fill"
    INCREMENTAL = "incremental"
