"""
Tests for deribit_core building blocks: Order, field catalog, conversion, config, logging.
"""

import logging

import pytest

from deribit_core import (
    FIELD_CATALOG,
    Direction,
    FieldKind,
    Order,
    OrderKind,
    ProcessorConfig,
    TimeInForce,
    configure_logging,
    lookup_field,
)
from deribit_core.config import DEFAULT_CONFIG
from deribit_core.convert import INT64_MAX, to_bool, to_float, to_int
from deribit_core.errors import ConfigError, FormatError, OrderIOError, ProcessorError, StateError
from deribit_core.fields import ORDER_FIELDS, build_column_mapping
from deribit_core.order import OPTIONAL_ATTRIBUTES


# --- Order ---


def test_order_defaults():
    o = Order()
    assert o.id == 0
    assert o.direction == ""
    assert o.amount == 0.0
    assert o.contracts == 0.0
    assert o.instrument_name == ""
    assert o.label == ""
    assert o.order_type == ""
    for name in OPTIONAL_ATTRIBUTES:
        assert getattr(o, name) is None


def test_order_is_set():
    o = Order(price=0.0, post_only=False)
    assert o.is_set("price")
    assert o.is_set("post_only")
    assert not o.is_set("trigger_price")
    assert o.is_set("amount")  # required attributes always exist
    with pytest.raises(AttributeError):
        o.is_set("no_such_field")


def test_order_present_optionals_in_declaration_order():
    o = Order(valid_until=5, price=1.0, mmp=True)
    assert list(o.present_optionals()) == ["price", "mmp", "valid_until"]


def test_order_accepts_vocabulary_members():
    o = Order(direction=Direction.SELL, order_type=OrderKind.STOP_LIMIT, time_in_force=TimeInForce.FILL_OR_KILL)
    assert o.direction == "sell"
    assert o.order_type == "stop_limit"
    assert o.time_in_force == "fill_or_kill"
    assert o == Order(direction="sell", order_type="stop_limit", time_in_force="fill_or_kill")


# --- Field catalog ---


def test_catalog_covers_every_header_name():
    names = (
        "id direction amount contracts instrument_name label type price time_in_force post_only "
        "reject_post_only reduce_only trigger_price trigger_offset trigger display_amount advanced "
        "mmp valid_until linked_order_type trigger_fill_condition"
    ).split()
    assert sorted(FIELD_CATALOG) == sorted(names)
    assert len(ORDER_FIELDS) == len(names)


def test_catalog_attributes_exist_on_order():
    o = Order()
    for spec in ORDER_FIELDS:
        assert hasattr(o, spec.attribute)
        assert spec.optional == (spec.attribute in OPTIONAL_ATTRIBUTES)


def test_lookup_is_exact_and_case_sensitive():
    assert lookup_field("type").attribute == "order_type"
    assert lookup_field("valid_until").kind == FieldKind.INTEGER
    assert lookup_field("Type") is None
    assert lookup_field(" type") is None
    assert lookup_field("label\r") is None
    assert lookup_field("") is None


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        FIELD_CATALOG["foo"] = FIELD_CATALOG["id"]


def test_build_column_mapping_one_slot_per_column():
    mapping = build_column_mapping(["id", "foo", "amount", "foo"])
    assert len(mapping) == 4
    assert mapping[0].name == "id"
    assert mapping[1] is None
    assert mapping[2].name == "amount"
    assert mapping[3] is None


# --- Conversion ---


def test_to_int_permissive():
    assert to_int("42") == 42
    assert to_int("-7") == -7
    assert to_int("42.9") == 42
    assert to_int("12abc") == 12
    assert to_int("abc") == 0
    assert to_int("+5") == 0
    assert to_int(str(INT64_MAX)) == INT64_MAX
    assert to_int(str(INT64_MAX + 1)) == 0


def test_to_int_strict():
    assert to_int("42", strict=True) == 42
    with pytest.raises(ValueError):
        to_int("42.9", strict=True)
    with pytest.raises(ValueError):
        to_int("abc", strict=True)
    with pytest.raises(ValueError):
        to_int(str(INT64_MAX + 1), strict=True)


def test_to_float_permissive():
    assert to_float("1.5") == 1.5
    assert to_float("1.5abc") == 1.5
    assert to_float("-2e3") == -2000.0
    assert to_float(".25") == 0.25
    assert to_float("7.") == 7.0
    assert to_float("1e") == 1.0
    assert to_float("\t3") == 3.0
    assert to_float("abc") == 0.0
    assert to_float(".") == 0.0
    assert to_float("inf") == float("inf")


def test_to_float_hexadecimal():
    assert to_float("0x10") == 16.0
    assert to_float("0x1p3") == 8.0
    assert to_float("-0X1.8p1") == -3.0
    assert to_float("0x.8") == 0.5
    assert to_float("0x10zz") == 16.0
    assert to_float("0xg") == 0.0
    assert to_float("0x1p99999") == float("inf")
    assert to_float("-0x1p99999") == float("-inf")
    assert to_float("0x1p3", strict=True) == 8.0
    with pytest.raises(ValueError):
        to_float("0x", strict=True)


def test_to_float_strict():
    assert to_float("1.5", strict=True) == 1.5
    with pytest.raises(ValueError):
        to_float("1.5abc", strict=True)
    with pytest.raises(ValueError):
        to_float("", strict=True)


def test_to_bool_first_character_only():
    assert to_bool("t")
    assert to_bool("True")
    assert to_bool("1")
    assert to_bool("10")
    assert to_bool("tomato")
    assert not to_bool("false")
    assert not to_bool("0")
    assert not to_bool("yes")
    assert not to_bool("")


# --- Config ---


def test_config_defaults():
    c = ProcessorConfig()
    assert c.initial_buffer_size == 40960
    assert c.buffer_growth_factor == 2
    assert c.initial_message_id == 5275
    assert c.double_precision == 10
    assert c.field_delimiter == ","
    assert c.line_delimiter == "\n"
    assert not c.strict_numeric
    assert not c.escape_strings
    assert c.field_delimiter_byte == b","
    assert DEFAULT_CONFIG == c


def test_config_immutable():
    c = ProcessorConfig()
    with pytest.raises(AttributeError):
        c.initial_message_id = 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"initial_buffer_size": 0},
        {"buffer_growth_factor": 1},
        {"max_field_count": 0},
        {"double_precision": 18},
        {"field_delimiter": ",,"},
        {"line_delimiter": "é"},
        {"field_delimiter": "\n"},
    ],
)
def test_config_validation(kwargs):
    with pytest.raises(ConfigError):
        ProcessorConfig(**kwargs)


def test_config_with_overrides_ignores_none():
    c = ProcessorConfig().with_overrides(initial_message_id=1, strict_numeric=None)
    assert c.initial_message_id == 1
    assert c.strict_numeric is False


def test_config_from_env():
    env = {
        "DERIBIT_INITIAL_MESSAGE_ID": "100",
        "DERIBIT_STRICT_NUMERIC": "Yes",
        "DERIBIT_ESCAPE_STRINGS": "off",
        "DERIBIT_LOG_FILE": "run.log",
        "UNRELATED": "x",
    }
    c = ProcessorConfig.from_env(environ=env)
    assert c.initial_message_id == 100
    assert c.strict_numeric is True
    assert c.escape_strings is False
    assert c.log_file == "run.log"
    assert c.initial_buffer_size == 40960


def test_config_from_env_rejects_bad_integer():
    with pytest.raises(ConfigError):
        ProcessorConfig.from_env(environ={"DERIBIT_INITIAL_BUFFER_SIZE": "big"})


# --- Errors ---


def test_error_hierarchy():
    assert issubclass(OrderIOError, OSError)
    assert issubclass(FormatError, ValueError)
    assert issubclass(StateError, RuntimeError)
    assert issubclass(ConfigError, ValueError)
    for cls in (OrderIOError, FormatError, StateError, ConfigError):
        assert issubclass(cls, ProcessorError)


# --- Logging ---


def test_configure_logging_file_sink_and_replacement(tmp_path):
    log_path = tmp_path / "processor.log"
    log = configure_logging("DEBUG", log_path, console=False, logger_name="deribit_test_sink")
    try:
        assert log.level == logging.DEBUG
        assert len(log.handlers) == 1
        log.info("hello %s", "world")
        for handler in log.handlers:
            handler.flush()
        text = log_path.read_text(encoding="utf-8")
        assert "[INFO] hello world" in text

        configure_logging("WARNING", log_path, console=True, logger_name="deribit_test_sink")
        assert log.level == logging.WARNING
        assert len(log.handlers) == 3  # stdout, stderr, file
    finally:
        for handler in list(log.handlers):
            log.removeHandler(handler)
            handler.close()


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        configure_logging("LOUD", console=False, logger_name="deribit_test_level")
