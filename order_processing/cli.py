"""
Command line: deribit-orders [INPUT] [OUTPUT] [options].

Converts an order file into newline-delimited JSON-RPC requests and prints a
performance summary. Defaults come from ProcessorConfig.from_env().
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from deribit_core import ProcessorConfig, configure_logging
from deribit_core.errors import ProcessorError
from order_processing.processor import OrderProcessor
from order_processing.report import print_report

logger = logging.getLogger("deribit_orders")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser(defaults: ProcessorConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deribit-orders",
        description="Convert an order file into Deribit JSON-RPC request payloads.",
    )
    parser.add_argument("input", nargs="?", default=defaults.input_file, help="Order file (default: %(default)s)")
    parser.add_argument("output", nargs="?", default=defaults.output_file, help="Output file (default: %(default)s)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Minimum severity logged (default: %(default)s)",
    )
    parser.add_argument("--log-file", default=defaults.log_file, help="Append log lines to this file (default: %(default)s)")
    parser.add_argument("--no-log-file", action="store_true", help="Do not write a log file")
    parser.add_argument("--no-console-log", action="store_true", help="Do not log to stdout/stderr")
    parser.add_argument("--start-id", type=int, default=None, help="First JSON-RPC request id (default: %d)" % defaults.initial_message_id)
    parser.add_argument("--strict-numeric", action="store_true", default=None, help="Reject malformed numbers instead of reading them as 0")
    parser.add_argument("--escape-strings", action="store_true", default=None, help="JSON-escape string values")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    try:
        defaults = ProcessorConfig.from_env()
    except ProcessorError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    args = build_parser(defaults).parse_args(argv)
    try:
        configure_logging(
            args.log_level,
            None if args.no_log_file else args.log_file,
            console=not args.no_console_log,
        )
    except OSError as e:
        print(f"Cannot open log file: {e}", file=sys.stderr)
        return 1

    config = defaults.with_overrides(
        initial_message_id=args.start_id,
        strict_numeric=args.strict_numeric,
        escape_strings=args.escape_strings,
    )

    logger.info("Deribit Order Processor")
    logger.info("Input: %s", args.input)
    logger.info("Output: %s", args.output)

    processor = OrderProcessor(config)
    try:
        result = processor.process(args.input, args.output)
    except ProcessorError as e:
        logger.error("Error: %s", e)
        return 1

    print_report(result)
    logger.info("Processing complete!")
    return 0
