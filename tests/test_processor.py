"""
Tests for OrderProcessor, metrics, report and CLI.
"""

import json
from pathlib import Path

import pytest

from deribit_core import ProcessorConfig
from deribit_core.errors import FormatError, OrderIOError
from deribit_core.types import ProcessingStatus
from order_processing import OrderProcessor, PhaseTimings, ProcessingResult, compute_metrics, print_report
from order_processing.cli import main

SAMPLE = Path(__file__).resolve().parent.parent / "examples" / "data" / "sample_orders.csv"

CSV = b"id,direction,amount,instrument_name,price\n1,buy,1.5,BTC-PERPETUAL,64000\n2,sell,2,ETH-PERPETUAL,\n"


@pytest.fixture
def order_file(tmp_path):
    path = tmp_path / "orders.txt"
    path.write_bytes(CSV)
    return path


# --- Processing ---


def test_process_writes_requests(order_file, tmp_path):
    out = tmp_path / "output.txt"
    processor = OrderProcessor()
    assert processor.status == ProcessingStatus.IDLE

    result = processor.process(order_file, out)

    assert processor.status == ProcessingStatus.COMPLETE
    assert processor.last_result is result
    assert result.processed_order_count == 2
    assert out.read_bytes() == result.payload
    assert result.payload == (
        b'{"id":5275,"jsonrpc":"2.0","method":"private/buy",'
        b'"params":{"amount":1.5,"instrument_name":"BTC-PERPETUAL","price":64000}}\n'
        b'{"id":5276,"jsonrpc":"2.0","method":"private/sell",'
        b'"params":{"amount":2,"instrument_name":"ETH-PERPETUAL"}}\n'
    )
    assert (result.first_request_id, result.last_request_id) == (5275, 5276)
    assert processor.next_request_id == 5277


def test_timings_are_consistent(order_file, tmp_path):
    result = OrderProcessor().process(order_file, tmp_path / "out.txt")
    t = result.timings
    assert min(t.parse_us, t.build_us, t.write_us) >= 0
    assert t.total_us >= t.parse_us + t.build_us + t.write_us - 3
    assert result.total_time_us == t.total_us


def test_request_ids_continue_across_runs(order_file, tmp_path):
    processor = OrderProcessor(ProcessorConfig(initial_message_id=10))
    processor.process(order_file, tmp_path / "a.txt")
    second = processor.process(order_file, tmp_path / "b.txt")
    ids = [json.loads(line)["id"] for line in second.payload.splitlines()]
    assert ids == [12, 13]


def test_sample_file(tmp_path):
    out = tmp_path / "out.txt"
    result = OrderProcessor().process(SAMPLE, out)
    lines = out.read_text(encoding="utf-8").splitlines()
    assert len(lines) == result.processed_order_count > 0
    for line in lines:
        request = json.loads(line)
        assert request["jsonrpc"] == "2.0"
        assert request["method"].startswith("private/")


def test_empty_data_writes_empty_output(tmp_path):
    path = tmp_path / "orders.txt"
    path.write_bytes(b"id,direction\n")
    out = tmp_path / "out.txt"
    result = OrderProcessor().process(path, out)
    assert result.processed_order_count == 0
    assert result.first_request_id is None
    assert out.read_bytes() == b""


# --- Failures ---


def test_missing_input_fails(tmp_path):
    processor = OrderProcessor()
    with pytest.raises(OrderIOError):
        processor.process(tmp_path / "missing.txt", tmp_path / "out.txt")
    assert processor.status == ProcessingStatus.FAILED
    assert not (tmp_path / "out.txt").exists()


def test_missing_header_fails_without_output(tmp_path):
    path = tmp_path / "orders.txt"
    path.write_bytes(b"id,direction,amount")
    processor = OrderProcessor()
    with pytest.raises(FormatError):
        processor.process(path, tmp_path / "out.txt")
    assert processor.status == ProcessingStatus.FAILED
    assert not (tmp_path / "out.txt").exists()


def test_unwritable_output_fails(order_file, tmp_path):
    processor = OrderProcessor()
    with pytest.raises(OrderIOError):
        processor.process(order_file, tmp_path)  # a directory
    assert processor.status == ProcessingStatus.FAILED


# --- Metrics and report ---


def _result(parse: int, build: int, write: int, total: int, n: int) -> ProcessingResult:
    from deribit_core import Order

    return ProcessingResult(
        orders=[Order() for _ in range(n)],
        payload=b"x" * 100,
        timings=PhaseTimings(parse_us=parse, build_us=build, write_us=write, total_us=total),
    )


def test_compute_metrics():
    m = compute_metrics(_result(200, 300, 500, 1000, 4))
    assert m.orders_processed == 4
    assert m.parse_share_pct == pytest.approx(20.0)
    assert m.build_share_pct == pytest.approx(30.0)
    assert m.write_share_pct == pytest.approx(50.0)
    assert m.throughput_per_sec == pytest.approx(4000.0)
    assert m.payload_bytes == 100
    assert m.bytes_per_order == pytest.approx(25.0)


def test_compute_metrics_zero_time():
    m = compute_metrics(_result(0, 0, 0, 0, 0))
    assert m.throughput_per_sec == 0.0
    assert m.parse_share_pct == 0.0
    assert m.bytes_per_order == 0.0


def test_print_report(capsys):
    print_report(_result(200, 300, 500, 1000, 4))
    out = capsys.readouterr().out
    assert "--- Performance Metrics ---" in out
    assert "Orders processed: 4" in out
    assert "Total time:       1000 μs" in out
    assert "Parse time:       200 μs (20.0%)" in out
    assert "Throughput:       4000 orders/sec" in out


# --- CLI ---


def test_cli_main(order_file, tmp_path, capsys):
    out = tmp_path / "out.txt"
    code = main([str(order_file), str(out), "--no-log-file", "--no-console-log", "--start-id", "100"])
    assert code == 0
    assert out.read_bytes().startswith(b'{"id":100,')
    assert "Orders processed: 2" in capsys.readouterr().out


def test_cli_missing_input(tmp_path):
    code = main([str(tmp_path / "missing.txt"), str(tmp_path / "out.txt"), "--no-log-file", "--no-console-log"])
    assert code == 1


def test_cli_invalid_config_reported_on_stderr(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("DERIBIT_INITIAL_BUFFER_SIZE", "big")
    code = main([str(tmp_path / "in.txt"), str(tmp_path / "out.txt"), "--no-log-file", "--no-console-log"])
    assert code == 1
    captured = capsys.readouterr()
    assert "Invalid configuration" in captured.err
    assert captured.out == ""


def test_cli_unopenable_log_file_reported_on_stderr(order_file, tmp_path, capsys):
    code = main([str(order_file), str(tmp_path / "out.txt"), "--log-file", str(tmp_path), "--no-console-log"])
    assert code == 1
    captured = capsys.readouterr()
    assert "Cannot open log file" in captured.err
    assert captured.out == ""


def test_cli_strict_numeric(tmp_path):
    path = tmp_path / "orders.txt"
    path.write_bytes(b"id,amount\n1,abc\n")
    args = [str(path), str(tmp_path / "out.txt"), "--no-log-file", "--no-console-log"]
    assert main(args) == 0
    assert main(args + ["--strict-numeric"]) == 1
