"""
Performance report: print the metrics of a processing run.
"""

from __future__ import annotations

from order_processing.metrics import ProcessingMetrics, compute_metrics
from order_processing.processor import ProcessingResult


def print_report(result: ProcessingResult) -> ProcessingMetrics:
    """
    Compute metrics from a processing result and print a performance summary.

    Parameters
    ----------
    result : ProcessingResult
        Output of OrderProcessor.process().

    Returns
    -------
    ProcessingMetrics
        The computed metrics (e.g. for programmatic use).
    """
    metrics = compute_metrics(result)
    print("--- Performance Metrics ---")
    print(f"Orders processed: {metrics.orders_processed}")
    print(f"Total time:       {metrics.total_time_us} μs")
    print(f"Parse time:       {metrics.parse_time_us} μs ({metrics.parse_share_pct:.1f}%)")
    print(f"Build time:       {metrics.build_time_us} μs ({metrics.build_share_pct:.1f}%)")
    print(f"Write time:       {metrics.write_time_us} μs ({metrics.write_share_pct:.1f}%)")
    print(f"Throughput:       {int(metrics.throughput_per_sec)} orders/sec")
    print(f"Payload size:     {metrics.payload_bytes:,} bytes")
    print("---------------------------")
    return metrics
