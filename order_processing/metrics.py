"""
Processing metrics: per-phase time, phase share of total, throughput.

Times are in microseconds as measured by OrderProcessor. Throughput is orders
per second over the total run time (0 when the run took no measurable time).
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from order_processing.processor import ProcessingResult

MICROSECONDS_PER_SECOND = 1_000_000.0


@dataclass
class ProcessingMetrics:
    """Performance summary of one processing run."""

    orders_processed: int
    total_time_us: int
    parse_time_us: int
    build_time_us: int
    write_time_us: int
    parse_share_pct: float
    build_share_pct: float
    write_share_pct: float
    throughput_per_sec: float
    payload_bytes: int
    bytes_per_order: float


def compute_metrics(result: ProcessingResult) -> ProcessingMetrics:
    """
    Compute performance metrics from a processing result.

    Parameters
    ----------
    result : ProcessingResult
        Output of OrderProcessor.process().

    Returns
    -------
    ProcessingMetrics
        Phase times, phase shares (percent of total), throughput and payload size.
    """
    phases = np.array(
        [result.parse_time_us, result.build_time_us, result.write_time_us],
        dtype=float,
    )
    total = float(result.total_time_us)
    count = result.processed_order_count

    if total > 0:
        shares = phases / total * 100.0
        throughput = count * MICROSECONDS_PER_SECOND / total
    else:
        shares = np.zeros_like(phases)
        throughput = 0.0

    payload_bytes = len(result.payload)
    return ProcessingMetrics(
        orders_processed=count,
        total_time_us=result.total_time_us,
        parse_time_us=result.parse_time_us,
        build_time_us=result.build_time_us,
        write_time_us=result.write_time_us,
        parse_share_pct=float(shares[0]),
        build_share_pct=float(shares[1]),
        write_share_pct=float(shares[2]),
        throughput_per_sec=float(throughput),
        payload_bytes=payload_bytes,
        bytes_per_order=payload_bytes / count if count else 0.0,
    )
