"""
Order processing on top of deribit-core.

Orchestrates parse -> build -> write for an order file, times each phase, and
reports throughput. Also converts orders to and from pandas DataFrames.
"""

from order_processing.processor import OrderProcessor, PhaseTimings, ProcessingResult
from order_processing.metrics import ProcessingMetrics, compute_metrics
from order_processing.report import print_report
from order_processing.frames import orders_from_frame, orders_to_frame

__all__ = [
    "OrderProcessor",
    "PhaseTimings",
    "ProcessingResult",
    "ProcessingMetrics",
    "compute_metrics",
    "print_report",
    "orders_from_frame",
    "orders_to_frame",
]
