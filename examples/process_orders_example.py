"""
Order processing demo.

Demonstrates: load order file -> parse -> build JSON-RPC payload -> write -> metrics.
Also shows the parsed batch as a pandas DataFrame.
"""

import tempfile
from pathlib import Path

from deribit_core import ProcessorConfig, configure_logging
from order_processing import OrderProcessor, orders_to_frame, print_report


def main() -> None:
    data_dir = Path(__file__).resolve().parent / "data"
    csv_path = data_dir / "sample_orders.csv"

    configure_logging("INFO")

    # Request ids start at the configured value and increase by one per order
    config = ProcessorConfig(initial_message_id=5275)
    processor = OrderProcessor(config)

    with tempfile.TemporaryDirectory() as tmp:
        output_path = Path(tmp) / "output.txt"
        result = processor.process(csv_path, output_path)
        print(output_path.read_text(encoding="utf-8"))

    print(orders_to_frame(result.orders)[["id", "direction", "amount", "instrument_name", "type", "price"]])
    print_report(result)


if __name__ == "__main__":
    main()
