import sys

from order_processing.cli import main

if __name__ == "__main__":
    sys.exit(main())
