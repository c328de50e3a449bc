"""Allow running the fetcher with ``python -m fixture_fetcher``."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
