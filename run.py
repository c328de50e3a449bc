#!/usr/bin/env python3
"""Run script for the test fixtures downloader."""

import sys

from fixture_fetcher.cli import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
