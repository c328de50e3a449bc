"""Fixture Fetcher - downloads prebuilt binary test fixtures from GitHub release assets."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fixture-fetcher")
except PackageNotFoundError:
    __version__ = "0.0.0"  # Fallback for development
