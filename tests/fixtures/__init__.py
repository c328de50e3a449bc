"""Organized test fixtures for the fixture fetcher.

This package provides reusable fixtures organized by category:
- data_fixtures: Sample configs and archives
- mock_fixtures: Fake fetchers and GitHub API transports
- env_fixtures: Environment configuration
"""
