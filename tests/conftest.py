"""Shared pytest configuration."""

import os

import pytest


def pytest_addoption(parser):
    """Add integration option to pytest."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless ``GOTRUE_LIVE=1`` is exported."""
    if os.getenv("GOTRUE_LIVE") == "1":
        return
    skip_live = pytest.mark.skip(reason="Set GOTRUE_LIVE=1 to run live tests")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)
