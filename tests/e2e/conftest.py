"""
E2E test fixtures.

Live tests reuse skip_without_credentials from the root conftest.
"""

import pytest


def pytest_collection_modifyitems(config, items):
    """Run live tests only when selected with -m e2e."""
    if "e2e" in (config.getoption("-m") or ""):
        return
    skip_live = pytest.mark.skip(reason="live API test; select with -m e2e")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_live)
