"""Conftest for unit tests - mark everything under tests/unit as a unit test."""

import pytest


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
