"""Shared fixtures for the district viewer tests."""

import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"
