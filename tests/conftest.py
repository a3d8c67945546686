"""Shared pytest fixtures.

Usage in new test files:
    def test_something(client, no_sleep):
        resp = client.get("/health")
        ...
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from scraper_service.main import app


@pytest.fixture()
def client() -> TestClient:
    """TestClient that turns unhandled errors into 500 responses."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def no_sleep() -> AsyncMock:
    """Async sleep replacement that records requested delays."""
    return AsyncMock(return_value=None)

