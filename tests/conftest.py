"""Test configuration for GoTrue client tests."""

import pytest

from gotrue_client import GoTrueClient

BASE_URL = "http://localhost:9999"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in ("GOTRUE_URL", "GOTRUE_API_KEY", "GOTRUE_SERVICE_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def client():
    """Shared GoTrueClient fixture for sync tests."""
    client = GoTrueClient(BASE_URL)
    yield client
    client.close()
