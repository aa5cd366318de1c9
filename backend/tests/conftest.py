"""Root conftest — shared test configuration."""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure tests don't accidentally call the real voice provider
os.environ["ELEVENLABS_API_KEY"] = ""
os.environ.setdefault("LOG_FORMAT", "text")


@pytest.fixture
def client_for():
    """Open a test client on any app: `async with client_for(app) as c:`."""
    def _open(app):
        return AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        )
    return _open
