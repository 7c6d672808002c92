"""
pytest configuration and shared fixtures for the TruthLens tests.

Key concern: tests must not require a Gemini API key or network access.
  1. AI_MOCK_MODE=true is set before anything imports truthlens.core.config,
     so the shared GeminiClient returns canned responses.
  2. Tests that need specific Gemini behaviour inject their own client
     (RequestLifecycle(client=...) or app.dependency_overrides).
  3. Rate-limit counters are reset before every test.
"""

import os

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("AI_MOCK_MODE", "true")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from httpx import ASGITransport, AsyncClient


class FakeMediaFile:
    """Stand-in for an upload: declared MIME type, async read(), close() tracking."""

    def __init__(self, data=b"\x89PNG fake-image-bytes", content_type="image/png",
                 filename="photo.png", read_error=None):
        self.data = data
        self.content_type = content_type
        self.filename = filename
        self.read_error = read_error
        self.closed = False
        self.read_sizes = []

    async def read(self, size=-1):
        self.read_sizes.append(size)
        if self.read_error is not None:
            raise self.read_error
        return self.data if size < 0 else self.data[:size]

    async def close(self):
        self.closed = True


@pytest.fixture()
def make_media():
    """Factory fixture: make_media(content_type="video/mp4", data=b"...")."""
    return FakeMediaFile


@pytest.fixture(autouse=True)
def reset_rate_limits():
    from truthlens.core.rate_limit import limiter

    limiter.reset()
    yield


@pytest.fixture()
async def client():
    """
    HTTPX async test client wired to the FastAPI app.

    Usage:
        async def test_something(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from truthlens.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
