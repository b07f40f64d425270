"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from arena.core.dependencies import build_arena
from arena.main import app


@pytest.fixture
async def arena(settings, snapshot_source):
    """
    Service graph wired to the fake snapshot source.

    The lifespan is not run, so nothing is seeded and the refresh loop
    stays off; tests drive refresh_all themselves.
    """
    arena = build_arena(settings, portfolio_source=snapshot_source)
    original = getattr(app.state, "arena", None)
    app.state.arena = arena

    yield arena

    await arena.close()
    app.state.arena = original


@pytest.fixture
async def client(arena):
    """HTTP client for testing API endpoints."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
