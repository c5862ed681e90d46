"""
Shared pytest fixtures and configuration.
"""

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pomofocus.api.app import create_app
from pomofocus.clock import ManualClock


@pytest.fixture()
def clock():
    return ManualClock(datetime(2024, 3, 1, 10, 0))


@pytest.fixture()
def settings_path(tmp_path):
    return tmp_path / "settings.json"


@pytest.fixture()
def app(clock, settings_path):
    """Create a fresh app per test, ticking on a manual clock."""
    return create_app(clock=clock, settings_path=settings_path)


@pytest_asyncio.fixture()
async def client(app):
    """Async HTTP client wired directly to the ASGI app (no server needed)."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
