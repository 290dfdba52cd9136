"""Shared fixtures: an in-process API client and a clean list store per test."""

import pytest
from httpx import ASGITransport, AsyncClient

from picklist.main import app
from picklist.store import store


@pytest.fixture(autouse=True)
def clear_store():
    store.clear()
    yield
    store.clear()


@pytest.fixture
async def client():
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
