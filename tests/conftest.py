"""
Cooking Tips Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is overridden BEFORE any cooking_tips import so the
       settings singleton, the engine and the routes all see test values.

Fixture Hierarchy (all function-scoped):
    ├── tip_store / user_directory / tip_service: in-memory collaborators
    ├── auth_headers: bearer headers for any user id
    └── api_client: HTTPX AsyncClient on a fresh app (memory store backend)
"""

import os

os.environ["TIP_STORE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real-but-long-enough-for-hs256"
os.environ["ADMIN_USER_IDS"] = "admin"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from cooking_tips.security import create_access_token
from cooking_tips.services.tip_service import TipService
from cooking_tips.stores.memory import (
    InMemoryTipStore,
    InMemoryUserDirectory,
    memory_tip_store,
)


@pytest.fixture
def tip_store():
    return InMemoryTipStore()


@pytest.fixture
def user_directory():
    return InMemoryUserDirectory({"alice": "Alice Baker", "bob": "Bob Broth"})


@pytest.fixture
def tip_service(tip_store, user_directory):
    """TipService over fresh in-memory collaborators; `admin` may feature tips."""
    return TipService(tip_store, user_directory, admin_ids=["admin"])


@pytest.fixture
def auth_headers():
    """
    Factory for Authorization headers.

    Usage:
        async def test_x(api_client, auth_headers):
            await api_client.post("/api/tips", json=..., headers=auth_headers("alice"))
    """
    def make(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return make


@pytest_asyncio.fixture
async def api_client():
    """
    HTTPX AsyncClient talking to a freshly built app.

    The process-wide memory store is emptied first so tests never see each
    other's tips.
    """
    from cooking_tips.main import create_app

    memory_tip_store.clear()
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    memory_tip_store.clear()
