"""Fixtures for HTTP tests against the FastAPI application (in-memory SQLite)."""

from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from fullfuel_config.settings import Settings
from fullfuel_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)
from tests.shared.fixtures.api import build_app, client_for, make_settings, register

# Re-export shared database fixtures
from tests.shared.fixtures.database import (
    sqlite_engine,
    sqlite_session_maker,
)

__all__ = ["sqlite_engine", "sqlite_session_maker"]


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings, sqlite_session_maker) -> FastAPI:
    return build_app(settings, sqlite_session_maker)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with client_for(app) as c:
        yield c


@pytest_asyncio.fixture
async def ava_token(client) -> str:
    """Register Ava and return the session token."""
    response = await register(client)
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest_asyncio.fixture
async def admin_token(client, sqlite_session_maker) -> str:
    """Register an account and promote it to admin directly in the store."""
    response = await register(client, email="admin@example.com", name="Admin")
    assert response.status_code == 200, response.text

    async with sqlite_session_maker() as session:
        repo = UserRepositorySQLAlchemy(session)
        user = await repo.find_by_email("admin@example.com")
        user.promote_to_admin()
        await repo.save(user)
        await session.commit()

    return response.json()["token"]
