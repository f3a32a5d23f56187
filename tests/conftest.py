"""Shared pytest fixtures. Every test gets its own SQLite database file."""

import logging
from typing import Callable, Dict, Tuple
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from notevault.config import Settings
from notevault.context import build_context
from notevault.core.repositories.account_repository import AccountRepository
from notevault.main import create_app

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_PASSWORD = "secret1"


@pytest.fixture
def test_settings(tmp_path):
    """Settings for an isolated SQLite database and a cheap bcrypt cost."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notevault.db'}",
        secret_key="test-secret-key",
        bcrypt_rounds=4,
        search_backend="database",
        log_to_file=False,
        log_level="WARNING",
    )


@pytest.fixture
async def context(test_settings):
    """Started service context, shut down after the test."""
    ctx = build_context(test_settings)
    await ctx.startup()
    try:
        yield ctx
    finally:
        await ctx.shutdown()


@pytest.fixture
async def session(context):
    async with context.session_factory() as session:
        yield session


@pytest.fixture
def make_account(context, session):
    """Create an account directly in the store, returning its id."""

    async def _make(email: str, password: str = TEST_PASSWORD) -> UUID:
        repo = AccountRepository(session)
        account = await repo.create_account(email, context.password_hasher.hash(password))
        return account.id

    return _make


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """Test client with the app's lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup_and_login(client) -> Callable[..., Tuple[str, Dict[str, str]]]:
    """Register an account over HTTP and return (account id, auth headers)."""

    def _signup(email: str, password: str = TEST_PASSWORD) -> Tuple[str, Dict[str, str]]:
        response = client.post("/api/auth/signup", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        account_id = response.json()["id"]

        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        token = response.json()["access_token"]
        return account_id, {"Authorization": f"Bearer {token}"}

    return _signup
