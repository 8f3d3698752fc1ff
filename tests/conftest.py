"""
tests/conftest.py -- Shared test fixtures for CredGate.

This module provides:
  - TEST_SECRET: the signing secret every fixture shares
  - hasher / service: a fresh low-cost PasswordHasher / AuthService per test
  - _patch_lifespan(): wires a test AuthService into app.state, bypassing
    the real startup
  - api_client: TestClient against the real FastAPI app with an isolated store

bcrypt runs at the minimum cost (4 rounds) everywhere in the suite so the
concurrency and rate-limit tests stay fast.

Environment variables must be set before any api/ or core/ import:
get_settings() is cached and api.limiter reads it at import time.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before importing api/ so the cached Settings see them.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SECRET_KEY", "credgate-test-signing-secret-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.passwords import PasswordHasher
from auth.service import AuthService, build_auth_service

TEST_SECRET = os.environ["SECRET_KEY"]
TEST_ROUNDS = 4


def _patch_lifespan(service: AuthService):
    """Return an async context manager that replaces the real lifespan.

    The test service is wired into app.state so every request in the test
    sees the same isolated in-memory store.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.auth_service = service
        yield

    return test_lifespan


@pytest.fixture
def secret() -> str:
    return TEST_SECRET


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def service() -> AuthService:
    """A fresh AuthService with an empty in-memory store."""
    return build_auth_service(TEST_SECRET, bcrypt_rounds=TEST_ROUNDS)


@pytest.fixture
def api_client(service: AuthService) -> Generator[tuple[TestClient, AuthService], None, None]:
    """Yield (client, service) for HTTP integration tests.

    Function-scoped: each test starts with no registered accounts, so ids
    are predictable (the first registration gets id 1).
    """
    app.router.lifespan_context = _patch_lifespan(service)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, service
