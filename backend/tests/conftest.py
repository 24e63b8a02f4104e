"""
StageLink Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test gets a fresh, fully-migrated database and an HTTP client
       wired to it, so tests never see each other's rows.
How:   A per-test SQLite file (aiosqlite) with foreign keys enforced; the
       app's get_db_session dependency is overridden to use it.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── engine: async engine on a temp SQLite file, tables created
    ├── session_factory: sessionmaker bound to that engine
    ├── db_session: one session for service-level tests
    ├── test_client: HTTPX AsyncClient talking to the FastAPI app
    ├── sign_up: factory that registers a user over HTTP
    └── make_profile: factory that provisions a user through IdentityService
"""

import os

# Override settings for testing BEFORE any stagelink imports
# Why: Prevents tests from using a production database or signing key
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-signing-key-not-secret"
os.environ["BCRYPT_ROUNDS"] = "4"  # Fast hashes
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from types import SimpleNamespace
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import stagelink.models  # noqa: F401  (registers every table on Base.metadata)
from stagelink.database import Base, enable_sqlite_foreign_keys, get_db_session
from stagelink.models import Profile
from stagelink.services.identity_service import identity_service


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine(tmp_path):
    """
    A fresh database per test.

    A file (not :memory:) so every pooled connection sees the same tables.
    """
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stagelink_test.db'}")
    enable_sqlite_foreign_keys(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a real async session for service-level tests.

    Usage:
        async def test_apply(db_session, make_profile):
            artist = await make_profile("ada")
            await job_service.apply(db_session, artist, job_id, JobApplicationCreate())
    """
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     Uses ASGITransport to route requests directly to the app, with
             get_db_session swapped for one bound to the test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from stagelink.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def sign_up(test_client):
    """
    Registers a user over HTTP and returns their id and auth headers.

    Usage:
        venue = await sign_up("blue-note", profile_type="venue")
        await test_client.post("/api/jobs", json=..., headers=venue.headers)

    Extra keyword arguments are applied with PATCH /api/profiles/me.
    """

    async def _sign_up(name: str, profile_type: str = "artist", **profile_fields):
        response = await test_client.post(
            "/api/auth/signup",
            json={
                "email": f"{name}@stagelink.io",
                "password": "correct-horse",
                "profile_type": profile_type,
                "display_name": name.replace("-", " ").title(),
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        user = SimpleNamespace(
            id=body["account_id"],
            token=body["access_token"],
            headers={"Authorization": f"Bearer {body['access_token']}"},
        )
        if profile_fields:
            patched = await test_client.patch(
                "/api/profiles/me", json=profile_fields, headers=user.headers
            )
            assert patched.status_code == 200, patched.text
        return user

    return _sign_up


@pytest.fixture
def make_profile(db_session):
    """Provisions an account + profile directly through IdentityService."""

    async def _make_profile(name: str, profile_type: str = "artist") -> Profile:
        created = await identity_service.create_account(
            db_session,
            email=f"{name}@stagelink.io",
            password="correct-horse",
            profile_type=profile_type,
            display_name=name.title(),
        )
        await db_session.commit()
        return await db_session.get(Profile, created.account_id)

    return _make_profile
