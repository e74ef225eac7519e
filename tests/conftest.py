"""
CloudNote Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Overview:
    Unit tests (no database):
    ├── mock_db_session:  AsyncMock standing in for AsyncSession
    ├── token_codec:      TokenCodec with the test secret
    ├── password_hasher:  bcrypt at the minimum cost factor (fast)
    ├── account_service / note_service
    └── make_result:      builds fake SQLAlchemy Result objects

    End-to-end tests:
    ├── db_schema:   creates/drops all tables in a temporary SQLite file
    ├── test_client: HTTPX AsyncClient wired to the real app via ASGITransport
    └── signup_payload / register_and_login helpers
"""

import os
import tempfile

# Settings are read at import time, so the environment must be prepared
# before anything from cloudnote is imported.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="cloudnote_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict, Optional  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from cloudnote.config import settings  # noqa: E402
from cloudnote.services.account_service import AccountService  # noqa: E402
from cloudnote.services.note_service import NoteService  # noqa: E402
from cloudnote.services.passwords import PasswordHasher, PasswordPolicy  # noqa: E402
from cloudnote.services.token_codec import TokenCodec  # noqa: E402

STRONG_PASSWORD = "Str0ng!Passw0rd"


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_x(mock_db_session, make_result):
            mock_db_session.execute.return_value = make_result(scalar=None)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_result():
    """
    Factory for fake Result objects as returned by AsyncSession.execute().

    scalar:   value of scalar_one_or_none()
    rows:     list returned by scalars().all()
    rowcount: affected rows of an UPDATE/DELETE
    """
    def _make(scalar: Any = None, rows: Optional[list] = None, rowcount: int = 0):
        result = MagicMock()
        result.scalar_one_or_none.return_value = scalar
        result.scalars.return_value.all.return_value = rows or []
        result.rowcount = rowcount
        return result
    return _make


@pytest.fixture
def token_codec():
    return TokenCodec(secret_key=settings.jwt_secret_key, ttl_seconds=3600)


@pytest.fixture
def password_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def account_service(token_codec, password_hasher):
    return AccountService(
        token_codec=token_codec,
        password_hasher=password_hasher,
        password_policy=PasswordPolicy(),
    )


@pytest.fixture
def note_service():
    """NoteService with a fixed clock so slugs are predictable."""
    return NoteService(clock_ms=lambda: 1700000000000)


# ══════════════════════════════════════════════════════════════════════════
# End-to-end Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_schema():
    """Fresh tables for each test, dropped afterwards."""
    from cloudnote.database import Base, engine
    import cloudnote.models.note  # noqa: F401
    import cloudnote.models.user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(db_schema):
    """
    HTTPX AsyncClient routed directly into the FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from cloudnote.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def signup_payload():
    """Factory for a valid signup body; override any field by keyword."""
    def _make(**overrides) -> Dict[str, Any]:
        payload = {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "gender": "F",
            "birthDate": "1990-05-17",
            "email": "ada@example.com",
            "password": STRONG_PASSWORD,
        }
        payload.update(overrides)
        return payload
    return _make


@pytest.fixture
def register_and_login(test_client, signup_payload):
    """Sign up a user and return Authorization headers carrying their token."""
    async def _register(email: str, password: str = STRONG_PASSWORD) -> Dict[str, str]:
        response = await test_client.post(
            "/api/auth/signup", json=signup_payload(email=email, password=password)
        )
        assert response.status_code == 200, response.text
        response = await test_client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _register
