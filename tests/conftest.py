"""Test fixtures — a throwaway database per test, real auth pipeline.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite file (tmp_path) and a fresh schema, so
   tests never see each other's rows.
2. The engine comes from build_engine(), so tests run with the same
   BEGIN IMMEDIATE transaction handling the app uses on SQLite — two
   concurrent writers really do queue on the database lock.
3. Only get_db is overridden. Auth is never mocked: tests mint real
   HS256 tokens with the test secret and go through the gate.
"""

import os

# Must be set before acikkuran.config builds its settings singleton
os.environ.setdefault("ACIKKURAN_JWT_SECRET", "test-secret-do-not-use-in-production-" + "0123456789abcdef" * 4)
os.environ.setdefault("ACIKKURAN_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from acikkuran.config import settings
from acikkuran.db.engine import build_engine, get_db
from acikkuran.db.models import Base
from acikkuran.main import app


TEST_SECRET = settings.jwt_secret


def _make_token(
    sub: str | None = "user-1",
    secret: str = TEST_SECRET,
    algorithm: str = "HS256",
    **claims,
) -> str:
    """Mint a token the way the NextAuth frontend does."""
    payload = dict(claims)
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, secret, algorithm=algorithm)


def _auth_header(sub: str = "user-1", **claims) -> dict:
    return {"Authorization": f"Bearer {_make_token(sub, **claims)}"}


@pytest.fixture()
def make_token():
    """Token factory: make_token(sub, secret=..., algorithm=..., **claims)."""
    return _make_token


@pytest.fixture()
def auth_header():
    """Authorization header factory for a given subject."""
    return _auth_header


@pytest_asyncio.fixture()
async def engine(tmp_path):
    """Per-test engine on a fresh SQLite file with the schema created."""
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with the app's get_db pointed at the test database.

    Learn: Each request gets its own session, just like production, so
    concurrent requests in a test use separate connections.
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
