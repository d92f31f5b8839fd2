"""Service test fixtures — in-memory stores, async DB, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so anything reaching for it directly uses the test engine
    - Users seeded through SqlUserStore, tokens issued with the test secret

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (ADR: PostgreSQL-specific features not exercised here)
    - In-memory fakes for BlogMutationService: failure injection without a DB
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.config import get_settings
from app.core.domain_types import UserDraft, UserId, UserIdentity
from app.db.base import Base
from app.infrastructure.auth import hash_password, issue_token
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.repositories import SqlBlogStore, SqlUserStore
import app.infrastructure.database as db_module
from app.main import app
from app.services.blog_mutations import BlogMutationService
from tests.services.fake_stores import FakeUser, InMemoryBlogStore, InMemoryUserStore


# --- In-memory stores -----------------------------------------------------------

@pytest.fixture
def blog_store():
    return InMemoryBlogStore()


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def service(blog_store, user_store):
    return BlogMutationService(blog_store, user_store)


def _add_fake_user(user_store, username: str) -> UserIdentity:
    user = FakeUser(
        id=UserId(uuid.uuid4()), username=username,
        password_hash="x", name=username.title(),
    )
    user_store.rows[user.id] = user
    return UserIdentity(id=user.id, username=user.username, name=user.name)


@pytest.fixture
def alice(user_store) -> UserIdentity:
    return _add_fake_user(user_store, "alice")


@pytest.fixture
def bob(user_store) -> UserIdentity:
    return _add_fake_user(user_store, "bob")


# --- Database ---------------------------------------------------------------------

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# --- Seeded users -------------------------------------------------------------------

async def seed_user(db: AsyncSession, username: str, password: str = "sekret"):
    return await SqlUserStore(db).insert(UserDraft(
        username=username, name=username.title(),
        password_hash=hash_password(password),
    ))


def bearer(user) -> dict:
    settings = get_settings()
    token = issue_token(user, settings.secret_key, settings.token_algorithm)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def root_user(test_db):
    return await seed_user(test_db, "root")


@pytest.fixture
async def other_user(test_db):
    return await seed_user(test_db, "mallory")


@pytest.fixture
def sql_blogs(test_db):
    return SqlBlogStore(test_db)


@pytest.fixture
def sql_users(test_db):
    return SqlUserStore(test_db)
