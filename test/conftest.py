"""
Pytest configuration and fixtures for JSON Post Type tests
"""

import os
import sys

# In-memory database and no bootstrap administrator, set before the package reads settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""
os.environ["GRANT_CAPABILITIES_ON_STARTUP"] = "false"

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from json_post_type import database  # noqa: E402
from json_post_type.auth import ACCESS_TOKEN_COOKIE, create_access_token, get_user_by_email  # noqa: E402
from json_post_type.constants import POST_TYPE, PostStatus, RoleName  # noqa: E402
from json_post_type.database import Base  # noqa: E402
from json_post_type.main import app  # noqa: E402
from json_post_type.models.user import User  # noqa: E402
from json_post_type.plugins import loader, plugin_registry  # noqa: E402
from json_post_type.post_types import post_type_registry  # noqa: E402
from json_post_type.services import post_service  # noqa: E402
from json_post_type.services.auth_service import create_user  # noqa: E402
from json_post_type.services.capability_service import (  # noqa: E402
    ensure_capabilities,
    get_role,
    seed_default_roles,
)

TEST_PASSWORD = "testpassword"


@pytest.fixture(autouse=True)
def isolated_plugins_config(tmp_path, monkeypatch):
    """Keep plugin config reads inside the test's temp directory."""
    monkeypatch.setattr(loader, "_PLUGINS_CONFIG_FILE", tmp_path / "plugins_config.json")


@pytest.fixture(autouse=True)
def reset_registries():
    yield
    plugin_registry.clear()
    post_type_registry.clear()


# ── Service-level database ────────────────────────────────────────────────────


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """A session on a private in-memory database with the default roles seeded."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        await seed_default_roles(session)
        yield session

    await engine.dispose()


@pytest.fixture
def role_user():
    """Factory creating a user whose role capabilities are first merged with `capabilities`."""

    async def _make(db: AsyncSession, email: str, role_name: str, capabilities: dict | None = None) -> User:
        if capabilities is not None:
            role = await get_role(db, role_name)
            role.capabilities = {**role.capabilities, **capabilities}
            await db.commit()
        return await create_user(email.split("@")[0], email, TEST_PASSWORD, db, role_name=role_name)

    return _make


# ── Application client ────────────────────────────────────────────────────────


async def _reset_database() -> None:
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with database.AsyncSessionLocal() as db:
        await seed_default_roles(db)


@pytest.fixture
def client():
    """TestClient with the application lifespan running and a fresh database.

    Database work for route tests goes through `client.portal` so that it
    runs on the client's event loop.
    """
    with TestClient(app) as test_client:
        test_client.portal.call(_reset_database)
        yield test_client
        # The pooled connection belongs to this client's loop
        test_client.portal.call(database.engine.dispose)


async def _create_user(email: str, role_name: str, grant: bool) -> User:
    async with database.AsyncSessionLocal() as db:
        if grant:
            await ensure_capabilities(db, roles=[role_name])
        return await create_user(email.split("@")[0], email, TEST_PASSWORD, db, role_name=role_name)


async def _create_post(author_email: str | None, title: str, content: str, status: PostStatus):
    async with database.AsyncSessionLocal() as db:
        author = await get_user_by_email(author_email, db) if author_email else None
        return await post_service.create_post(db, post_type_registry.get(POST_TYPE), author, title, content, status)


async def _role_capabilities(role_name: str) -> dict:
    async with database.AsyncSessionLocal() as db:
        role = await get_role(db, role_name)
        return dict(role.capabilities)


@pytest.fixture
def make_user(client):
    def _make(email: str, role_name: str = RoleName.ADMINISTRATOR.value, grant: bool = False) -> User:
        return client.portal.call(_create_user, email, role_name, grant)

    return _make


@pytest.fixture
def make_post(client):
    def _make(author_email: str | None = None, title: str = "Doc", content: str = "", status=PostStatus.PUBLISH):
        return client.portal.call(_create_post, author_email, title, content, status)

    return _make


@pytest.fixture
def role_capabilities(client):
    def _get(role_name: str) -> dict:
        return client.portal.call(_role_capabilities, role_name)

    return _get


@pytest.fixture
def auth_headers():
    """Factory for bearer-token headers."""

    def _headers(email: str) -> dict:
        token = create_access_token(data={"sub": email}, expires_delta=timedelta(minutes=30))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(make_user) -> User:
    """Administrator whose role holds the JSON capabilities."""
    return make_user("admin@example.com", RoleName.ADMINISTRATOR.value, grant=True)


@pytest.fixture
def subscriber(make_user) -> User:
    return make_user("subscriber@example.com", RoleName.SUBSCRIBER.value)


@pytest.fixture
def admin_headers(admin, auth_headers) -> dict:
    return auth_headers(admin.email)


@pytest.fixture
def subscriber_headers(subscriber, auth_headers) -> dict:
    return auth_headers(subscriber.email)


@pytest.fixture
def login_as(client):
    """Set the admin session cookie on the client for `email`."""

    def _login(email: str) -> None:
        client.cookies.set(ACCESS_TOKEN_COOKIE, create_access_token({"sub": email}))

    return _login
