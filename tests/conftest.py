# conftest.py
import os

# Must be set before tabletmenu builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENV_MODE", "development")

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tabletmenu import models  # noqa: F401
from tabletmenu.client import MenuApiClient, MenuStore
from tabletmenu.database import Base, get_db
from tabletmenu.main import app
from tabletmenu.services.auth import reset_credential_verifier


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def http(engine):
    """httpx client wired straight into the ASGI app."""
    session_maker = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    reset_credential_verifier()

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    reset_credential_verifier()


@pytest.fixture
def create(http):
    """POST a payload and return the created row."""
    async def _create(path, payload):
        r = await http.post(path, json=payload)
        assert r.status_code == 201, f"POST {path} -> {r.status_code}: {r.text}"
        return r.json()
    return _create


@pytest.fixture
def toasts():
    return []


@pytest.fixture
async def store(http, toasts):
    """MenuStore talking to the in-process API, already loaded."""
    api = MenuApiClient(client=http)
    store = MenuStore(api, notify=lambda message, kind: toasts.append((message, kind)))
    await store.load()
    return store
