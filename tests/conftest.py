"""Shared pytest fixtures: in-memory database, API clients, menu item factory."""
import os

# Must be set before storefront modules read the settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "test-password"
os.environ["ENV_MODE"] = "development"
os.environ["CART_STORE_BACKEND"] = "memory"

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront import database
from storefront.client import StorefrontAPIClient
from storefront.core.security import ensure_admin_user
from storefront.main import app
from storefront.schemas import MenuItemResponse
from storefront.storage import CatalogStorage

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "test-password"


@pytest.fixture()
def test_engine(monkeypatch):
    """Fresh in-memory database per test, swapped in for the module engine."""
    engine = database.build_engine("sqlite+aiosqlite://")
    session_maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(database, "engine", engine)
    monkeypatch.setattr(database, "async_session_maker", session_maker)
    return engine


@pytest.fixture()
def client(test_engine):
    """TestClient with the app lifespan running (tables and admin created)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_client(client):
    response = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest_asyncio.fixture()
async def api(test_engine):
    """StorefrontAPIClient talking to the app in-process through ASGITransport."""
    # ASGITransport does not run the lifespan
    await database.init_db()
    async with database.async_session_maker() as session:
        await ensure_admin_user(CatalogStorage(session))

    transport = httpx.ASGITransport(app=app)
    async with StorefrontAPIClient("http://testserver", transport=transport) as client:
        yield client
    await test_engine.dispose()


def _make_item(
    name: str = "Margherita Pizza",
    price: int = 1299,
    item_id: str = "item-1",
    **overrides,
) -> MenuItemResponse:
    fields = {
        "id": item_id,
        "category_id": "cat-1",
        "name": name,
        "description": f"{name} description",
        "price": price,
        "is_available": True,
        "is_hidden": False,
    }
    fields.update(overrides)
    return MenuItemResponse(**fields)


@pytest.fixture()
def make_item():
    """Factory for menu item snapshots as the API serves them."""
    return _make_item
