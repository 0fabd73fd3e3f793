"""Shared fixtures for API tests.

Each test gets its own SQLite file so that orders, users and catalog rows
never leak between tests.
"""

import os
import pathlib
import sys
from decimal import Decimal

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

os.environ.setdefault("SECRET_KEY", "x" * 32)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_SAMPLE_2XX", "0")

from httpx import ASGITransport, AsyncClient  # noqa: E402

from api.app import db as app_db  # noqa: E402
from api.app.auth import create_access_token, hash_password, principal_for  # noqa: E402
from api.app.main import app  # noqa: E402
from api.app.models import Category, Product, Restaurant, User  # noqa: E402

from _helpers import PASSWORD  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def session(tmp_path):
    app_db.init_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await app_db.create_all()
    try:
        async with app_db.get_sessionmaker()() as session:
            yield session
    finally:
        await app_db.dispose()


@pytest.fixture
async def catalog(session):
    """Two restaurants with two products each plus one inactive product."""

    session.add_all(
        [
            Restaurant(id="R1", name="Chez Fatou", delivery_fee=Decimal("2.50")),
            Restaurant(id="R2", name="Dakar Grill", delivery_fee=Decimal("3.00")),
        ]
    )
    await session.flush()
    session.add_all(
        [
            Category(id="C1", restaurant_id="R1", name="Plats", sort=1),
            Category(id="C2", restaurant_id="R2", name="Grill", sort=1),
            Product(id="P1", restaurant_id="R1", category_id="C1", name="Yassa", price=Decimal("7.00")),
            Product(id="P2", restaurant_id="R1", category_id="C1", name="Bissap", price=Decimal("1.50")),
            Product(id="P3", restaurant_id="R2", category_id="C2", name="Dibi", price=Decimal("9.00")),
            Product(id="P4", restaurant_id="R2", category_id="C2", name="Old dish", price=Decimal("5.00"), active=False),
        ]
    )
    await session.commit()
    return {"R1": "R1", "R2": "R2"}


@pytest.fixture
async def users(session, catalog):
    """Accounts keyed by a short handle."""

    rows = {
        "admin": User(id="U-admin", email="admin@example.com", role="ADMIN"),
        "owner1": User(
            id="U-owner1",
            email="owner1@example.com",
            role="RESTAURATOR",
            restaurant_id="R1",
            permissions=["dashboard", "orders", "products", "categories"],
        ),
        "viewer1": User(
            id="U-viewer1",
            email="viewer1@example.com",
            role="RESTAURATOR",
            restaurant_id="R1",
            permissions=["dashboard", "products"],
        ),
        "owner2": User(
            id="U-owner2",
            email="owner2@example.com",
            role="RESTAURATOR",
            restaurant_id="R2",
            permissions=["dashboard", "orders"],
        ),
        "customer": User(id="U-cust", email="cust@example.com", role="CUSTOMER"),
    }
    password_hash = hash_password(PASSWORD)
    for user in rows.values():
        user.name = user.email
        user.password_hash = password_hash
    session.add_all(rows.values())
    await session.commit()
    return rows


@pytest.fixture
def principals(users):
    return {key: principal_for(user) for key, user in users.items()}


@pytest.fixture
def auth_headers(principals):
    def _headers(handle: str) -> dict:
        token = create_access_token(principals[handle])
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def client(session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
