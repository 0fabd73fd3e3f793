import pathlib
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from api.app.repos_sqlalchemy import catalog_repo_sql  # noqa: E402
from api.app.seed import DEMO_PASSWORD, seed  # noqa: E402

pytestmark = pytest.mark.anyio


async def test_seed_is_idempotent(session):
    first = await seed(session)
    assert first["seeded"] is True
    assert [r["name"] for r in first["restaurants"]] == ["Chez Fatou", "Dakar Grill"]
    assert await seed(session) == {"seeded": False}

    restaurant_id = first["restaurants"][0]["id"]
    products = await catalog_repo_sql.list_products(session, restaurant_id)
    assert [p.name for p in products] == ["Thieboudienne", "Yassa"]


async def test_seeded_owner_can_log_in(client, session):
    await seed(session)
    resp = await client.post(
        "/api/auth/login",
        json={"email": "owner-r1@example.com", "password": DEMO_PASSWORD},
    )
    assert resp.status_code == 200
    token = resp.json()["data"]["access_token"]

    resp = await client.get(
        "/api/restaurant/orders", headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 200
    assert resp.json()["data"] == []
