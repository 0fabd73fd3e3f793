"""End-to-end transitions through the service layer."""

import asyncio
import pathlib
import sys
from types import SimpleNamespace

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from _helpers import customer_fields  # noqa: E402

from api.app import db as app_db  # noqa: E402
from api.app.domain import (  # noqa: E402
    ConflictError,
    Forbidden,
    InvalidTransition,
    NotFound,
    OrderStatus,
    TerminalStateError,
)
from api.app.events import ORDER_STATUS_CHANGED, event_bus  # noqa: E402
from api.app.repos_sqlalchemy import orders_repo_sql  # noqa: E402
from api.app.services import order_lifecycle  # noqa: E402

pytestmark = pytest.mark.anyio

S = OrderStatus
LINES = [{"product_id": "P1", "quantity": 2}, {"product_id": "P2", "quantity": 3}]


@pytest.fixture
async def order(session, users):
    return await orders_repo_sql.create_order(session, customer_fields(), LINES)


async def _status(session, order_id):
    return (await orders_repo_sql.get_order(session, order_id)).status


async def test_happy_path(session, order, principals):
    steps = [
        (S.PREPARING, "owner1"),
        (S.READY, "owner1"),
        (S.DELIVERING, "admin"),
        (S.DELIVERED, "admin"),
    ]
    for target, handle in steps:
        updated = await order_lifecycle.transition(
            session, order.id, target, principals[handle]
        )
        assert updated.status == target.value
    with pytest.raises(TerminalStateError):
        await order_lifecycle.transition(session, order.id, S.CANCELLED, principals["admin"])


async def test_estimated_time_is_saved(session, order, principals):
    updated = await order_lifecycle.transition(
        session, order.id, S.PREPARING, principals["owner1"], estimated_time=25
    )
    assert updated.estimated_time == 25


async def test_cross_tenant_update_is_forbidden(session, order, principals):
    with pytest.raises(Forbidden):
        await order_lifecycle.transition(session, order.id, S.PREPARING, principals["owner2"])
    assert await _status(session, order.id) == "RECEIVED"


@pytest.mark.parametrize("handle", ["viewer1", "customer"])
async def test_missing_role_or_permission(session, order, principals, handle):
    with pytest.raises(Forbidden):
        await order_lifecycle.transition(session, order.id, S.PREPARING, principals[handle])
    assert await _status(session, order.id) == "RECEIVED"


async def test_invalid_jump(session, order, principals):
    with pytest.raises(InvalidTransition) as exc:
        await order_lifecycle.transition(session, order.id, S.DELIVERED, principals["owner1"])
    assert exc.value.details == {"current": "RECEIVED", "requested": "DELIVERED"}
    assert await _status(session, order.id) == "RECEIVED"


async def test_ready_cancel_needs_admin(session, order, principals):
    owner = principals["owner1"]
    await order_lifecycle.transition(session, order.id, S.PREPARING, owner)
    await order_lifecycle.transition(session, order.id, S.READY, owner)
    with pytest.raises(InvalidTransition):
        await order_lifecycle.transition(session, order.id, S.CANCELLED, owner)
    updated = await order_lifecycle.transition(
        session, order.id, S.CANCELLED, principals["admin"]
    )
    assert updated.status == "CANCELLED"


async def test_unknown_order(session, users, principals):
    with pytest.raises(NotFound):
        await order_lifecycle.transition(session, "missing", S.PREPARING, principals["admin"])


async def test_stale_snapshot_conflicts(session, order, principals, monkeypatch):
    """Two writers read RECEIVED; only the first conditional update applies."""

    await order_lifecycle.transition(session, order.id, S.PREPARING, principals["owner1"])

    stale = SimpleNamespace(id=order.id, restaurant_id="R1", status="RECEIVED")
    real_get_order = orders_repo_sql.get_order
    calls = []

    async def get_stale(sess, order_id):
        calls.append(order_id)
        if len(calls) == 1:
            return stale
        return await real_get_order(sess, order_id)

    monkeypatch.setattr(orders_repo_sql, "get_order", get_stale)
    with pytest.raises(ConflictError) as exc:
        await order_lifecycle.transition(session, order.id, S.CANCELLED, principals["admin"])
    assert exc.value.status_code == 409

    monkeypatch.setattr(orders_repo_sql, "get_order", real_get_order)
    assert await _status(session, order.id) == "PREPARING"


async def test_event_published(session, order, principals):
    queue = event_bus.subscribe(ORDER_STATUS_CHANGED)
    try:
        await order_lifecycle.transition(session, order.id, S.PREPARING, principals["admin"])
        event = queue.get_nowait()
    finally:
        event_bus.unsubscribe(ORDER_STATUS_CHANGED, queue)
    assert event["order_id"] == order.id
    assert (event["from"], event["to"]) == ("RECEIVED", "PREPARING")
    assert event["by"] == "U-admin"


async def test_rejected_transition_publishes_nothing(session, order, principals):
    queue = event_bus.subscribe(ORDER_STATUS_CHANGED)
    try:
        with pytest.raises(InvalidTransition):
            await order_lifecycle.transition(session, order.id, S.READY, principals["admin"])
    finally:
        event_bus.unsubscribe(ORDER_STATUS_CHANGED, queue)
    assert queue.empty()


async def test_concurrent_transitions_one_wins(session, order, principals, monkeypatch):
    """Two sessions both read RECEIVED; only one conditional update applies."""

    real_update = orders_repo_sql.update_status_if
    arrived = []
    both_read = asyncio.Event()

    async def update_after_both_read(*args, **kwargs):
        arrived.append(args[3])
        if len(arrived) == 2:
            both_read.set()
        await both_read.wait()
        return await real_update(*args, **kwargs)

    monkeypatch.setattr(orders_repo_sql, "update_status_if", update_after_both_read)
    sessionmaker = app_db.get_sessionmaker()

    async def attempt(target, handle):
        async with sessionmaker() as own_session:
            try:
                await order_lifecycle.transition(
                    own_session, order.id, target, principals[handle]
                )
            except ConflictError:
                return "CONFLICT"
            return "OK"

    results = await asyncio.gather(
        attempt(S.PREPARING, "owner1"), attempt(S.CANCELLED, "admin")
    )

    assert sorted(results) == ["CONFLICT", "OK"]
    winner = S.PREPARING if results[0] == "OK" else S.CANCELLED
    assert await _status(session, order.id) == winner.value


async def test_notes_saved_with_transition(session, order, principals):
    updated = await order_lifecycle.transition(
        session, order.id, S.PREPARING, principals["owner1"], notes="Extra sauce"
    )
    assert updated.notes == "Extra sauce"
