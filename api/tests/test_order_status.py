"""Status graph properties: closure, terminal states and role narrowing."""

import itertools
import pathlib
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from api.app.domain import (  # noqa: E402
    TERMINAL_STATUSES,
    TRANSITIONS,
    InvalidTransition,
    OrderStatus,
    Role,
    TerminalStateError,
    allowed_targets,
    can_transition,
    check_transition,
    is_terminal,
)

S = OrderStatus


def test_every_status_has_an_entry():
    assert set(TRANSITIONS) == set(OrderStatus)


def test_graph_matches_lifecycle():
    assert TRANSITIONS[S.RECEIVED] == {S.PREPARING, S.CANCELLED}
    assert TRANSITIONS[S.PREPARING] == {S.READY, S.CANCELLED}
    assert TRANSITIONS[S.READY] == {S.DELIVERING, S.DELIVERED, S.CANCELLED}
    assert TRANSITIONS[S.DELIVERING] == {S.DELIVERED}
    assert TRANSITIONS[S.DELIVERED] == frozenset()
    assert TRANSITIONS[S.CANCELLED] == frozenset()


def test_wire_values_are_stable():
    assert [s.value for s in OrderStatus] == [
        "RECEIVED",
        "PREPARING",
        "READY",
        "DELIVERING",
        "DELIVERED",
        "CANCELLED",
    ]


@pytest.mark.parametrize(
    "current,requested", list(itertools.product(OrderStatus, OrderStatus))
)
@pytest.mark.parametrize("role", [None, Role.ADMIN, Role.RESTAURATOR])
def test_check_transition_is_closed(current, requested, role):
    """Either the edge is legal or one of the two transition errors is raised."""

    if can_transition(current, requested, role):
        check_transition(current, requested, role)
        assert not is_terminal(current)
    else:
        with pytest.raises((InvalidTransition, TerminalStateError)):
            check_transition(current, requested, role)


@pytest.mark.parametrize("terminal", sorted(TERMINAL_STATUSES))
@pytest.mark.parametrize("requested", list(OrderStatus))
def test_terminal_states_reject_everything(terminal, requested):
    with pytest.raises(TerminalStateError) as exc:
        check_transition(terminal, requested, Role.ADMIN)
    assert exc.value.details == {"current": terminal.value}


def test_same_status_is_not_a_noop():
    with pytest.raises(InvalidTransition):
        check_transition(S.PREPARING, S.PREPARING)


def test_invalid_jump_echoes_statuses():
    with pytest.raises(InvalidTransition) as exc:
        check_transition(S.RECEIVED, S.DELIVERED, Role.ADMIN)
    assert exc.value.details == {"current": "RECEIVED", "requested": "DELIVERED"}
    assert exc.value.status_code == 400


def test_cancel_from_ready_is_admin_only():
    assert S.CANCELLED in allowed_targets(S.READY, Role.ADMIN)
    assert S.CANCELLED not in allowed_targets(S.READY, Role.RESTAURATOR)
    with pytest.raises(InvalidTransition):
        check_transition(S.READY, S.CANCELLED, Role.RESTAURATOR)


def test_restaurant_can_cancel_early_orders():
    for status in (S.RECEIVED, S.PREPARING):
        assert can_transition(status, S.CANCELLED, Role.RESTAURATOR)


def test_delivering_cannot_be_cancelled():
    assert not can_transition(S.DELIVERING, S.CANCELLED, Role.ADMIN)
