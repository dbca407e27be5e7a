"""Tests for the order status catalogue and transition table."""

import pytest

from storefront.domain.errors import InvalidTransitionError
from storefront.domain.order_status import OrderStatus, assert_transition


def test_codes_are_stable():
    assert [(s.code, s.label) for s in OrderStatus] == [
        (1, "Placed"),
        (2, "Confirmed"),
        (3, "Shipped"),
        (4, "Delivered"),
        (5, "Cancelled"),
    ]


def test_from_code():
    assert OrderStatus.from_code(3) is OrderStatus.SHIPPED


@pytest.mark.parametrize("code", [0, 6, -1])
def test_from_unknown_code(code):
    with pytest.raises(InvalidTransitionError):
        OrderStatus.from_code(code)


def test_terminal_states():
    assert {s for s in OrderStatus if s.is_terminal} == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


@pytest.mark.parametrize(
    "current, target",
    [
        (OrderStatus.PLACED, OrderStatus.CONFIRMED),
        (OrderStatus.CONFIRMED, OrderStatus.SHIPPED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
        (OrderStatus.PLACED, OrderStatus.CANCELLED),
        (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    ],
)
def test_allowed(current, target):
    assert_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        (OrderStatus.PLACED, OrderStatus.SHIPPED),
        (OrderStatus.PLACED, OrderStatus.DELIVERED),
        (OrderStatus.CONFIRMED, OrderStatus.PLACED),
        (OrderStatus.SHIPPED, OrderStatus.SHIPPED),
        (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.PLACED),
    ],
)
def test_rejected(current, target):
    with pytest.raises(InvalidTransitionError):
        assert_transition(current, target)
