# storefront/domain/order_status.py
from enum import Enum

from storefront.domain.errors import InvalidTransitionError


class OrderStatus(Enum):
    PLACED = (1, "Placed")
    CONFIRMED = (2, "Confirmed")
    SHIPPED = (3, "Shipped")
    DELIVERED = (4, "Delivered")
    CANCELLED = (5, "Cancelled")

    def __init__(self, code: int, label: str):
        self.code = code
        self.label = label

    @classmethod
    def from_code(cls, code: int) -> "OrderStatus":
        for status in cls:
            if status.code == code:
                return status
        raise InvalidTransitionError(f"Nieznany kod statusu: {code}")

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return target in _TRANSITIONS[self]


# do przodu po kolei + anulowanie z kazdego nieterminalnego stanu
_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def assert_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not current.can_transition_to(target):
        raise InvalidTransitionError(
            f"Niedozwolona zmiana statusu: {current.label} -> {target.label}"
        )
