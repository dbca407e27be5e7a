# storefront/services/order_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import InvalidTransitionError, NotFoundError
from storefront.domain.order_status import OrderStatus, assert_transition
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SHIPPING_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "mobile_no",
    "address",
    "city",
    "state",
    "pincode",
    "payment_type",
)


def order_view(order: OrderModel) -> dict:
    status = OrderStatus.from_code(order.status)
    return {
        "id": order.id,
        "reference": order.reference,
        "user_id": order.user_id,
        "status": status.code,
        "status_label": status.label,
        "items": [
            {
                "product_id": item.product_id,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
            }
            for item in order.items
        ],
        "shipping": {name: getattr(order, name) for name in SHIPPING_FIELDS},
        "subtotal": order.subtotal,
        "shipping_fee": order.shipping_fee,
        "handling_fee": order.handling_fee,
        "total": order.total,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


class OrderService:
    """
    Serwis odpowiedzialny za cykl życia zamówień.
    Zmiana statusu tylko przez tabelę przejść w OrderStatus.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.notification_service = notification_service or NotificationService()

    def update_status(self, order_id: int, status_code: int):
        """
        Use Case: Zmiana statusu zamówienia.

        1. Sprawdza, czy zamówienie istnieje
        2. Waliduje kod i przejście z bieżącego statusu
        3. Zapisuje nowy status
        4. Wysyła powiadomienie (async, best-effort)
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Zamówienie", order_id)

        current = OrderStatus.from_code(order.status)
        target = OrderStatus.from_code(status_code)
        assert_transition(current, target)

        # optimistic locking na statusie: zapis tylko jesli nikt go nie zmienil od sprawdzenia
        reference = order.reference
        rowcount = self.repo.update_order_status(order.id, current.code, target.code)

        if rowcount == 0:
            self.repo.rollback()
            raise InvalidTransitionError(
                f"Status zamówienia {reference} zmienił się w trakcie operacji, "
                f"nie można wykonać {current.label} -> {target.label}"
            )

        self.repo.commit()
        order = self.repo.refresh(order)

        logger.info(f"Order {order.reference}: {current.label} -> {target.label}")

        # status jest juz zapisany, blad powiadomienia niczego nie cofa
        self.notification_service.notify(order, target)

        return order_view(order)

    def get_order(self, order_id: int, user_id: int):
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Zamówienie", order_id)

        if order.user_id != user_id:
            raise PermissionError("Brak dostępu do zamówienia")

        return order_view(order)

    def get_order_by_reference(self, reference: str):
        order = self.repo.get_by_reference(reference)

        if not order:
            raise NotFoundError("Zamówienie", reference)

        return order_view(order)

    def list_orders(self, user_id: int):
        return [order_view(order) for order in self.repo.list_for_user(user_id)]

    def list_all_orders(self):
        """
        Use Case: Wszystkie zamówienia (panel admina), najnowsze pierwsze.
        """
        return [order_view(order) for order in self.repo.list_all()]

    @staticmethod
    def list_statuses():
        return [
            {"code": status.code, "label": status.label, "terminal": status.is_terminal}
            for status in OrderStatus
        ]
