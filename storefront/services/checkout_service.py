# storefront/services/checkout_service.py
import uuid
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import CheckoutError, EmptyCartError, ValidationError
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import ShippingDetails
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_service import cart_total, clear_cart
from storefront.services.lock_service import LockService
from storefront.services.order_service import SHIPPING_FIELDS, order_view
from storefront.utils.settings import SHIPPING_FEE, HANDLING_FEE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = SHIPPING_FIELDS


def missing_fields(shipping: ShippingDetails) -> list[str]:
    return [
        name for name in REQUIRED_FIELDS
        if not (getattr(shipping, name) or "").strip()
    ]


class CheckoutService:
    """
    Zamiana koszyka w zamowienie.

    Zamowienie i czyszczenie koszyka ida w jednej transakcji pod lockiem
    uzytkownika: albo jest zamowienie i pusty koszyk, albo nic sie nie zmienia.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        shipping_fee: Decimal = SHIPPING_FEE,
        handling_fee: Decimal = HANDLING_FEE,
    ):
        self.db = db
        self.cart_repo = CartRepo(db)
        self.order_repo = OrderRepo(db)
        self.lock_service = lock_service
        self.shipping_fee = Decimal(shipping_fee)
        self.handling_fee = Decimal(handling_fee)

    def place_order(self, user_id: int, shipping: ShippingDetails):
        with self.lock_service.user_lock(user_id):
            lines = self.cart_repo.get_lines(user_id)
            if not lines:
                raise EmptyCartError(user_id)

            missing = missing_fields(shipping)
            if missing:
                raise ValidationError(
                    f"Brakujace pola: {', '.join(missing)}",
                    fields=missing,
                )

            subtotal = cart_total(lines)
            total = subtotal + self.shipping_fee + self.handling_fee
            reference = uuid.uuid4().hex

            order = OrderModel(
                reference=reference,
                user_id=user_id,
                status=OrderStatus.PLACED.code,
                subtotal=subtotal,
                shipping_fee=self.shipping_fee,
                handling_fee=self.handling_fee,
                total=total,
                items=[
                    # zamrozona kopia pozycji, nie czytamy juz katalogu
                    OrderItemModel(
                        product_id=line.product_id,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                    )
                    for line in lines
                ],
                **{name: getattr(shipping, name).strip() for name in REQUIRED_FIELDS},
            )

            try:
                self.order_repo.add_order(order)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    f"Zapis zamowienia {reference} uzytkownika {user_id} nieudany, koszyk bez zmian: {e}"
                )
                raise CheckoutError() from e

            try:
                clear_cart(self.cart_repo, user_id)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    f"Zamowienie {reference} uzytkownika {user_id} zapisane, ale czyszczenie koszyka "
                    f"({len(lines)} pozycji) nieudane - wycofano cala transakcje: {e}"
                )
                raise CheckoutError() from e

            self.db.refresh(order)

        logger.info(
            f"Zamowienie {order.reference} utworzone dla uzytkownika {user_id}, total {order.total}"
        )
        return order_view(order)
