from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session
from storefront.data.models.cart_line import CartLineModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.repos.cart_repo import CartRepo
from storefront.services.product_client import ProductClient
from storefront.services.lock_service import LockService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_DELTAS = {"increment": 1, "decrement": -1}


def line_view(line: CartLineModel) -> Dict[str, Any]:
    return {
        "id": line.id,
        "user_id": line.user_id,
        "product_id": line.product_id,
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "subtotal": line.unit_price * line.quantity,
    }


def cart_total(lines) -> Decimal:
    return sum((line.unit_price * line.quantity for line in lines), Decimal("0.00"))


def clear_cart(repo: CartRepo, user_id: int) -> int:
    """
    Usuwa wszystkie pozycje bez commita, wolajacy (checkout) trzyma lock
    i commituje razem z zamowieniem.
    """
    removed = repo.delete_lines(user_id)
    logger.info(f"Wyczyszczono koszyk uzytkownika {user_id} ({removed} pozycji)")
    return removed


class CartService:
    """
    Prosta implementacja cqrs dla koszyka uzytkownika
    commands (add, update quantity, remove) modyfikuja stan pod lockiem usera
    query (list, count) tylko odczyt, total zawsze liczony od nowa ze wszystkich pozycji
    """

    def __init__(
        self,
        db: Session,
        product_client: ProductClient,
        lock_service: LockService,
    ):
        self.repo = CartRepo(db)
        self.product_client = product_client
        self.lock_service = lock_service

    #query - odczyt
    def list_cart(self, user_id: int) -> Dict[str, Any]:
        lines = self.repo.get_lines(user_id)

        #dict przyksztalcany w jsona
        return {
            "user_id": user_id,
            "items": [line_view(line) for line in lines],
            "total": cart_total(lines),
        }

    def cart_count(self, user_id: int) -> int:
        return len(self.repo.get_lines(user_id))

    #commands
    def add_to_cart(self, user_id: int, product_id: int) -> Dict[str, Any]:
        logger.info(f"Pobieranie danych produktu {product_id} z product-service")
        product = self.product_client.get_product(product_id)

        if not self.product_client.is_active(product):
            raise NotFoundError("Produkt", product_id)

        with self.lock_service.user_lock(user_id):
            try:
                existing = self.repo.get_line_for_product(user_id, product_id)

                if existing:
                    logger.info(
                        f"Produkt {product_id} juz jest w koszyku uzytkownika {user_id}, "
                        f"zwiekszam ilosc z {existing.quantity}"
                    )
                    # cena zostaje z pierwszego dodania (snapshot)
                    self.repo.change_quantity(existing.id, 1)
                    line = existing
                else:
                    logger.info(f"Dodaje nowy produkt {product_id} do koszyka uzytkownika {user_id}")
                    line = self.repo.add_line(
                        CartLineModel(
                            user_id=user_id,
                            product_id=product_id,
                            quantity=1,
                            unit_price=product.discount_price,
                        )
                    )

                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

            return line_view(self.repo.refresh(line))

    def update_quantity(self, line_id: int, operation: str) -> Dict[str, Any]:
        if operation not in _DELTAS:
            raise ValidationError(f"Nieznana operacja: {operation}", fields=["operation"])

        line = self.repo.get_line(line_id)
        if not line:
            raise NotFoundError("Pozycja koszyka", line_id)

        user_id = line.user_id

        with self.lock_service.user_lock(user_id):
            try:
                # pozycja mogla zniknac zanim dostalismy lock
                if not self.repo.change_quantity(line_id, _DELTAS[operation]):
                    raise NotFoundError("Pozycja koszyka", line_id)

                line = self.repo.refresh(line)
                if line.quantity < 1:
                    logger.info(f"Ilosc pozycji {line_id} spadla do 0, usuwam ja z koszyka")
                    self.repo.delete_line(line_id)

                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(f"Pozycja {line_id} koszyka uzytkownika {user_id}: {operation}")
        return self.list_cart(user_id)

    def remove_line(self, line_id: int, user_id: int) -> Dict[str, Any]:
        line = self.repo.get_line(line_id)

        if not line:
            raise NotFoundError("Pozycja koszyka", line_id)

        if line.user_id != user_id:
            raise PermissionError("Brak dostepu do koszyka")

        with self.lock_service.user_lock(user_id):
            try:
                self.repo.delete_line(line_id)
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(f"Pozycja {line_id} usunieta z koszyka uzytkownika {user_id}")
        return self.list_cart(user_id)

