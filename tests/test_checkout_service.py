"""Tests for converting a cart into an order."""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from storefront.data.models.order import OrderModel
from storefront.domain.errors import CheckoutError, EmptyCartError, ValidationError
from storefront.domain.order_status import OrderStatus
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService, clear_cart
from storefront.services.checkout_service import CheckoutService


def _boom(*args, **kwargs):
    raise OperationalError("stmt", {}, Exception("database is gone"))


class TestPlaceOrder:
    def test_empty_cart(self, checkout_service, shipping):
        with pytest.raises(EmptyCartError):
            checkout_service.place_order(1, shipping)

    def test_totals_and_cleared_cart(self, cart_service, checkout_service, shipping):
        cart_service.add_to_cart(1, 1)
        cart_service.add_to_cart(1, 1)
        cart_service.add_to_cart(1, 2)

        order = checkout_service.place_order(1, shipping)

        assert order["subtotal"] == Decimal("250.00")
        assert order["shipping_fee"] == Decimal("250")
        assert order["handling_fee"] == Decimal("100")
        assert order["total"] == Decimal("600.00")
        assert order["status"] == OrderStatus.PLACED.code
        assert order["status_label"] == "Placed"
        assert cart_service.list_cart(1)["items"] == []

    def test_items_are_frozen_copies(self, cart_service, checkout_service, shipping, products):
        cart_service.add_to_cart(1, 3)
        cart_service.add_to_cart(1, 3)

        order = checkout_service.place_order(1, shipping)
        products.reprice(3, "999.00")

        assert order["items"] == [
            {"product_id": 3, "quantity": 2, "unit_price": Decimal("150.00")}
        ]

    def test_shipping_fields_copied(self, placed_order):
        assert placed_order["shipping"]["city"] == "Warszawa"
        assert placed_order["shipping"]["payment_type"] == "COD"

    def test_references_are_unique(self, cart_service, checkout_service, shipping):
        refs = set()
        for _ in range(3):
            cart_service.add_to_cart(1, 1)
            refs.add(checkout_service.place_order(1, shipping)["reference"])
        assert len(refs) == 3

    def test_missing_fields_listed(self, cart_service, checkout_service, shipping):
        cart_service.add_to_cart(1, 1)
        incomplete = shipping.model_copy(update={"email": "", "pincode": "   "})

        with pytest.raises(ValidationError) as exc:
            checkout_service.place_order(1, incomplete)

        assert exc.value.fields == ["email", "pincode"]
        assert len(cart_service.list_cart(1)["items"]) == 1

    def test_configured_fees(self, db, lock_service, cart_service, shipping):
        svc = CheckoutService(db, lock_service=lock_service, shipping_fee=Decimal("0"), handling_fee=Decimal("10"))
        cart_service.add_to_cart(1, 2)

        order = svc.place_order(1, shipping)

        assert order["total"] == Decimal("60.00")

    def test_runs_under_user_lock(self, cart_service, checkout_service, shipping, lock_service):
        cart_service.add_to_cart(5, 1)
        lock_service.acquired.clear()

        checkout_service.place_order(5, shipping)

        assert lock_service.acquired == [5]


class TestCheckoutAtomicity:
    def test_order_insert_failure_keeps_cart(self, db, cart_service, checkout_service, shipping, monkeypatch):
        cart_service.add_to_cart(1, 1)
        monkeypatch.setattr(checkout_service.order_repo, "add_order", _boom)

        with pytest.raises(CheckoutError) as exc:
            checkout_service.place_order(1, shipping)

        assert isinstance(exc.value.__cause__, OperationalError)
        assert db.query(OrderModel).count() == 0
        assert len(cart_service.list_cart(1)["items"]) == 1

    def test_cart_clear_failure_rolls_back_order(self, db, cart_service, checkout_service, shipping, monkeypatch, caplog):
        cart_service.add_to_cart(1, 1)
        monkeypatch.setattr(CartRepo, "delete_lines", _boom)

        with pytest.raises(CheckoutError):
            checkout_service.place_order(1, shipping)

        assert db.query(OrderModel).count() == 0
        assert len(cart_service.list_cart(1)["items"]) == 1
        assert any("czyszczenie koszyka" in r.getMessage() for r in caplog.records)


class TestConcurrentCheckout:
    def test_same_cart_becomes_one_order(self, file_session_factory, products, lock_service, shipping):
        setup = file_session_factory()
        cart = CartService(setup, product_client=products, lock_service=lock_service)
        cart.add_to_cart(1, 1)
        cart.add_to_cart(1, 2)
        setup.close()

        def checkout():
            session = file_session_factory()
            try:
                return CheckoutService(session, lock_service=lock_service).place_order(1, shipping)
            except EmptyCartError as e:
                return e
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(lambda _: checkout(), range(2)))

        orders = [r for r in results if isinstance(r, dict)]
        assert len(orders) == 1
        assert sum(isinstance(r, EmptyCartError) for r in results) == 1

        check = file_session_factory()
        try:
            assert check.query(OrderModel).count() == 1
            assert CartRepo(check).get_lines(1) == []
        finally:
            check.close()


class TestClearCart:
    def test_clears_only_owner_lines_without_commit(self, db, cart_service):
        cart_service.add_to_cart(1, 1)
        cart_service.add_to_cart(1, 2)
        cart_service.add_to_cart(2, 1)
        repo = CartRepo(db)

        assert clear_cart(repo, 1) == 2
        assert repo.get_lines(1) == []

        repo.rollback()
        assert len(repo.get_lines(1)) == 2
        assert len(repo.get_lines(2)) == 1
