"""Pytest fixtures for storefront tests."""

import os
import threading
from collections import defaultdict
from contextlib import contextmanager
from decimal import Decimal

# modul bazy tworzy engine przy imporcie - w testach bez postgresa
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data.database import init_db
from storefront.domain.errors import CartBusyError, NotFoundError
from storefront.domain.product import Product
from storefront.domain.schemas import ShippingDetails
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService


class InMemoryLockService:
    """Lock per user na threading.Lock zamiast redisa."""

    def __init__(self):
        self.locks = defaultdict(threading.Lock)
        self.acquired = []

    @contextmanager
    def user_lock(self, user_id: int):
        lock = self.locks[user_id]
        if not lock.acquire(timeout=5):
            raise CartBusyError(user_id)
        self.acquired.append(user_id)
        try:
            yield
        finally:
            lock.release()


class FakeProductClient:
    def __init__(self, products):
        self.products = {p.id: p for p in products}

    def get_product(self, product_id: int) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise NotFoundError("Produkt", product_id)
        return product

    @staticmethod
    def is_active(product: Product) -> bool:
        return product.active

    def reprice(self, product_id: int, price: str, discount_percent: int = 0):
        old = self.products[product_id]
        self.products[product_id] = old.model_copy(
            update={"price": Decimal(price), "discount_percent": discount_percent}
        )


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def notify(self, order, status) -> bool:
        self.calls.append((order.reference, status))
        return True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def file_session_factory(tmp_path):
    # osobne polaczenie na sesje, do testow z watkami
    engine = create_engine(
        f"sqlite:///{tmp_path / 'storefront.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def products():
    return FakeProductClient(
        [
            Product(id=1, title="Keyboard", price=Decimal("100.00")),
            Product(id=2, title="Mouse", price=Decimal("50.00")),
            Product(id=3, title="Monitor", price=Decimal("200.00"), discount_percent=25),
            Product(id=4, title="Webcam", price=Decimal("80.00"), active=False),
        ]
    )


@pytest.fixture
def lock_service():
    return InMemoryLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def cart_service(db, products, lock_service):
    return CartService(db, product_client=products, lock_service=lock_service)


@pytest.fixture
def checkout_service(db, lock_service):
    return CheckoutService(db, lock_service=lock_service)


@pytest.fixture
def order_service(db, notifier):
    return OrderService(db, notification_service=notifier)


@pytest.fixture
def shipping():
    return ShippingDetails(
        first_name="Jan",
        last_name="Kowalski",
        email="jan@example.com",
        mobile_no="600100200",
        address="ul. Prosta 1",
        city="Warszawa",
        state="mazowieckie",
        pincode="00-001",
        payment_type="COD",
    )


@pytest.fixture
def placed_order(cart_service, checkout_service, shipping):
    cart_service.add_to_cart(7, 1)
    cart_service.add_to_cart(7, 2)
    return checkout_service.place_order(7, shipping)
