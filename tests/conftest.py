import os

# przed importem aplikacji - baza w pamieci, celery bez brokera
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["AUTH_DEV_MODE"] = "false"

from dataclasses import replace
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import storefront.data.models  # noqa: F401
from storefront.api import deps
from storefront.data.database import Base, SessionLocal, engine, get_db
from storefront.domain.errors import NotFound, Unauthenticated
from storefront.main import app
from storefront.services.cart_service import CartService
from storefront.services.catalog_client import CatalogItem
from storefront.services.checkout_service import CheckoutService
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import MockPaymentGateway
from storefront.services.payment_service import PaymentService

BUYER = "buyer-1"
OTHER_BUYER = "buyer-2"

SHIPPING = {
    "full_name": "Ada Lovelace",
    "email": "ada@example.com",
    "phone": "+44 20 7946 0000",
    "address": "12 St James's Square",
    "city": "London",
    "state": "Greater London",
    "zip": "SW1Y 4JH",
    "country": "UK",
}

CARD = {
    "card_number": "4242 4242 4242 4242",
    "card_name": "Ada Lovelace",
    "expiry_date": "12/29",
    "cvv": "123",
}

DECLINED_CARD = dict(CARD, card_number="4000 0000 0000 0002")


class FakeCatalog:
    def __init__(self):
        self.items = {
            "A": CatalogItem(item_id="A", title="Stoneware Mug", price=Decimal("10"), owner_id="artisan-1"),
            "B": CatalogItem(item_id="B", title="Linen Napkin", price=Decimal("5"), owner_id="artisan-2"),
            "X": CatalogItem(item_id="X", title="Walnut Board", price=Decimal("7.25"), owner_id="artisan-1"),
        }
        self.calls = []

    def resolve(self, item_id):
        self.calls.append(item_id)
        item = self.items.get(item_id)
        if item is None:
            raise NotFound(f"Item {item_id} not found")
        return item

    def set_price(self, item_id, price):
        self.items[item_id] = replace(self.items[item_id], price=Decimal(price))


class InMemoryLockService(LockService):
    def __init__(self):
        self.locks = {}

    def acquire(self, key, owner, ttl):
        if key in self.locks:
            return False
        self.locks[key] = owner
        return True

    def release(self, key, owner):
        if self.locks.get(key) == owner:
            del self.locks[key]
            return True
        return False


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, buyer_id, order_id):
        self.sent.append((buyer_id, order_id))


class TokenAuthClient:
    """Token jest po prostu id kupujacego."""

    def resolve_buyer(self, token):
        if not token:
            raise Unauthenticated()
        return token


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def locks():
    return InMemoryLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def cart_service(db, catalog):
    return CartService(db=db, catalog_client=catalog)


@pytest.fixture
def order_service(db):
    return OrderService(db)


@pytest.fixture
def payment_service(db, locks, notifier):
    return PaymentService(
        db=db,
        lock_service=locks,
        gateway=MockPaymentGateway(timeout=5),
        notification_service=notifier,
    )


@pytest.fixture
def checkout_service(db, cart_service, order_service, payment_service, locks):
    return CheckoutService(
        db=db,
        cart_service=cart_service,
        order_service=order_service,
        payment_service=payment_service,
        lock_service=locks,
    )


@pytest.fixture
def client(db, catalog, locks, notifier):
    def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[deps.get_catalog_client] = lambda: catalog
    app.dependency_overrides[deps.get_lock_service] = lambda: locks
    app.dependency_overrides[deps.get_notification_service] = lambda: notifier
    app.dependency_overrides[deps.get_auth_client] = TokenAuthClient
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth(buyer_id=BUYER):
    return {"Authorization": f"Bearer {buyer_id}"}
