import os

# configure before anything from storefront is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOCK_BACKEND"] = "local"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["TAX_RATE"] = "0.13"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.deps import get_lock
from storefront.data.database import Base, get_db
from storefront.data.models import AddressModel, PaymentCardModel, ProductModel
from storefront.domain.enums import AddressType
from storefront.domain.schemas import UserCreate
from storefront.main import create_app
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutService
from storefront.services.lock_service import LocalLockService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService


ADDRESS = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "address": "12 Analytical St",
    "unit": None,
    "city": "Toronto",
    "province": "Ontario",
    "country": "Canada",
    "postal_code": "M5V2T6",
    "phone_number": "4165550100",
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def lock():
    return LocalLockService(wait=0.05)


class FakeNotifications:
    def __init__(self):
        self.sent = []
        self.summaries = []

    def send_order_notification(self, user_id, order_id, **summary):
        self.sent.append((user_id, order_id))
        self.summaries.append(summary)


@pytest.fixture
def notifications():
    return FakeNotifications()


@pytest.fixture
def cart_service(db, lock):
    return CartService(db=db, lock_service=lock)


@pytest.fixture
def checkout_service(db, lock):
    return CheckoutService(db=db, lock_service=lock)


@pytest.fixture
def order_service(db, lock, notifications):
    return OrderService(db=db, lock_service=lock, notification_service=notifications)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(email=None):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        return UserService(db).create_user(
            UserCreate(first_name="Test", last_name="User", email=email)
        )

    return _make


@pytest.fixture
def make_product(db):
    def _make(price="100.00", discount_percent=0, inventory=10, name="Widget", category_code="computers",
              discount_type=None):
        product = ProductModel(
            name=name,
            description="",
            category_code=category_code,
            price=Decimal(price),
            discount_type=discount_type or ("normal" if discount_percent else "none"),
            discount_percent=discount_percent,
            inventory=inventory,
            total_sold=0,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_address(db):
    def _make(user_id, address_type=AddressType.SHIPPING_PRIMARY, **overrides):
        fields = {**ADDRESS, **overrides}
        address = AddressModel(user_id=user_id, address_type=address_type.value, **fields)
        db.add(address)
        db.commit()
        return address

    return _make


@pytest.fixture
def make_card(db):
    def _make(user_id, card_number="4111111111111111"):
        card = PaymentCardModel(
            user_id=user_id,
            card_number=card_number,
            first_name="Ada",
            last_name="Lovelace",
            expiration_month=12,
            expiration_year=2030,
            payment_card_type="visa",
        )
        db.add(card)
        db.commit()
        return card

    return _make


@pytest.fixture
def client(session_factory):
    app = create_app(with_lifespan=False)
    lock = LocalLockService(wait=0.5)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock] = lambda: lock

    with TestClient(app) as c:
        yield c
