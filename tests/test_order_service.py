"""Tests for the order commit transaction."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from storefront.data.models import (
    AddressModel,
    CartItemModel,
    CartModel,
    CheckoutSessionModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
)
from storefront.domain.enums import AddressType
from storefront.domain.errors import (
    AddressNotFound,
    CheckoutIncomplete,
    CheckoutNotFound,
    InsufficientInventory,
    OrderNotFound,
    PersistenceError,
)
from storefront.services.order_service import OrderService
from tests.conftest import ADDRESS


@pytest.fixture
def ready(db, cart_service, checkout_service, make_user, make_product, make_address, make_card):
    """A user with two products in the cart and a checkout at confirmation."""
    user = make_user()
    laptop = make_product(price="100.00", discount_percent=10, inventory=5)
    cable = make_product(price="7.49", inventory=10)
    cart_service.add_product(user.id, laptop.id)
    cart_service.add_product(user.id, laptop.id)
    cart_service.add_product(user.id, cable.id)

    primary = make_address(user.id, AddressType.SHIPPING_PRIMARY)
    billing = make_address(user.id, AddressType.BILLING, city="Ottawa")
    make_card(user.id)

    checkout_service.start(user.id)
    checkout_service.set_shipping_address(user.id, primary.id)
    checkout_service.set_billing_address(user.id, billing.id)
    checkout_service.set_payment_card(user.id)
    checkout_service.set_stage(user.id, "confirmation")

    return {"user": user, "laptop_id": laptop.id, "cable_id": cable.id, "shipping": primary, "billing": billing}


def _product(db, product_id):
    db.expire_all()
    return db.get(ProductModel, product_id)


class TestCommitOrder:
    def test_creates_order_snapshot(self, order_service, ready):
        user = ready["user"]

        order = order_service.commit_order(user.id)

        assert order["num_items"] == 3
        assert order["subtotal"] == Decimal("187.49")
        assert order["taxes"] == Decimal("24.37")
        assert order["total"] == Decimal("211.86")
        assert order["shipping_address"]["city"] == "Toronto"
        assert order["billing_address"]["city"] == "Ottawa"
        assert order["payment_card_last4"] == "1111"
        assert sorted((i["product_id"], i["quantity"]) for i in order["items"]) == sorted(
            [(ready["laptop_id"], 2), (ready["cable_id"], 1)]
        )

    def test_updates_inventory(self, db, order_service, ready):
        order_service.commit_order(ready["user"].id)

        laptop = _product(db, ready["laptop_id"])
        assert laptop.inventory == 3
        assert laptop.total_sold == 2
        assert _product(db, ready["cable_id"]).inventory == 9

    def test_empties_cart_but_keeps_it(self, db, order_service, cart_service, ready):
        user = ready["user"]
        order_service.commit_order(user.id)

        cart = cart_service.get_cart(user.id)
        assert cart["num_items"] == 0
        assert cart["subtotal"] == Decimal("0.00")
        assert cart["taxes"] == Decimal("0.00")
        assert cart["total"] == Decimal("0.00")
        assert cart["items"] == []
        assert db.query(CartModel).filter_by(user_id=user.id).count() == 1
        assert db.query(CartItemModel).count() == 0

    def test_deletes_checkout_session(self, db, order_service, ready):
        order_service.commit_order(ready["user"].id)
        assert db.query(CheckoutSessionModel).count() == 0

    def test_sends_notification(self, order_service, notifications, ready):
        order = order_service.commit_order(ready["user"].id)
        assert notifications.sent == [(ready["user"].id, order["id"])]

    def test_broker_outage_does_not_fail_placed_order(self, db, lock, ready):
        class DownNotifications:
            def send_order_notification(self, user_id, order_id, **summary):
                raise ConnectionError("broker unreachable")

        service = OrderService(db=db, lock_service=lock, notification_service=DownNotifications())

        order = service.commit_order(ready["user"].id)

        assert order["total"] == Decimal("211.86")
        assert db.query(OrderModel).count() == 1
        assert db.query(CheckoutSessionModel).count() == 0

    def test_snapshot_survives_address_edit(self, db, order_service, ready):
        user = ready["user"]
        order = order_service.commit_order(user.id)

        shipping = db.get(AddressModel, ready["shipping"].id)
        shipping.city = "Vancouver"
        db.commit()

        assert order_service.get_order(order["id"], user.id)["shipping_address"]["city"] == "Toronto"

    def test_alternate_shipping_address_is_single_use(self, db, checkout_service, order_service, ready):
        user = ready["user"]
        alternate = checkout_service.create_alternate_address(user.id, dict(ADDRESS, city="Halifax"))
        checkout_service.set_shipping_address(user.id, alternate.id)
        checkout_service.set_stage(user.id, "confirmation")

        order = order_service.commit_order(user.id)

        assert order["shipping_address"]["city"] == "Halifax"
        assert db.query(AddressModel).filter_by(
            user_id=user.id, address_type=AddressType.SHIPPING_ALTERNATE.value
        ).count() == 0

    def test_primary_shipping_address_kept(self, db, order_service, ready):
        order_service.commit_order(ready["user"].id)
        assert db.get(AddressModel, ready["shipping"].id) is not None


class TestCommitPreconditions:
    def test_no_session(self, order_service, make_user):
        user = make_user()
        with pytest.raises(CheckoutNotFound):
            order_service.commit_order(user.id)

    def test_not_at_confirmation(self, checkout_service, order_service, ready):
        checkout_service.set_stage(ready["user"].id, "review")
        with pytest.raises(CheckoutIncomplete):
            order_service.commit_order(ready["user"].id)

    def test_missing_payment_card(self, db, order_service, ready):
        checkout = db.query(CheckoutSessionModel).filter_by(user_id=ready["user"].id).one()
        checkout.payment_card_id = None
        db.commit()
        with pytest.raises(CheckoutIncomplete):
            order_service.commit_order(ready["user"].id)

    def test_vanished_billing_address(self, db, order_service, ready):
        # FK enforcement is off in SQLite, so the session keeps a dangling id
        db.delete(db.get(AddressModel, ready["billing"].id))
        db.commit()
        with pytest.raises(AddressNotFound):
            order_service.commit_order(ready["user"].id)
        assert db.query(OrderModel).count() == 0


class TestCommitAtomicity:
    def test_insufficient_inventory_persists_nothing(self, db, order_service, cart_service, ready):
        user = ready["user"]
        laptop = db.get(ProductModel, ready["laptop_id"])
        laptop.inventory = 1
        db.commit()

        with pytest.raises(InsufficientInventory):
            order_service.commit_order(user.id)

        assert db.query(OrderModel).count() == 0
        assert db.query(OrderItemModel).count() == 0
        assert _product(db, ready["laptop_id"]).inventory == 1
        assert _product(db, ready["cable_id"]).inventory == 10
        assert cart_service.get_cart(user.id)["num_items"] == 3
        assert db.query(CheckoutSessionModel).count() == 1

    def test_failure_after_writes_rolls_back(self, db, order_service, cart_service, notifications, ready, monkeypatch):
        user = ready["user"]

        def boom(cart_id):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(order_service.cart_repo, "clear_items", boom)

        with pytest.raises(PersistenceError):
            order_service.commit_order(user.id)

        assert db.query(OrderModel).count() == 0
        assert db.query(OrderItemModel).count() == 0
        laptop = _product(db, ready["laptop_id"])
        assert laptop.inventory == 5
        assert laptop.total_sold == 0
        assert cart_service.get_cart(user.id)["num_items"] == 3
        assert notifications.sent == []


class TestOrderQueries:
    def test_list_orders(self, order_service, ready):
        order = order_service.commit_order(ready["user"].id)
        assert [o["id"] for o in order_service.list_orders(ready["user"].id)] == [order["id"]]

    def test_list_without_orders(self, order_service, make_user):
        user = make_user()
        with pytest.raises(OrderNotFound):
            order_service.list_orders(user.id)

    def test_foreign_order_not_found(self, order_service, make_user, ready):
        order = order_service.commit_order(ready["user"].id)
        other = make_user()
        with pytest.raises(OrderNotFound):
            order_service.get_order(order["id"], other.id)
