"""Tests for the address book and the card on file."""

import pytest

from storefront.domain.enums import AddressType
from storefront.domain.errors import (
    AddressNotFound,
    DuplicateAddress,
    DuplicatePaymentCard,
    DuplicateUser,
    PaymentMethodNotFound,
    UserNotFound,
)
from storefront.domain.schemas import UserCreate, UserUpdate
from storefront.services.account_service import AccountService
from storefront.services.user_service import UserService
from storefront.data.models import AddressModel, CartModel, CheckoutSessionModel, OrderModel, PaymentCardModel, UserModel
from tests.conftest import ADDRESS

CARD = {
    "card_number": "5500000000000004",
    "first_name": "Ada",
    "last_name": "Lovelace",
    "expiration_month": 1,
    "expiration_year": 2031,
    "payment_card_type": "mastercard",
}


@pytest.fixture
def account_service(db, lock):
    return AccountService(db=db, lock_service=lock)


class TestRegistration:
    def test_creates_empty_cart(self, db, make_user):
        user = make_user()
        cart = db.query(CartModel).filter_by(user_id=user.id).one()
        assert cart.num_items == 0
        assert cart.total == 0

    def test_duplicate_email(self, db, make_user):
        make_user(email="same@example.com")
        with pytest.raises(DuplicateUser):
            UserService(db).create_user(UserCreate(first_name="A", last_name="B", email="same@example.com"))

    def test_get_unknown_user(self, db):
        with pytest.raises(UserNotFound):
            UserService(db).get_user(42)


class TestProfile:
    def test_partial_update(self, db, make_user):
        user = make_user()

        updated = UserService(db).update_user(user.id, UserUpdate(last_name="Byron"))

        assert updated.last_name == "Byron"
        assert updated.first_name == "Test"
        assert updated.email == user.email

    def test_email_taken_by_someone_else(self, db, make_user):
        make_user(email="taken@example.com")
        user = make_user()
        with pytest.raises(DuplicateUser):
            UserService(db).update_user(user.id, UserUpdate(email="taken@example.com"))

    def test_keeping_own_email(self, db, make_user):
        user = make_user(email="mine@example.com")
        updated = UserService(db).update_user(user.id, UserUpdate(email="mine@example.com", first_name="Ada"))
        assert updated.first_name == "Ada"

    def test_update_unknown_user(self, db):
        with pytest.raises(UserNotFound):
            UserService(db).update_user(42, UserUpdate(first_name="X"))


class TestAccountDeletion:
    def test_removes_user_and_everything_owned(self, db, order_service, make_user, make_product, make_address, make_card,
                                               cart_service, checkout_service):
        user = make_user()
        other = make_user()
        product = make_product()
        cart_service.add_product(user.id, product.id)
        address = make_address(user.id)
        make_card(user.id)
        checkout_service.start(user.id)
        checkout_service.set_shipping_address(user.id, address.id)
        checkout_service.set_billing_address(user.id, address.id)
        checkout_service.set_payment_card(user.id)
        checkout_service.set_stage(user.id, "confirmation")
        order_service.commit_order(user.id)
        cart_service.add_product(user.id, product.id)
        checkout_service.start(user.id)

        UserService(db).delete_user(user.id)

        db.expire_all()
        assert db.get(UserModel, user.id) is None
        for model in (CartModel, CheckoutSessionModel, AddressModel, PaymentCardModel, OrderModel):
            assert db.query(model).filter_by(user_id=user.id).count() == 0
        # other accounts are untouched
        assert db.query(CartModel).filter_by(user_id=other.id).count() == 1

    def test_delete_unknown_user(self, db):
        with pytest.raises(UserNotFound):
            UserService(db).delete_user(42)


class TestAddresses:
    def test_primary_address_roundtrip(self, account_service, make_user):
        user = make_user()
        created = account_service.create_address(user.id, AddressType.SHIPPING_PRIMARY, ADDRESS)
        assert account_service.get_address(user.id, AddressType.SHIPPING_PRIMARY).id == created.id

    def test_second_primary_rejected(self, account_service, make_user):
        user = make_user()
        account_service.create_address(user.id, AddressType.SHIPPING_PRIMARY, ADDRESS)
        with pytest.raises(DuplicateAddress):
            account_service.create_address(user.id, AddressType.SHIPPING_PRIMARY, ADDRESS)

    def test_update_billing(self, account_service, make_user):
        user = make_user()
        account_service.create_address(user.id, AddressType.BILLING, ADDRESS)
        updated = account_service.update_address(user.id, AddressType.BILLING, dict(ADDRESS, city="Calgary"))
        assert updated.city == "Calgary"

    def test_delete_billing(self, account_service, make_user):
        user = make_user()
        account_service.create_address(user.id, AddressType.BILLING, ADDRESS)
        account_service.delete_address(user.id, AddressType.BILLING)
        with pytest.raises(AddressNotFound):
            account_service.get_address(user.id, AddressType.BILLING)

    def test_update_missing(self, account_service, make_user):
        user = make_user()
        with pytest.raises(AddressNotFound):
            account_service.update_address(user.id, AddressType.SHIPPING_PRIMARY, ADDRESS)


class TestAddressById:
    def test_any_own_address(self, account_service, make_user):
        user = make_user()
        billing = account_service.create_address(user.id, AddressType.BILLING, ADDRESS)
        assert account_service.get_address_by_id(user.id, billing.id).address_type == "billing"

    def test_foreign_address(self, account_service, make_user):
        owner = make_user()
        other = make_user()
        address = account_service.create_address(owner.id, AddressType.SHIPPING_PRIMARY, ADDRESS)
        with pytest.raises(AddressNotFound):
            account_service.get_address_by_id(other.id, address.id)


class TestPaymentCard:
    def test_one_card_per_user(self, account_service, make_user):
        user = make_user()
        account_service.create_payment_card(user.id, CARD)
        with pytest.raises(DuplicatePaymentCard):
            account_service.create_payment_card(user.id, CARD)

    def test_update_and_delete(self, account_service, make_user):
        user = make_user()
        account_service.create_payment_card(user.id, CARD)

        card = account_service.update_payment_card(user.id, dict(CARD, expiration_year=2033))
        assert card.expiration_year == 2033

        account_service.delete_payment_card(user.id)
        with pytest.raises(PaymentMethodNotFound):
            account_service.get_payment_card(user.id)
