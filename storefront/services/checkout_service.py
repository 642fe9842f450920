from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import atomic
from storefront.data.models.address import AddressModel
from storefront.data.models.checkout import CheckoutSessionModel
from storefront.domain.enums import (
    AddressType,
    CheckoutStage,
    SHIPPING_ADDRESS_TYPES,
    BILLING_ADDRESS_TYPES,
)
from storefront.domain.errors import (
    AddressNotFound,
    CartNotFound,
    CheckoutAlreadyExists,
    CheckoutNotFound,
    DuplicateAddress,
    EmptyCart,
    InvalidAddressType,
    InvalidStage,
    PaymentMethodNotFound,
)
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.checkout_repo import CheckoutRepo
from storefront.repos.payment_card_repo import PaymentCardRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STAGES = tuple(s.value for s in CheckoutStage)


class CheckoutService:
    """
    Checkout session of a user: shipping -> payment -> review -> confirmation.

    Stages can be set in any order, the order commit checks the final state.
    Cart changes push the session back to shipping (see CartService).
    """

    def __init__(self, db: Session, lock_service):
        self.db = db
        self.repo = CheckoutRepo(db)
        self.cart_repo = CartRepo(db)
        self.address_repo = AddressRepo(db)
        self.card_repo = PaymentCardRepo(db)
        self.lock_service = lock_service

    #query
    def get_checkout(self, user_id: int) -> Dict[str, Any]:
        checkout = self.repo.get_by_user(user_id)
        if not checkout:
            raise CheckoutNotFound("Checkout session not found")
        return self._to_dict(checkout)

    def get_alternate_address(self, user_id: int) -> AddressModel:
        address = self.address_repo.get_by_type(user_id, AddressType.SHIPPING_ALTERNATE.value)
        if not address:
            raise AddressNotFound("Alternate address not found")
        return address

    #commands
    def start(self, user_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                cart = self.cart_repo.get_cart_by_user(user_id, for_update=True)
                if not cart:
                    raise CartNotFound(f"Cart for user {user_id} not found")

                if cart.num_items == 0:
                    raise EmptyCart("Cart is empty")

                if self.repo.get_by_user(user_id):
                    raise CheckoutAlreadyExists("User already has items in checkout")

                checkout = self.repo.create(
                    CheckoutSessionModel(
                        user_id=user_id,
                        cart_id=cart.id,
                        stage=CheckoutStage.SHIPPING.value,
                    )
                )

        logger.info(f"Checkout session {checkout.id} started for user {user_id}")
        return self.get_checkout(user_id)

    def set_shipping_address(self, user_id: int, address_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                checkout = self._load(user_id)
                address = self._address_of_type(user_id, address_id, SHIPPING_ADDRESS_TYPES)

                self.repo.update(checkout, shipping_address_id=address.id)

                #choosing the primary address discards a one-off alternate
                if address.address_type == AddressType.SHIPPING_PRIMARY.value:
                    alternate = self.address_repo.get_by_type(user_id, AddressType.SHIPPING_ALTERNATE.value)
                    if alternate:
                        logger.info(f"Deleting alternate shipping address {alternate.id} of user {user_id}")
                        self.address_repo.delete(alternate)

        logger.info(f"Checkout shipping address set to {address_id} for user {user_id}")
        return self.get_checkout(user_id)

    def set_billing_address(self, user_id: int, address_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                checkout = self._load(user_id)
                address = self._address_of_type(user_id, address_id, BILLING_ADDRESS_TYPES)
                self.repo.update(checkout, billing_address_id=address.id)

        logger.info(f"Checkout billing address set to {address_id} for user {user_id}")
        return self.get_checkout(user_id)

    def set_payment_card(self, user_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                checkout = self._load(user_id)
                card = self.card_repo.get_by_user(user_id)
                if not card:
                    raise PaymentMethodNotFound("Payment card not found")
                self.repo.update(checkout, payment_card_id=card.id)

        logger.info(f"Checkout payment card set for user {user_id}")
        return self.get_checkout(user_id)

    def set_stage(self, user_id: int, stage: str) -> Dict[str, Any]:
        if stage not in STAGES:
            raise InvalidStage(f"Invalid stage name: {stage}")

        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                checkout = self._load(user_id)
                self.repo.update(checkout, stage=stage)

        logger.info(f"Checkout stage set to {stage} for user {user_id}")
        return self.get_checkout(user_id)

    def abandon(self, user_id: int) -> None:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                self._load(user_id)
                self.repo.delete_by_user(user_id)

        logger.info(f"Checkout session of user {user_id} abandoned")

    def create_alternate_address(self, user_id: int, fields: Dict[str, Any]) -> AddressModel:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                self._load(user_id)
                if self.address_repo.get_by_type(user_id, AddressType.SHIPPING_ALTERNATE.value):
                    raise DuplicateAddress("Alternate shipping address already exists")

                address = self.address_repo.create(
                    AddressModel(
                        user_id=user_id,
                        address_type=AddressType.SHIPPING_ALTERNATE.value,
                        **fields,
                    )
                )

        logger.info(f"Alternate shipping address {address.id} created for user {user_id}")
        return address

    def update_alternate_address(self, user_id: int, fields: Dict[str, Any]) -> AddressModel:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                self._load(user_id)
                address = self.address_repo.get_by_type(user_id, AddressType.SHIPPING_ALTERNATE.value)
                if not address:
                    raise AddressNotFound("No alternate shipping address found")
                self.address_repo.update(address, **fields)

        logger.info(f"Alternate shipping address {address.id} updated for user {user_id}")
        return address

    #helpers
    def _load(self, user_id: int) -> CheckoutSessionModel:
        checkout = self.repo.get_by_user(user_id)
        if not checkout:
            raise CheckoutNotFound("Checkout session not found")
        return checkout

    def _address_of_type(self, user_id: int, address_id: int, allowed) -> AddressModel:
        address = self.address_repo.get_address(user_id, address_id)
        if not address:
            raise AddressNotFound("Address not found")
        if address.address_type not in allowed:
            raise InvalidAddressType(f"Address type {address.address_type} not allowed here")
        return address

    def _to_dict(self, checkout: CheckoutSessionModel) -> Dict[str, Any]:
        cart = self.cart_repo.get_cart_by_user(checkout.user_id)
        return {
            "id": checkout.id,
            "user_id": checkout.user_id,
            "cart_id": checkout.cart_id,
            "stage": checkout.stage,
            "shipping_address_id": checkout.shipping_address_id,
            "billing_address_id": checkout.billing_address_id,
            "payment_card_id": checkout.payment_card_id,
            "num_items": cart.num_items,
            "subtotal": cart.subtotal,
            "taxes": cart.taxes,
            "total": cart.total,
        }
