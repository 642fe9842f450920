from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import atomic
from storefront.data.models.address import AddressModel
from storefront.data.models.payment_card import PaymentCardModel
from storefront.domain.enums import AddressType
from storefront.domain.errors import (
    AddressNotFound,
    DuplicateAddress,
    DuplicatePaymentCard,
    PaymentMethodNotFound,
)
from storefront.repos.address_repo import AddressRepo
from storefront.repos.payment_card_repo import PaymentCardRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AccountService:
    """
    Address book (primary shipping, billing) and the card on file.
    One record of each kind per user.
    """

    def __init__(self, db: Session, lock_service):
        self.db = db
        self.address_repo = AddressRepo(db)
        self.card_repo = PaymentCardRepo(db)
        self.lock_service = lock_service

    #addresses
    def get_address(self, user_id: int, address_type: AddressType) -> AddressModel:
        address = self.address_repo.get_by_type(user_id, address_type.value)
        if not address:
            raise AddressNotFound(f"No {address_type.value} address found")
        return address

    def get_address_by_id(self, user_id: int, address_id: int) -> AddressModel:
        # any type, including the checkout alternate; foreign ids look missing
        address = self.address_repo.get_address(user_id, address_id)
        if not address:
            raise AddressNotFound(f"Address {address_id} not found")
        return address

    def create_address(self, user_id: int, address_type: AddressType, fields: Dict[str, Any]) -> AddressModel:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                if self.address_repo.get_by_type(user_id, address_type.value):
                    raise DuplicateAddress(f"User already has a {address_type.value} address")

                address = self.address_repo.create(
                    AddressModel(user_id=user_id, address_type=address_type.value, **fields)
                )

        logger.info(f"Address {address.id} ({address_type.value}) created for user {user_id}")
        return address

    def update_address(self, user_id: int, address_type: AddressType, fields: Dict[str, Any]) -> AddressModel:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                address = self.get_address(user_id, address_type)
                self.address_repo.update(address, **fields)

        logger.info(f"Address {address.id} ({address_type.value}) updated for user {user_id}")
        return address

    def delete_address(self, user_id: int, address_type: AddressType) -> None:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                address = self.get_address(user_id, address_type)
                self.address_repo.delete(address)

        logger.info(f"{address_type.value} address deleted for user {user_id}")

    #payment card
    def get_payment_card(self, user_id: int) -> PaymentCardModel:
        card = self.card_repo.get_by_user(user_id)
        if not card:
            raise PaymentMethodNotFound("Payment card not found")
        return card

    def create_payment_card(self, user_id: int, fields: Dict[str, Any]) -> PaymentCardModel:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                if self.card_repo.get_by_user(user_id):
                    raise DuplicatePaymentCard("Payment card already exists")
                card = self.card_repo.create(PaymentCardModel(user_id=user_id, **fields))

        logger.info(f"Payment card {card.id} created for user {user_id}")
        return card

    def update_payment_card(self, user_id: int, fields: Dict[str, Any]) -> PaymentCardModel:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                card = self.get_payment_card(user_id)
                self.card_repo.update(card, **fields)

        logger.info(f"Payment card {card.id} updated for user {user_id}")
        return card

    def delete_payment_card(self, user_id: int) -> None:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                card = self.get_payment_card(user_id)
                self.card_repo.delete(card)

        logger.info(f"Payment card deleted for user {user_id}")
