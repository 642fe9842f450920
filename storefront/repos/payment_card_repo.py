from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.payment_card import PaymentCardModel


class PaymentCardRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> PaymentCardModel | None:
        stmt = select(PaymentCardModel).where(PaymentCardModel.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_card(self, user_id: int, card_id: int) -> PaymentCardModel | None:
        stmt = select(PaymentCardModel).where(
            PaymentCardModel.user_id == user_id,
            PaymentCardModel.id == card_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, card: PaymentCardModel) -> PaymentCardModel:
        self.db.add(card)
        self.db.flush()
        return card

    def update(self, card: PaymentCardModel, **fields) -> PaymentCardModel:
        for key, value in fields.items():
            setattr(card, key, value)
        self.db.flush()
        return card

    def delete(self, card: PaymentCardModel) -> None:
        self.db.delete(card)
        self.db.flush()
