from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.checkout import CheckoutSessionModel


class CheckoutRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> CheckoutSessionModel | None:
        stmt = select(CheckoutSessionModel).where(CheckoutSessionModel.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, checkout: CheckoutSessionModel) -> CheckoutSessionModel:
        self.db.add(checkout)
        self.db.flush()
        return checkout

    def update(self, checkout: CheckoutSessionModel, **fields) -> CheckoutSessionModel:
        for key, value in fields.items():
            setattr(checkout, key, value)
        self.db.flush()
        return checkout

    def delete_by_user(self, user_id: int) -> int:
        res = self.db.execute(
            delete(CheckoutSessionModel).where(CheckoutSessionModel.user_id == user_id)
        )
        return res.rowcount
