from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.checkout import CheckoutSessionModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.payment_card import PaymentCardModel
from storefront.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.email == email)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.flush()
        return user

    def update_user(self, user: UserModel, **fields) -> UserModel:
        for key, value in fields.items():
            setattr(user, key, value)
        self.db.flush()
        return user

    def delete_user(self, user: UserModel) -> None:
        """Removes the user and every row that hangs off it, children first."""
        cart_ids = select(CartModel.id).where(CartModel.user_id == user.id)
        order_ids = select(OrderModel.id).where(OrderModel.user_id == user.id)

        self.db.execute(delete(CheckoutSessionModel).where(CheckoutSessionModel.user_id == user.id))
        self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id.in_(cart_ids)))
        self.db.execute(delete(CartModel).where(CartModel.user_id == user.id))
        self.db.execute(delete(OrderItemModel).where(OrderItemModel.order_id.in_(order_ids)))
        self.db.execute(delete(OrderModel).where(OrderModel.user_id == user.id))
        self.db.execute(delete(AddressModel).where(AddressModel.user_id == user.id))
        self.db.execute(delete(PaymentCardModel).where(PaymentCardModel.user_id == user.id))
        self.db.execute(delete(UserModel).where(UserModel.id == user.id))
