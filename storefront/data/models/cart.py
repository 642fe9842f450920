# storefront/data/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    # aggregates, kept in sync with items by the cart service
    num_items = Column(Integer, nullable=False, default=0)
    subtotal = Column(Numeric(7, 2), nullable=False, default=0)
    taxes = Column(Numeric(7, 2), nullable=False, default=0)
    total = Column(Numeric(7, 2), nullable=False, default=0)

    user = relationship("UserModel", back_populates="cart")
    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )
