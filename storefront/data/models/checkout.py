# storefront/data/models/checkout.py
from sqlalchemy import Column, Integer, ForeignKey, String

from storefront.data.database import Base


class CheckoutSessionModel(Base):
    __tablename__ = "checkout_sessions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)

    stage = Column(String(20), nullable=False, default="shipping")

    shipping_address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)
    billing_address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)
    payment_card_id = Column(Integer, ForeignKey("payment_cards.id", ondelete="SET NULL"), nullable=True)
