from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    """
    Immutable snapshot of a checkout. Address and card fields are copied,
    not referenced, so later edits of the address book don't touch history.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    order_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    num_items = Column(Integer, nullable=False)
    subtotal = Column(Numeric(7, 2), nullable=False)
    taxes = Column(Numeric(7, 2), nullable=False)
    total = Column(Numeric(7, 2), nullable=False)

    shipping_first_name = Column(String(50), nullable=False)
    shipping_last_name = Column(String(50), nullable=False)
    shipping_street_address = Column(String(100), nullable=False)
    shipping_unit = Column(String(20), nullable=True)
    shipping_city = Column(String(50), nullable=False)
    shipping_province = Column(String(50), nullable=False)
    shipping_country = Column(String(50), nullable=False)
    shipping_postal_code = Column(String(10), nullable=False)
    shipping_phone_number = Column(String(20), nullable=False)

    billing_first_name = Column(String(50), nullable=False)
    billing_last_name = Column(String(50), nullable=False)
    billing_street_address = Column(String(100), nullable=False)
    billing_unit = Column(String(20), nullable=True)
    billing_city = Column(String(50), nullable=False)
    billing_province = Column(String(50), nullable=False)
    billing_country = Column(String(50), nullable=False)
    billing_postal_code = Column(String(10), nullable=False)
    billing_phone_number = Column(String(20), nullable=False)

    payment_card_type = Column(String(20), nullable=False)
    payment_card_last4 = Column(String(4), nullable=False)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
