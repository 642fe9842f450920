from sqlalchemy import Column, Integer, ForeignKey, String

from storefront.data.database import Base


class PaymentCardModel(Base):
    __tablename__ = "payment_cards"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    card_number = Column(String(19), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    expiration_month = Column(Integer, nullable=False)
    expiration_year = Column(Integer, nullable=False)
    payment_card_type = Column(String(20), nullable=False)
