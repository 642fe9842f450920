from sqlalchemy import Column, Integer, ForeignKey, String, UniqueConstraint

from storefront.data.database import Base


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    address_type = Column(String(30), nullable=False)  # shipping_primary, shipping_alternate, billing

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    address = Column(String(100), nullable=False)
    unit = Column(String(20), nullable=True)
    city = Column(String(50), nullable=False)
    province = Column(String(50), nullable=False)
    country = Column(String(50), nullable=False)
    postal_code = Column(String(10), nullable=False)
    phone_number = Column(String(20), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "address_type", name="u_user_address_type"),)
