from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String, Text

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category_code = Column(String(50), nullable=False, index=True)

    price = Column(Numeric(7, 2), nullable=False)
    discount_type = Column(String(20), nullable=False, default="none", index=True)
    discount_percent = Column(Integer, nullable=False, default=0)
    inventory = Column(Integer, nullable=False, default=0)
    total_sold = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("discount_percent >= 0 AND discount_percent <= 100", name="ck_product_discount"),
        CheckConstraint("inventory >= 0", name="ck_product_inventory"),
        CheckConstraint("discount_type IN ('none', 'normal', 'countdown')", name="ck_product_discount_type"),
    )
