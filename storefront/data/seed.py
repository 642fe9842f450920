# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    {"name": "Laptop 14\"", "category_code": "computers", "price": Decimal("999.99"), "discount_type": "normal", "discount_percent": 10, "inventory": 25},
    {"name": "Mechanical Keyboard", "category_code": "computers", "price": Decimal("129.99"), "discount_type": "none", "discount_percent": 0, "inventory": 60},
    {"name": "Action Camera", "category_code": "cameras-drones", "price": Decimal("349.00"), "discount_type": "countdown", "discount_percent": 15, "inventory": 12},
    {"name": "Mini Drone", "category_code": "cameras-drones", "price": Decimal("499.00"), "discount_type": "none", "discount_percent": 0, "inventory": 5},
    {"name": "Game Controller", "category_code": "gaming", "price": Decimal("69.99"), "discount_type": "normal", "discount_percent": 20, "inventory": 40},
    {"name": "Smart Speaker", "category_code": "home-electronics", "price": Decimal("89.50"), "discount_type": "normal", "discount_percent": 5, "inventory": 30},
]


def seed(db=None):
    """Inserts the demo catalog into an empty products table."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return 0
        for data in DEMO_PRODUCTS:
            db.add(ProductModel(description="", **data))
        db.commit()
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} products")
        return len(DEMO_PRODUCTS)
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    seed()
