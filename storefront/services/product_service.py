from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import ProductNotFound
from storefront.repos.product_repo import ProductRepo


class ProductService:
    """Read side of the catalog."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(self, category_code: str | None = None, discount_type: str | None = None) -> list[ProductModel]:
        """Whole catalog, optionally narrowed by category, discount type or both."""
        return self.repo.list_products(category_code, discount_type)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFound(f"Product {product_id} not found")
        return product
