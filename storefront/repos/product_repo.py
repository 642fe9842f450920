from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(self, category_code: str | None = None, discount_type: str | None = None) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.id)
        if category_code:
            stmt = stmt.where(ProductModel.category_code == category_code)
        if discount_type:
            stmt = stmt.where(ProductModel.discount_type == discount_type)
        return list(self.db.execute(stmt).scalars().all())

    def lock_products(self, product_ids) -> dict[int, ProductModel]:
        """SELECT ... FOR UPDATE, ordered by id so two commits never deadlock."""
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        stmt = (
            select(ProductModel)
            .where(ProductModel.id.in_(ids))
            .order_by(ProductModel.id)
            .with_for_update()
        )
        # populate_existing so the identity map doesn't hide a fresher row
        stmt = stmt.execution_options(populate_existing=True)
        return {p.id: p for p in self.db.execute(stmt).scalars().all()}

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product
