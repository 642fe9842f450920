from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import atomic
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain import ledger
from storefront.domain.enums import CheckoutStage
from storefront.domain.errors import (
    CartNotFound,
    InsufficientInventory,
    OutOfStock,
    ProductNotFound,
    ProductNotRemoved,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.checkout_repo import CheckoutRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases of the cart: read, add one unit, remove one unit, delete a line.

    Every command runs under the user's lock and in one transaction, and
    leaves num_items / subtotal / taxes / total recomputed from the lines.
    A command also invalidates an open checkout session: back to the
    shipping stage, or gone when the cart is empty.
    """

    def __init__(self, db: Session, lock_service, tax_rate: Decimal | None = None):
        self.db = db
        self.repo = CartRepo(db)
        self.product_repo = ProductRepo(db)
        self.checkout_repo = CheckoutRepo(db)
        self.lock_service = lock_service
        self.tax_rate = tax_rate

    #query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFound(f"Cart for user {user_id} not found")

        return self._to_dict(cart, self.repo.get_cart_items(cart.id))

    #commands
    def add_product(self, user_id: int, product_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                cart = self._load_cart(user_id)

                product = self.product_repo.get_product(product_id)
                if not product:
                    raise ProductNotFound(f"Product {product_id} not found")

                if product.inventory == 0:
                    logger.warning(f"Product {product_id} is out of stock")
                    raise OutOfStock("Product is out of stock")

                item = self.repo.get_cart_item(cart.id, product_id)

                if item:
                    if item.quantity >= product.inventory:
                        logger.warning(
                            f"Cart {cart.id} already holds all {product.inventory} units of product {product_id}"
                        )
                        raise InsufficientInventory("Not enough inventory to add to cart")
                    item.quantity += 1
                    self.repo.add_cart_item(item)
                else:
                    self.repo.add_cart_item(
                        CartItemModel(cart_id=cart.id, product_id=product_id, quantity=1)
                    )

                totals = self._recalculate(cart)
                self._invalidate_checkout(user_id, totals)

        logger.info(f"Product {product_id} added to cart {cart.id}, num_items={totals.num_items}")
        return self.get_cart(user_id)

    def decrement_product(self, user_id: int, product_id: int) -> Dict[str, Any]:
        """
        Removes one unit. A line at quantity 1 is left alone and reported as
        not removed; dropping a line is what delete_product is for.
        """
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                cart = self._load_cart(user_id)
                self._require_product(product_id)

                item = self.repo.get_cart_item(cart.id, product_id)
                if not item or item.quantity <= 1:
                    raise ProductNotRemoved("Product not in cart or quantity is 1")

                item.quantity -= 1
                self.repo.add_cart_item(item)

                totals = self._recalculate(cart)
                self._invalidate_checkout(user_id, totals)

        logger.info(f"Product {product_id} decremented in cart {cart.id}, num_items={totals.num_items}")
        return self.get_cart(user_id)

    def delete_product(self, user_id: int, product_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                cart = self._load_cart(user_id)
                self._require_product(product_id)

                item = self.repo.get_cart_item(cart.id, product_id)
                if not item:
                    raise ProductNotRemoved("Product not deleted from cart")

                self.repo.delete_cart_item(item)

                totals = self._recalculate(cart)
                self._invalidate_checkout(user_id, totals)

        logger.info(f"Product {product_id} deleted from cart {cart.id}, num_items={totals.num_items}")
        return self.get_cart(user_id)

    #helpers
    def _load_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id, for_update=True)
        if not cart:
            raise CartNotFound(f"Cart for user {user_id} not found")
        return cart

    def _require_product(self, product_id: int):
        product = self.product_repo.get_product(product_id)
        if not product:
            raise ProductNotFound(f"Product {product_id} not found")
        return product

    def _recalculate(self, cart: CartModel) -> ledger.CartTotals:
        items = self.repo.get_cart_items(cart.id)
        totals = ledger.cart_totals(
            ((i.product.price, i.product.discount_percent, i.quantity) for i in items),
            self.tax_rate,
        )
        self.repo.update_aggregates(cart, totals)
        return totals

    def _invalidate_checkout(self, user_id: int, totals: ledger.CartTotals) -> None:
        checkout = self.checkout_repo.get_by_user(user_id)
        if not checkout:
            return

        if totals.num_items == 0:
            # no checkout over an empty cart
            logger.info(f"Deleting checkout session {checkout.id}, cart is empty")
            self.checkout_repo.delete_by_user(user_id)
        elif checkout.stage != CheckoutStage.SHIPPING.value:
            self.checkout_repo.update(checkout, stage=CheckoutStage.SHIPPING.value)
            logger.info(f"Checkout session {checkout.id} reset to shipping")

    def _to_dict(self, cart: CartModel, items) -> Dict[str, Any]:
        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "num_items": cart.num_items,
            "subtotal": cart.subtotal,
            "taxes": cart.taxes,
            "total": cart.total,
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.product.name,
                    "quantity": i.quantity,
                    "price": i.product.price,
                    "discount_percent": i.product.discount_percent,
                    "unit_price": ledger.round_currency(
                        ledger.discounted_unit_price(i.product.price, i.product.discount_percent)
                    ),
                    "line_total": ledger.round_currency(
                        ledger.line_total(i.product.price, i.product.discount_percent, i.quantity)
                    ),
                }
                for i in items
            ],
        }
