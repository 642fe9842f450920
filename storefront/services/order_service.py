# storefront/services/order_service.py
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from storefront.data.database import atomic
from storefront.data.models.address import AddressModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain import ledger
from storefront.domain.enums import AddressType, CheckoutStage
from storefront.domain.errors import (
    AddressNotFound,
    CartNotFound,
    CheckoutIncomplete,
    CheckoutNotFound,
    EmptyCart,
    InsufficientInventory,
    OrderNotFound,
    PaymentMethodNotFound,
    ProductNotFound,
)
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.checkout_repo import CheckoutRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_card_repo import PaymentCardRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _address_snapshot(prefix: str, address: AddressModel) -> Dict[str, Any]:
    return {
        f"{prefix}_first_name": address.first_name,
        f"{prefix}_last_name": address.last_name,
        f"{prefix}_street_address": address.address,
        f"{prefix}_unit": address.unit,
        f"{prefix}_city": address.city,
        f"{prefix}_province": address.province,
        f"{prefix}_country": address.country,
        f"{prefix}_postal_code": address.postal_code,
        f"{prefix}_phone_number": address.phone_number,
    }


class OrderService:
    """
    Turns a confirmed checkout session and its cart into an order.
    Separate from CartService; owns inventory mutation.
    """

    def __init__(self, db: Session, lock_service, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.checkout_repo = CheckoutRepo(db)
        self.address_repo = AddressRepo(db)
        self.card_repo = PaymentCardRepo(db)
        self.product_repo = ProductRepo(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def commit_order(self, user_id: int) -> Dict[str, Any]:
        """
        Use Case: placing an order.

        1. checkout at confirmation with shipping, billing and card set
        2. resolve address and card snapshots
        3. lock products and check inventory for every line
        4. order + order lines, inventory and total_sold updated
        5. cart emptied (row kept), checkout deleted, one-off alternate
           shipping address deleted

        All of it is a single transaction; any error leaves nothing behind.
        """
        with self.lock_service.user_lock(user_id):
            with atomic(self.db):
                checkout = self.checkout_repo.get_by_user(user_id)
                if not checkout:
                    raise CheckoutNotFound("Checkout session not found")

                if checkout.stage != CheckoutStage.CONFIRMATION.value:
                    raise CheckoutIncomplete("Checkout session not at confirmation stage")

                if not (checkout.shipping_address_id and checkout.billing_address_id and checkout.payment_card_id):
                    raise CheckoutIncomplete("Checkout data not set")

                cart = self.cart_repo.get_cart_by_user(user_id, for_update=True)
                if not cart:
                    raise CartNotFound(f"Cart for user {user_id} not found")

                items = self.cart_repo.get_cart_items(cart.id)
                if not items:
                    raise EmptyCart("Cart is empty")

                shipping = self.address_repo.get_address(user_id, checkout.shipping_address_id)
                if not shipping:
                    raise AddressNotFound("Shipping address not found")

                billing = self.address_repo.get_address(user_id, checkout.billing_address_id)
                if not billing:
                    raise AddressNotFound("Billing address not found")

                card = self.card_repo.get_card(user_id, checkout.payment_card_id)
                if not card:
                    raise PaymentMethodNotFound("Payment card not found")

                # inventory checked for all lines before anything is written
                products = self.product_repo.lock_products(i.product_id for i in items)
                for item in items:
                    product = products.get(item.product_id)
                    if not product:
                        raise ProductNotFound(f"Product {item.product_id} not found")
                    if item.quantity > product.inventory:
                        logger.warning(
                            f"Order for user {user_id} rejected: product {product.id} "
                            f"has {product.inventory} left, cart wants {item.quantity}"
                        )
                        raise InsufficientInventory(f"Not enough inventory for product {product.id}")

                order = self.repo.create_order(
                    OrderModel(
                        user_id=user_id,
                        num_items=cart.num_items,
                        subtotal=cart.subtotal,
                        taxes=cart.taxes,
                        total=cart.total,
                        payment_card_type=card.payment_card_type,
                        payment_card_last4=card.card_number[-4:],
                        **_address_snapshot("shipping", shipping),
                        **_address_snapshot("billing", billing),
                    )
                )

                for item in items:
                    self.repo.add_order_item(
                        OrderItemModel(order_id=order.id, product_id=item.product_id, quantity=item.quantity)
                    )
                    product = products[item.product_id]
                    product.total_sold += item.quantity
                    product.inventory -= item.quantity
                self.db.flush()

                #cleanup
                self.cart_repo.clear_items(cart.id)
                self.cart_repo.update_aggregates(cart, ledger.EMPTY_TOTALS)
                self.checkout_repo.delete_by_user(user_id)

                if shipping.address_type == AddressType.SHIPPING_ALTERNATE.value:
                    self.address_repo.delete(shipping)

                order_id = order.id
                order_total = order.total
                order_num_items = order.num_items
                shipping_city = order.shipping_city

        logger.info(f"Order {order_id} created for user {user_id}, total={order_total}")

        # order already committed, dispatch failures are only logged
        try:
            self.notification_service.send_order_notification(
                user_id, order_id, num_items=order_num_items, total=order_total, shipping_city=shipping_city,
            )
        except Exception:
            logger.error(f"Notification for order {order_id} not dispatched", exc_info=True)

        return self.get_order(order_id, user_id)

    def list_orders(self, user_id: int) -> List[Dict[str, Any]]:
        orders = self.repo.list_by_user(user_id)
        if not orders:
            raise OrderNotFound("No orders found")
        return [self._to_dict(o) for o in orders]

    def get_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        # someone else's order is reported as missing
        if not order or order.user_id != user_id:
            raise OrderNotFound("Order not found")

        return self._to_dict(order)

    def _to_dict(self, order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "order_date": order.order_date,
            "num_items": order.num_items,
            "subtotal": order.subtotal,
            "taxes": order.taxes,
            "total": order.total,
            "shipping_address": {
                "first_name": order.shipping_first_name,
                "last_name": order.shipping_last_name,
                "address": order.shipping_street_address,
                "unit": order.shipping_unit,
                "city": order.shipping_city,
                "province": order.shipping_province,
                "country": order.shipping_country,
                "postal_code": order.shipping_postal_code,
                "phone_number": order.shipping_phone_number,
            },
            "billing_address": {
                "first_name": order.billing_first_name,
                "last_name": order.billing_last_name,
                "address": order.billing_street_address,
                "unit": order.billing_unit,
                "city": order.billing_city,
                "province": order.billing_province,
                "country": order.billing_country,
                "postal_code": order.billing_postal_code,
                "phone_number": order.billing_phone_number,
            },
            "payment_card_type": order.payment_card_type,
            "payment_card_last4": order.payment_card_last4,
            "items": [
                {"product_id": i.product_id, "quantity": i.quantity}
                for i in order.items
            ],
        }
