# register every model on Base.metadata before create_all

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.address import AddressModel
from storefront.data.models.payment_card import PaymentCardModel
from storefront.data.models.checkout import CheckoutSessionModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "AddressModel",
    "PaymentCardModel",
    "CheckoutSessionModel",
    "OrderModel",
    "OrderItemModel",
]
