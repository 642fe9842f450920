# storefront/domain/enums.py
from enum import Enum


class CheckoutStage(str, Enum):
    SHIPPING = "shipping"
    PAYMENT = "payment"
    REVIEW = "review"
    CONFIRMATION = "confirmation"


class AddressType(str, Enum):
    SHIPPING_PRIMARY = "shipping_primary"
    SHIPPING_ALTERNATE = "shipping_alternate"
    BILLING = "billing"


SHIPPING_ADDRESS_TYPES = (AddressType.SHIPPING_PRIMARY.value, AddressType.SHIPPING_ALTERNATE.value)
BILLING_ADDRESS_TYPES = (AddressType.SHIPPING_PRIMARY.value, AddressType.BILLING.value)


class DiscountType(str, Enum):
    NONE = "none"
    NORMAL = "normal"
    COUNTDOWN = "countdown"
