# storefront/domain/ledger.py
"""
Money arithmetic for carts and orders.

All values are Decimal. Rounding is ROUND_HALF_UP to cents everywhere, which
is what a DECIMAL(7,2) column stores. Unit prices keep full precision until a
cart or order total is rounded.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from storefront.utils.settings import TAX_RATE

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal(100)


@dataclass(frozen=True)
class CartTotals:
    num_items: int
    subtotal: Decimal
    taxes: Decimal
    total: Decimal


EMPTY_TOTALS = CartTotals(num_items=0, subtotal=ZERO, taxes=ZERO, total=ZERO)


def round_currency(amount) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def discounted_unit_price(price, discount_percent: int) -> Decimal:
    """price × (1 − discount/100), unrounded."""
    percent = Decimal(discount_percent or 0)
    if percent < 0 or percent > HUNDRED:
        raise ValueError(f"Discount percent out of range: {discount_percent}")
    return Decimal(price) * (1 - percent / HUNDRED)


def line_total(price, discount_percent: int, quantity: int) -> Decimal:
    return discounted_unit_price(price, discount_percent) * quantity


def compute_taxes(subtotal, rate: Decimal = None) -> Decimal:
    rate = TAX_RATE if rate is None else Decimal(rate)
    return round_currency(Decimal(subtotal) * rate)


def compute_total(subtotal, taxes) -> Decimal:
    # sum of the rounded parts, never the rounded sum
    return round_currency(subtotal) + round_currency(taxes)


def cart_totals(lines: Iterable[Tuple[Decimal, int, int]], rate: Decimal = None) -> CartTotals:
    """
    Aggregates for (price, discount_percent, quantity) lines.
    The subtotal is the unrounded sum of line totals rounded once.
    """
    num_items = 0
    raw_subtotal = Decimal(0)
    for price, discount_percent, quantity in lines:
        num_items += quantity
        raw_subtotal += line_total(price, discount_percent, quantity)

    subtotal = round_currency(raw_subtotal)
    taxes = compute_taxes(subtotal, rate)
    return CartTotals(
        num_items=num_items,
        subtotal=subtotal,
        taxes=taxes,
        total=compute_total(subtotal, taxes),
    )
