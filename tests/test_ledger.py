"""Tests for the money arithmetic."""

from decimal import Decimal

import pytest

from storefront.domain import ledger


class TestRoundCurrency:
    def test_rounds_half_up(self):
        assert ledger.round_currency(Decimal("0.125")) == Decimal("0.13")
        assert ledger.round_currency(Decimal("0.135")) == Decimal("0.14")

    def test_rounds_down_below_half(self):
        assert ledger.round_currency(Decimal("16.9915")) == Decimal("16.99")

    def test_keeps_two_places(self):
        assert str(ledger.round_currency(Decimal("5"))) == "5.00"


class TestDiscountedUnitPrice:
    def test_applies_percent(self):
        assert ledger.discounted_unit_price(Decimal("100.00"), 10) == Decimal("90")

    def test_keeps_full_precision(self):
        assert ledger.discounted_unit_price(Decimal("19.99"), 15) == Decimal("16.9915")

    def test_no_discount(self):
        assert ledger.discounted_unit_price(Decimal("7.49"), 0) == Decimal("7.49")

    def test_full_discount_is_free(self):
        assert ledger.discounted_unit_price(Decimal("7.49"), 100) == Decimal("0")

    def test_rejects_out_of_range_discount(self):
        with pytest.raises(ValueError):
            ledger.discounted_unit_price(Decimal("10.00"), 101)


class TestTaxesAndTotal:
    def test_default_rate_is_thirteen_percent(self):
        assert ledger.compute_taxes(Decimal("180.00")) == Decimal("23.40")

    def test_rate_can_be_overridden(self):
        assert ledger.compute_taxes(Decimal("100.00"), Decimal("0.05")) == Decimal("5.00")

    def test_total_is_sum_of_rounded_parts(self):
        # each part rounds up to 0.01, the rounded sum would be 0.01
        assert ledger.compute_total(Decimal("0.005"), Decimal("0.005")) == Decimal("0.02")


class TestCartTotals:
    def test_empty(self):
        assert ledger.cart_totals([]) == ledger.EMPTY_TOTALS

    def test_reference_scenario(self):
        totals = ledger.cart_totals([(Decimal("100.00"), 10, 2)])
        assert totals.num_items == 2
        assert totals.subtotal == Decimal("180.00")
        assert totals.taxes == Decimal("23.40")
        assert totals.total == Decimal("203.40")

    def test_subtotal_rounded_once_over_all_lines(self):
        # 3 x 16.9915 = 50.9745 and 1 x 0.6633 -> 51.6378 -> 51.64
        totals = ledger.cart_totals([
            (Decimal("19.99"), 15, 3),
            (Decimal("0.99"), 33, 1),
        ])
        assert totals.num_items == 4
        assert totals.subtotal == Decimal("51.64")
        assert totals.taxes == Decimal("6.71")
        assert totals.total == Decimal("58.35")
