"""Unit tests for the pricing engine."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.value_objects import Money
from storefront.domain.service.pricing import PricingConfig, compute_totals


def _line(price: str, quantity: int = 1, product_id: str = "1") -> CartLine:
    return CartLine(
        product_id=product_id,
        name="Thing",
        unit_price=Money.of(price),
        image="",
        quantity=quantity,
    )


class TestComputeTotals:

    def test_below_threshold_pays_shipping(self):
        totals = compute_totals([_line("30.00", 3)])
        assert totals.subtotal == Money.of("90.00")
        assert totals.tax == Money.of("13.50")
        assert totals.shipping == Money.of("10.00")
        assert totals.total == Money.of("113.50")

    def test_above_threshold_ships_free(self):
        totals = compute_totals([_line("100.00"), _line("50.00", product_id="2")])
        assert totals.subtotal == Money.of("150.00")
        assert totals.tax == Money.of("22.50")
        assert totals.shipping == Money.zero()
        assert totals.total == Money.of("172.50")

    def test_exactly_at_threshold_still_pays_shipping(self):
        totals = compute_totals([_line("100.00")])
        assert totals.shipping == Money.of("10.00")

    def test_empty_lines(self):
        totals = compute_totals([])
        assert totals.subtotal == Money.zero()
        assert totals.shipping == Money.of("10.00")

    def test_deterministic(self):
        lines = [_line("19.99", 3), _line("5.01", 2, "2")]
        assert compute_totals(lines) == compute_totals(lines)

    def test_total_is_sum_of_parts(self):
        totals = compute_totals([_line("33.33", 3)])
        assert totals.total == totals.subtotal + totals.tax + totals.shipping

    def test_custom_config(self):
        config = PricingConfig(
            tax_rate=Decimal("0.20"),
            free_shipping_threshold=Money.of("50.00"),
            shipping_fee=Money.of("4.99"),
        )
        totals = compute_totals([_line("40.00")], config)
        assert totals.tax == Money.of("8.00")
        assert totals.shipping == Money.of("4.99")


class TestPricingConfig:

    def test_negative_tax_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            PricingConfig(tax_rate=Decimal("-0.1"))

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="must be in EUR"):
            PricingConfig(currency="EUR")
