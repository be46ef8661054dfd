"""Domain service: Pricing.

Pure computation of an order's money breakdown from a set of cart lines.
Given the same lines and config it always returns the same breakdown,
which is what lets order history be re-derived and tested.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class PricingConfig:
    tax_rate: Decimal = Decimal("0.15")
    free_shipping_threshold: Money = Money(Decimal("100.00"))
    shipping_fee: Money = Money(Decimal("10.00"))
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.tax_rate, Decimal):
            raise ValidationError(
                f"Tax rate must be a Decimal, got {type(self.tax_rate).__name__}"
            )
        if self.tax_rate < 0:
            raise ValidationError(f"Tax rate cannot be negative, got {self.tax_rate}")
        for money in (self.free_shipping_threshold, self.shipping_fee):
            if money.currency != self.currency:
                raise ValidationError(
                    f"Pricing amounts must be in {self.currency}, got {money.currency}"
                )


DEFAULT_PRICING = PricingConfig()


@dataclass(frozen=True)
class MoneyBreakdown:
    subtotal: Money
    tax: Money
    shipping: Money
    total: Money


def compute_totals(
    lines: Iterable[CartLine],
    config: PricingConfig = DEFAULT_PRICING,
) -> MoneyBreakdown:
    """Price a set of cart lines.

    - subtotal: sum of unit price x quantity
    - tax: subtotal x tax rate, half-up to the cent
    - shipping: free strictly above the threshold, flat fee otherwise
    - total: subtotal + tax + shipping
    """
    subtotal = Money.zero(config.currency)
    for line in lines:
        subtotal = subtotal + line.unit_price * line.quantity

    tax = subtotal.scaled(config.tax_rate)
    if subtotal > config.free_shipping_threshold:
        shipping = Money.zero(config.currency)
    else:
        shipping = config.shipping_fee

    return MoneyBreakdown(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=subtotal + tax + shipping,
    )
