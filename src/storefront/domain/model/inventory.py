"""InventoryItem aggregate: on-hand stock and units sold per product.

Checkout moves units from ``stock`` to ``sold_stock``; cancelling a
reserved order moves them back.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import OutOfStockError, ValidationError


@dataclass
class InventoryItem:
    """Aggregate root for inventory tracking.

    Invariants:
    - ``stock`` is always >= 0
    - ``sold_stock`` is always >= 0
    """

    product_id: str
    product_name: str
    stock: int
    sold_stock: int = 0

    def has_available(self, quantity: int) -> bool:
        return self.stock >= quantity

    def decrement(self, quantity: int) -> None:
        """Take *quantity* units out of stock for an order.

        Raises OutOfStockError if fewer than *quantity* units are on hand.
        """
        if quantity <= 0:
            raise ValidationError("Decrement quantity must be positive")
        if not self.has_available(quantity):
            raise OutOfStockError(self.product_id, quantity, self.stock)
        self.stock -= quantity
        self.sold_stock += quantity

    def restock(self, quantity: int) -> None:
        """Return *quantity* units of a cancelled order to stock."""
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        if quantity > self.sold_stock:
            raise ValidationError(
                f"Cannot restock {quantity} of {self.product_name} "
                f"(only {self.sold_stock} sold)"
            )
        self.stock += quantity
        self.sold_stock -= quantity
