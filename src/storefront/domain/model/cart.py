"""Cart aggregate: a buyer's mutable, pre-checkout selection.

A cart holds at most one line per product.  Each line carries the name,
price and image the product had when the line was created; checkout prices
the order from these snapshots, never from the live catalog.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from storefront.domain.exceptions import NotFoundError, ValidationError
from storefront.domain.model.value_objects import Money

MIN_LINE_QUANTITY = 1
MAX_LINE_QUANTITY = 99


@dataclass
class CartLine:
    product_id: str
    name: str
    unit_price: Money  # snapshot at add time
    image: str
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """Aggregate root for a single buyer's cart.

    Quantity rules:
    - ``add`` merges into an existing line and clamps the sum to 99;
      a new line above 99 is rejected
    - ``set_quantity`` below 1 removes the line, above 99 is rejected
    """

    buyer_id: str
    lines: list[CartLine] = field(default_factory=list)

    # --- Mutations ------------------------------------------------------------

    def quantity_after_add(self, product_id: str, quantity: int) -> int:
        """The quantity a line would have if ``add`` were called now."""
        check_add_quantity(quantity)
        existing = self.find(product_id)
        if existing is None:
            check_line_quantity(quantity)
            return quantity
        return min(existing.quantity + quantity, MAX_LINE_QUANTITY)

    def add(
        self,
        product_id: str,
        name: str,
        unit_price: Money,
        image: str,
        quantity: int,
    ) -> CartLine:
        """Add *quantity* units, merging into the existing line if present.

        The snapshot arguments are used only when a new line is created;
        an existing line keeps the name/price/image it was created with.
        """
        new_quantity = self.quantity_after_add(product_id, quantity)
        existing = self.find(product_id)
        if existing is not None:
            existing.quantity = new_quantity
            return existing

        line = CartLine(
            product_id=product_id,
            name=name,
            unit_price=unit_price,
            image=image,
            quantity=new_quantity,
        )
        self.lines.append(line)
        return line

    def set_quantity(self, product_id: str, quantity: int) -> CartLine | None:
        """Set a line's quantity.  Returns None when the line was removed."""
        if not isinstance(quantity, int) or isinstance(quantity, bool):
            raise ValidationError("Quantity must be an integer", fields=["quantity"])
        line = self._get(product_id)
        if quantity < MIN_LINE_QUANTITY:
            self.remove(product_id)
            return None
        check_line_quantity(quantity)
        line.quantity = quantity
        return line

    def remove(self, product_id: str) -> None:
        line = self._get(product_id)
        self.lines.remove(line)

    def clear(self) -> None:
        self.lines.clear()

    # --- Queries --------------------------------------------------------------

    def find(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def snapshot(self) -> list[CartLine]:
        """Deep copy of the lines; mutating it never touches the cart."""
        return copy.deepcopy(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    # --- Internal helpers -----------------------------------------------------

    def _get(self, product_id: str) -> CartLine:
        line = self.find(product_id)
        if line is None:
            raise NotFoundError("Cart item", product_id)
        return line


def check_add_quantity(quantity: int) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError("Quantity must be an integer", fields=["quantity"])
    if quantity < MIN_LINE_QUANTITY:
        raise ValidationError("Quantity must be at least 1", fields=["quantity"])


def check_line_quantity(quantity: int) -> None:
    if quantity > MAX_LINE_QUANTITY:
        raise ValidationError(
            f"Quantity cannot exceed {MAX_LINE_QUANTITY} per item",
            fields=["quantity"],
        )
