"""Application service: Cart Store.

Owns each buyer's mutable cart.  Looks products up in the catalog to
take line snapshots, checks requested quantities against inventory, and
prices the cart with the pricing engine.  A cart has a single writer (its
buyer), so no locking happens here.
"""

from __future__ import annotations

import logging

from storefront.application.dto import CartDTO, CartItemSpec, cart_to_dto
from storefront.domain.exceptions import NotFoundError, OutOfStockError
from storefront.domain.model.cart import (
    MAX_LINE_QUANTITY,
    MIN_LINE_QUANTITY,
    Cart,
    CartLine,
    check_add_quantity,
    check_line_quantity,
)
from storefront.domain.model.product import Product
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.inventory_repository import InventoryRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.pricing import (
    DEFAULT_PRICING,
    MoneyBreakdown,
    PricingConfig,
    compute_totals,
)

logger = logging.getLogger(__name__)


class CartStore:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
        pricing: PricingConfig = DEFAULT_PRICING,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._inventory_repo = inventory_repo
        self._pricing = pricing

    # --- Commands -------------------------------------------------------------

    def add_item(self, buyer_id: str, product_id: str, quantity: int) -> CartDTO:
        """Add units of a product, merging into the existing line (max 99)."""
        cart = self._cart_repo.get_for_buyer(buyer_id)
        wanted = cart.quantity_after_add(product_id, quantity)
        product = self._get_product(product_id)
        self._ensure_in_stock(product_id, wanted)

        cart.add(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,
            image=product.image,
            quantity=quantity,
        )
        self._cart_repo.save(cart)
        logger.debug("Cart %s: %s x%d", buyer_id, product_id, wanted)
        return self._to_dto(cart)

    def set_quantity(self, buyer_id: str, product_id: str, quantity: int) -> CartDTO:
        """Set a line's quantity; below 1 removes it, above 99 is rejected."""
        cart = self._cart_repo.get_for_buyer(buyer_id)
        in_range = isinstance(quantity, int) and MIN_LINE_QUANTITY <= quantity <= MAX_LINE_QUANTITY
        if in_range and cart.find(product_id) is not None:
            self._ensure_in_stock(product_id, quantity)
        cart.set_quantity(product_id, quantity)
        self._cart_repo.save(cart)
        return self._to_dto(cart)

    def remove_item(self, buyer_id: str, product_id: str) -> CartDTO:
        cart = self._cart_repo.get_for_buyer(buyer_id)
        cart.remove(product_id)
        self._cart_repo.save(cart)
        return self._to_dto(cart)

    def clear(self, buyer_id: str) -> CartDTO:
        cart = self._cart_repo.get_for_buyer(buyer_id)
        cart.clear()
        self._cart_repo.save(cart)
        return self._to_dto(cart)

    # --- Queries --------------------------------------------------------------

    def snapshot(self, buyer_id: str) -> list[CartLine]:
        return self._cart_repo.get_for_buyer(buyer_id).snapshot()

    def view(self, buyer_id: str) -> CartDTO:
        return self._to_dto(self._cart_repo.get_for_buyer(buyer_id))

    def totals(self, buyer_id: str) -> MoneyBreakdown:
        return compute_totals(self._cart_repo.get_for_buyer(buyer_id).lines, self._pricing)

    def lines_for(self, items: list[CartItemSpec]) -> list[CartLine]:
        """Build transient cart lines for explicit items, snapshotting the catalog now.

        Each quantity must be 1..99.  Repeated product ids are merged the
        same way ``add_item`` merges.
        Nothing is persisted; checkout reserves the stock.
        """
        scratch = Cart(buyer_id="")
        for spec in items:
            check_add_quantity(spec.quantity)
            check_line_quantity(spec.quantity)
            product = self._get_product(spec.product_id)
            scratch.add(
                product_id=product.id,
                name=product.name,
                unit_price=product.price,
                image=product.image,
                quantity=spec.quantity,
            )
        return scratch.snapshot()

    # --- Internal helpers -----------------------------------------------------

    def _get_product(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def _ensure_in_stock(self, product_id: str, quantity: int) -> None:
        inv = self._inventory_repo.get_by_product_id(product_id)
        if inv is None or not inv.has_available(quantity):
            raise OutOfStockError(product_id, quantity, inv.stock if inv is not None else 0)

    def _to_dto(self, cart: Cart) -> CartDTO:
        return cart_to_dto(cart, compute_totals(cart.lines, self._pricing))
