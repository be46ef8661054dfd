"""Application service: Set Inventory use case.

Overwrites the on-hand count for a catalog product.  Units already sold
are history and stay untouched.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import NotFoundError, ValidationError
from storefront.domain.model.inventory import InventoryItem
from storefront.domain.repository.inventory_repository import InventoryRepository
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class SetInventoryHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._product_repo = product_repo

    def handle(self, product_id: str, stock: int) -> InventoryItem:
        if stock < 0:
            raise ValidationError("Stock cannot be negative", fields=["stock"])
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)

        item = self._inventory_repo.get_by_product_id(product.id) or InventoryItem(
            product_id=product.id, product_name=product.name, stock=0
        )
        previous = item.stock
        item.stock = stock
        self._inventory_repo.save(item)
        logger.info("Stock for product %s set from %d to %d", product.id, previous, stock)
        return item
