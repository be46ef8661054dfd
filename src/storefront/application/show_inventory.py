"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.list_products import catalog_order
from storefront.domain.repository.inventory_repository import InventoryRepository


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    stock: int
    sold_stock: int


class ShowInventoryHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self) -> list[InventoryLineDTO]:
        items = sorted(self._inventory_repo.list_all(), key=lambda i: catalog_order(i.product_id))
        return [
            InventoryLineDTO(item.product_id, item.product_name, item.stock, item.sold_stock)
            for item in items
        ]
