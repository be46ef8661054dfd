"""Abstract repository for InventoryItem aggregate.

Besides plain load/save, the inventory exposes the two operations checkout
and cancellation depend on.  Implementations must make each of them atomic
per product: two concurrent ``check_and_decrement`` calls may never both
succeed against stock that only covers one of them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.inventory import InventoryItem


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> InventoryItem | None:
        """Return the inventory record for a product, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every inventory record."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated inventory record."""

    @abstractmethod
    def check_and_decrement(self, product_id: str, quantity: int) -> None:
        """Atomically move *quantity* units from stock to sold stock.

        Raises OutOfStockError if stock < quantity (nothing changes), and
        NotFoundError if the product has no inventory record.
        """

    @abstractmethod
    def restock(self, product_id: str, quantity: int) -> None:
        """Atomically move *quantity* units from sold stock back to stock."""
