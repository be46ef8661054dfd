"""Domain service: Inventory Reservation.

Coordinates the cross-aggregate stock moves of checkout and cancellation.
Each single-product move is atomic in the repository; this service makes
the *multi*-product move all-or-nothing by compensating: if any product
fails, the moves already applied in this call are undone before the error
propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from storefront.domain.repository.inventory_repository import InventoryRepository

logger = logging.getLogger(__name__)


class InventoryReservationService:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def reserve(self, quantities: Iterable[tuple[str, int]]) -> None:
        """Take every ``(product_id, quantity)`` out of stock, or none of them.

        Raises OutOfStockError (or NotFoundError) for the first product
        that cannot be satisfied, after rolling back earlier decrements.
        """
        applied: list[tuple[str, int]] = []
        try:
            for product_id, qty in quantities:
                self._inventory_repo.check_and_decrement(product_id, qty)
                applied.append((product_id, qty))
        except Exception:
            logger.info("Reservation failed; rolling back %d decrement(s)", len(applied))
            for product_id, qty in reversed(applied):
                self._inventory_repo.restock(product_id, qty)
            raise

    def release(self, quantities: Iterable[tuple[str, int]]) -> None:
        """Return every ``(product_id, quantity)`` to stock, or none of them."""
        applied: list[tuple[str, int]] = []
        try:
            for product_id, qty in quantities:
                self._inventory_repo.restock(product_id, qty)
                applied.append((product_id, qty))
        except Exception:
            logger.warning("Restock failed; re-applying %d decrement(s)", len(applied))
            for product_id, qty in reversed(applied):
                self._inventory_repo.check_and_decrement(product_id, qty)
            raise
