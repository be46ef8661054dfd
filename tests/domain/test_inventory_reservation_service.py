"""Unit tests for the InventoryReservationService domain service."""

import pytest

from storefront.domain.exceptions import NotFoundError, OutOfStockError
from storefront.domain.model.inventory import InventoryItem
from storefront.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from tests.fakes import FakeInventoryRepository


def _make_inventory(*specs: tuple[str, str, int, int]) -> FakeInventoryRepository:
    """Create repo with (product_id, name, stock, sold_stock) tuples."""
    items = [
        InventoryItem(product_id=pid, product_name=name, stock=stock, sold_stock=sold)
        for pid, name, stock, sold in specs
    ]
    return FakeInventoryRepository(items)


class TestReserve:

    def test_reserves_all_items(self):
        repo = _make_inventory(("1", "Widget", 100, 0), ("2", "Gadget", 50, 0))
        InventoryReservationService(repo).reserve([("1", 10), ("2", 5)])

        assert repo.get_by_product_id("1").stock == 90
        assert repo.get_by_product_id("1").sold_stock == 10
        assert repo.get_by_product_id("2").stock == 45

    def test_all_or_nothing(self):
        repo = _make_inventory(("1", "Widget", 100, 0), ("2", "Gadget", 2, 0))

        with pytest.raises(OutOfStockError, match="'2'"):
            InventoryReservationService(repo).reserve([("1", 10), ("2", 5)])

        # The Widget decrement was rolled back
        assert repo.get_by_product_id("1").stock == 100
        assert repo.get_by_product_id("1").sold_stock == 0
        assert repo.get_by_product_id("2").stock == 2

    def test_missing_inventory_rolls_back(self):
        repo = _make_inventory(("1", "Widget", 100, 0))

        with pytest.raises(NotFoundError, match="Inventory for product '9'"):
            InventoryReservationService(repo).reserve([("1", 10), ("9", 1)])

        assert repo.get_by_product_id("1").stock == 100


class TestRelease:

    def test_releases_all_items(self):
        repo = _make_inventory(("1", "Widget", 90, 10), ("2", "Gadget", 45, 5))
        InventoryReservationService(repo).release([("1", 10), ("2", 5)])

        assert repo.get_by_product_id("1").stock == 100
        assert repo.get_by_product_id("1").sold_stock == 0
        assert repo.get_by_product_id("2").stock == 50

    def test_failed_release_reapplies_earlier_restocks(self):
        repo = _make_inventory(("1", "Widget", 90, 10))

        with pytest.raises(NotFoundError):
            InventoryReservationService(repo).release([("1", 10), ("9", 1)])

        assert repo.get_by_product_id("1").stock == 90
        assert repo.get_by_product_id("1").sold_stock == 10
