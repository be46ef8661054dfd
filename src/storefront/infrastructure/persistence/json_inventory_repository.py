"""JSON-file-backed implementation of InventoryRepository.

``check_and_decrement`` and ``restock`` hold the repository lock across
their whole read-modify-write, which makes them atomic within a process.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.inventory import InventoryItem
from storefront.domain.repository.inventory_repository import InventoryRepository


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- InventoryRepository interface ----------------------------------------

    def get_by_product_id(self, product_id: str) -> InventoryItem | None:
        for raw in self._load_raw():
            if raw["product_id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[InventoryItem]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, item: InventoryItem) -> None:
        with self._lock:
            records = self._load_raw()
            replaced = False
            for i, raw in enumerate(records):
                if raw["product_id"] == item.product_id:
                    records[i] = self._to_raw(item)
                    replaced = True
                    break
            if not replaced:
                records.append(self._to_raw(item))
            self._persist_raw(records)

    def check_and_decrement(self, product_id: str, quantity: int) -> None:
        with self._lock:
            item = self._require(product_id)
            item.decrement(quantity)
            self.save(item)

    def restock(self, product_id: str, quantity: int) -> None:
        with self._lock:
            item = self._require(product_id)
            item.restock(quantity)
            self.save(item)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: InventoryItem) -> dict:
        return {
            "product_id": item.product_id,
            "product_name": item.product_name,
            "stock": item.stock,
            "sold_stock": item.sold_stock,
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryItem:
        return InventoryItem(
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            stock=raw["stock"],
            sold_stock=raw.get("sold_stock", 0),
        )

    # --- File helpers ---------------------------------------------------------

    def _require(self, product_id: str) -> InventoryItem:
        item = self.get_by_product_id(product_id)
        if item is None:
            raise NotFoundError("Inventory for product", product_id)
        return item

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
