"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

import json
import threading
from decimal import Decimal
from pathlib import Path
from typing import Any

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository


def _product_from_record(record: dict[str, Any]) -> Product:
    return Product(
        id=record["id"],
        name=record["name"],
        price=Money(Decimal(record["price"]), record.get("currency", "USD")),
        image=record.get("image", ""),
    )


def _product_to_record(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": str(product.price.amount),
        "currency": product.price.currency,
        "image": product.image,
    }


class JsonProductRepository(ProductRepository):
    """Catalog stored as a JSON array of product records."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        if not file_path.exists():
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text("[]", encoding="utf-8")

    def get_by_id(self, product_id: str) -> Product | None:
        return self._read().get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._read().values())

    def next_id(self) -> str:
        with self._lock:
            numeric = [int(pid) for pid in self._read() if pid.isdigit()]
        return str(max(numeric, default=0) + 1)

    def save(self, product: Product) -> None:
        with self._lock:
            catalog = self._read()
            catalog[product.id] = product
            records = [_product_to_record(p) for p in catalog.values()]
            self._file_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")

    def _read(self) -> dict[str, Product]:
        with self._lock:
            records = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {record["id"]: _product_from_record(record) for record in records}
