"""JSON-file-backed implementation of CartRepository.

Carts are stored as one object keyed by buyer id.  An empty cart is
removed from the file rather than stored.
"""

from __future__ import annotations

import json
import threading
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- CartRepository interface ---------------------------------------------

    def get_for_buyer(self, buyer_id: str) -> Cart:
        raw = self._load_raw().get(buyer_id)
        if raw is None:
            return Cart(buyer_id=buyer_id)
        return self._to_domain(buyer_id, raw)

    def save(self, cart: Cart) -> None:
        with self._lock:
            carts = self._load_raw()
            if cart.is_empty:
                carts.pop(cart.buyer_id, None)
            else:
                carts[cart.buyer_id] = self._to_raw(cart)
            self._persist_raw(carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> list[dict]:
        return [
            {
                "product_id": line.product_id,
                "name": line.name,
                "unit_price": str(line.unit_price.amount),
                "currency": line.unit_price.currency,
                "image": line.image,
                "quantity": line.quantity,
            }
            for line in cart.lines
        ]

    @staticmethod
    def _to_domain(buyer_id: str, raw: list[dict]) -> Cart:
        return Cart(
            buyer_id=buyer_id,
            lines=[
                CartLine(
                    product_id=line["product_id"],
                    name=line["name"],
                    unit_price=Money(Decimal(line["unit_price"]), line.get("currency", "USD")),
                    image=line.get("image", ""),
                    quantity=line["quantity"],
                )
                for line in raw
            ],
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, list[dict]]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, carts: dict[str, list[dict]]) -> None:
        self._file_path.write_text(
            json.dumps(carts, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
