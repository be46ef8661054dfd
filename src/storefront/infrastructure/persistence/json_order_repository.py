"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.order import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentMethod,
)
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from storefront.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        return self._find(lambda raw: raw["id"] == order_id)

    def get_by_order_number(self, order_number: str) -> Order | None:
        return self._find(lambda raw: raw["order_number"] == order_number)

    def get_by_idempotency_key(self, buyer_id: str, key: str) -> Order | None:
        return self._find(
            lambda raw: raw["buyer_id"] == buyer_id and raw.get("idempotency_key") == key
        )

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, order: Order) -> None:
        with self._lock:
            orders = self._load_raw()

            if order.id is None:
                order.id = max((o["id"] for o in orders), default=0) + 1

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    replaced = True
                    break
            if not replaced:
                orders.append(self._to_raw(order))

            self._persist_raw(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "buyer_id": order.buyer_id,
            "status": order.status.value,
            "payment_method": order.payment_method.value,
            "currency": order.total_price.currency,
            "items_price": str(order.items_price.amount),
            "tax_price": str(order.tax_price.amount),
            "shipping_price": str(order.shipping_price.amount),
            "total_price": str(order.total_price.amount),
            "shipping_address": order.shipping_address.to_dict(),
            "is_paid": order.is_paid,
            "paid_at": _dt_to_raw(order.paid_at),
            "delivered_at": _dt_to_raw(order.delivered_at),
            "created_at": order.created_at.isoformat(),
            "notes": order.notes,
            "idempotency_key": order.idempotency_key,
            "checkout_url": order.checkout_url,
            "payment_reference": order.payment_reference,
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "unit_price": str(item.unit_price.amount),
                    "image": item.image,
                    "quantity": item.quantity.value,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")

        def money(value: str) -> Money:
            return Money(Decimal(value), currency)

        items = tuple(
            OrderLineItem(
                product_id=i["product_id"],
                name=i["name"],
                unit_price=money(i["unit_price"]),
                image=i.get("image", ""),
                quantity=Quantity(i["quantity"]),
            )
            for i in raw["items"]
        )
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            buyer_id=raw["buyer_id"],
            items=items,
            items_price=money(raw["items_price"]),
            tax_price=money(raw["tax_price"]),
            shipping_price=money(raw["shipping_price"]),
            total_price=money(raw["total_price"]),
            shipping_address=ShippingAddress.from_dict(raw["shipping_address"]),
            payment_method=PaymentMethod(raw["payment_method"]),
            status=OrderStatus(raw["status"]),
            is_paid=raw.get("is_paid", False),
            paid_at=_dt_from_raw(raw.get("paid_at")),
            delivered_at=_dt_from_raw(raw.get("delivered_at")),
            created_at=datetime.fromisoformat(raw["created_at"]),
            notes=raw.get("notes"),
            idempotency_key=raw.get("idempotency_key"),
            checkout_url=raw.get("checkout_url"),
            payment_reference=raw.get("payment_reference"),
        )

    # --- File helpers ---------------------------------------------------------

    def _find(self, predicate) -> Order | None:
        for raw in self._load_raw():
            if predicate(raw):
                return self._to_domain(raw)
        return None

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        with self._lock:
            self._file_path.write_text(
                json.dumps(orders, indent=2) + "\n", encoding="utf-8"
            )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _dt_to_raw(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt_from_raw(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
