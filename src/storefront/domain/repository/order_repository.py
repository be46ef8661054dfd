"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its human-facing number, or None."""

    @abstractmethod
    def get_by_idempotency_key(self, buyer_id: str, key: str) -> Order | None:
        """Return the order a buyer already placed with *key*, or None."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, in creation order."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order.  Assigns ``id`` to new orders."""
