"""Application service: List Products use case (query)."""

from __future__ import annotations

from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository


def catalog_order(product_id: str) -> tuple[bool, int, str]:
    """Sort key: numeric ids ascending, then any others alphabetically."""
    numeric = product_id.isdigit()
    return (not numeric, int(product_id) if numeric else 0, product_id)


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self) -> list[Product]:
        return sorted(self._product_repo.list_all(), key=lambda p: catalog_order(p.id))
