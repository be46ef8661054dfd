"""Application service: Add Product use case.

The catalog is owned elsewhere; this exists so a fresh deployment (or the
CLI) can seed products and their opening stock.
"""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.inventory import InventoryItem
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.inventory_repository import InventoryRepository
from storefront.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._product_repo = product_repo
        self._inventory_repo = inventory_repo

    def handle(
        self,
        name: str,
        price: str,
        image: str = "",
        stock: int = 0,
        product_id: str | None = None,
    ) -> Product:
        """Add a new product to the catalog with an opening stock level."""
        if not name or not name.strip():
            raise ValidationError("Product name is required", fields=["name"])
        if stock < 0:
            raise ValidationError("Stock cannot be negative", fields=["stock"])

        if product_id is None:
            product_id = self._product_repo.next_id()
        elif self._product_repo.get_by_id(product_id) is not None:
            raise ValidationError(f"Product '{product_id}' already exists", fields=["id"])

        money = Money.of(price)
        if money.amount <= 0:
            raise ValidationError("Product price must be greater than zero", fields=["price"])

        product = Product(id=product_id, name=name.strip(), price=money, image=image)
        self._product_repo.save(product)
        self._inventory_repo.save(
            InventoryItem(product_id=product.id, product_name=product.name, stock=stock)
        )
        return product
