"""Product: the catalog's view of something that can be put in a cart.

The catalog itself is an external collaborator.  The core only reads
products to take name/price/image snapshots when a cart line is created.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Catalog edits replace the stored product.  They never reach existing
    cart lines or orders, which hold their own copies.
    """

    id: str
    name: str
    price: Money
    image: str = ""
