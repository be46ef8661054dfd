"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Services


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", default=0, type=int, show_default=True, help="Opening stock.")
@click.option("--image", default="", help="Image URL.")
@click.option("--id", "product_id", default=None, help="Explicit product ID.")
@click.pass_obj
def product_add(
    services: Services,
    name: str,
    price: str,
    stock: int,
    image: str,
    product_id: str | None,
) -> None:
    """Add a new product to the catalog."""
    try:
        product = services.add_product.handle(
            name=name, price=price, image=image, stock=stock, product_id=product_id
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price} ({stock} in stock)")


@click.command("list")
@click.pass_obj
def product_list(services: Services) -> None:
    """List all products in the catalog."""
    products = services.list_products.handle()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10}")
    click.echo("-" * 38)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {str(p.price):>10}")
