import logging

import click

from storefront.infrastructure.bootstrap import default_services
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_set,
    cart_show,
)
from storefront.infrastructure.cli.inventory_commands import inventory_set, inventory_show
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_checkout,
    order_list,
    order_pay,
    order_show,
    order_stats,
    order_status,
)
from storefront.infrastructure.cli.product_commands import product_add, product_list
from storefront.infrastructure.config import LOG_LEVELS, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override STOREFRONT_LOG_LEVEL.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Storefront: shopping carts and order processing"""
    settings = get_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    if ctx.obj is None:
        ctx.obj = default_services(settings)


@cli.group()
def cart() -> None:
    """Manage a buyer's cart."""


@cli.group()
def order() -> None:
    """Check out and manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@click.pass_obj
def serve(services, host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    from storefront.infrastructure.api.app import create_app

    uvicorn.run(create_app(services), host=host, port=port)


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_set)
cart.add_command(cart_remove)
cart.add_command(cart_clear)
cart.add_command(cart_show)
order.add_command(order_checkout)
order.add_command(order_show)
order.add_command(order_cancel)
order.add_command(order_status)
order.add_command(order_pay)
order.add_command(order_list)
order.add_command(order_stats)
product.add_command(product_add)
product.add_command(product_list)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
