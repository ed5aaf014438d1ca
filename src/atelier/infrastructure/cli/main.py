import click

from atelier.infrastructure.bootstrap import build_container
from atelier.infrastructure.cli.discount_commands import discount_create, discount_list
from atelier.infrastructure.cli.order_commands import order_list, order_show, order_status
from atelier.infrastructure.cli.product_commands import (
    product_list,
    rating_recalculate,
    stock_set,
)
from atelier.infrastructure.cli.serve_command import serve
from atelier.infrastructure.logging_config import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Atelier: storefront operations"""
    if ctx.obj is None:
        ctx.obj = build_container()
    configure_logging(ctx.obj.settings.log_level)


@cli.group()
def order() -> None:
    """Inspect and progress orders."""


@cli.group()
def product() -> None:
    """Browse the catalog."""


@cli.group()
def stock() -> None:
    """Manage per-size stock."""


@cli.group()
def discount() -> None:
    """Manage discount codes."""


@cli.group()
def rating() -> None:
    """Maintain product ratings."""


# Register subcommands
cli.add_command(serve)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_list)
stock.add_command(stock_set)
discount.add_command(discount_create)
discount.add_command(discount_list)
rating.add_command(rating_recalculate)
