"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from atelier.application.list_products import ListProductsHandler
from atelier.application.recalculate_rating import RecalculateRatingHandler
from atelier.application.set_stock import SetStockHandler
from atelier.domain.exceptions import DomainException
from atelier.infrastructure.bootstrap import Container


def _stock_label(stock_count: int | None) -> str:
    return "untracked" if stock_count is None else str(stock_count)


@click.command("list")
@click.option("--category", default=None, help="Only products in this category.")
@click.pass_obj
def product_list(container: Container, category: str | None) -> None:
    """List active products with per-size stock."""
    products = ListProductsHandler(product_repo=container.product_repo).handle(category)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<16} {'Name':<24} {'Size':<8} {'Price':>10} {'Stock':>10}")
    click.echo("-" * 72)
    for p in products:
        flag = "  (out of stock)" if p.is_out_of_stock else ""
        if not p.sizes:
            click.echo(f"{p.id:<16} {p.name:<24}{flag}")
        for s in p.sizes:
            click.echo(
                f"{p.id:<16} {p.name:<24} {s.size:<8} {s.price:>10} "
                f"{_stock_label(s.stock_count):>10}{flag}"
            )


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--size", required=True, help="Size label, e.g. M.")
@click.option("--count", type=int, default=None, help="Units in stock.")
@click.option("--untracked", is_flag=True, default=False, help="Stop tracking stock for this size.")
@click.pass_obj
def stock_set(
    container: Container,
    product_id: str,
    size: str,
    count: int | None,
    untracked: bool,
) -> None:
    """Set stock for one size of a product."""
    if untracked == (count is not None):
        raise click.ClickException("Pass exactly one of --count or --untracked")

    handler = SetStockHandler(product_repo=container.product_repo)

    try:
        dto = handler.handle(product_id, size, None if untracked else count)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for {dto.name} size {size} set to {_stock_label(count)}")
    if dto.is_out_of_stock:
        click.echo("Every tracked size is now sold out.")


@click.command("recalculate")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.pass_obj
def rating_recalculate(container: Container, product_id: str) -> None:
    """Recompute a product's rating from its reviews."""
    handler = RecalculateRatingHandler(
        product_repo=container.product_repo,
        review_repo=container.review_repo,
    )

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{dto.product_id}: rating {dto.rating} from {dto.review_count} reviews")
