"""CLI commands for the DiscountCode aggregate."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from atelier.application.create_discount_code import CreateDiscountCodeHandler
from atelier.application.dto import DiscountCodeSpec
from atelier.application.list_discount_codes import ListDiscountCodesHandler
from atelier.domain.exceptions import DomainException
from atelier.infrastructure.bootstrap import Container
from atelier.infrastructure.cli.operator import OPERATOR


def _decimal(value: str | None, option: str) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid amount '{value}'.", param_hint=option)


@click.command("list")
@click.pass_obj
def discount_list(container: Container) -> None:
    """List discount codes with their usage."""
    codes = ListDiscountCodesHandler(discount_repo=container.discount_repo).handle(OPERATOR)

    if not codes:
        click.echo("No discount codes found.")
        return

    click.echo(f"{'Code':<16} {'Type':<11} {'Value':>8} {'Min':>9} {'Uses':>9} {'Active':<7} Expires")
    click.echo("-" * 84)
    for c in codes:
        limit = "-" if c.max_uses is None else str(c.max_uses)
        click.echo(
            f"{c.code:<16} {c.type:<11} {c.value:>8} {c.min_order_amount or '-':>9} "
            f"{str(c.current_uses) + '/' + limit:>9} {'yes' if c.is_active else 'no':<7} "
            f"{c.expires_at or '-'}"
        )


@click.command("create")
@click.option("--code", required=True, help="Code customers type at checkout.")
@click.option(
    "--type",
    "discount_type",
    required=True,
    type=click.Choice(["percentage", "fixed"]),
    help="Percentage off or fixed amount off.",
)
@click.option("--value", required=True, help="Percent (0-100) or amount.")
@click.option("--description", default=None, help="Shown to admins only.")
@click.option("--min-order", default=None, help="Minimum subtotal required.")
@click.option("--max-discount", default=None, help="Cap for percentage codes.")
@click.option("--max-uses", type=int, default=None, help="Total uses allowed.")
@click.option("--expires", type=click.DateTime(), default=None, help="Expiry instant (UTC).")
@click.pass_obj
def discount_create(
    container: Container,
    code: str,
    discount_type: str,
    value: str,
    description: str | None,
    min_order: str | None,
    max_discount: str | None,
    max_uses: int | None,
    expires,
) -> None:
    """Create a new discount code."""
    spec = DiscountCodeSpec(
        code=code,
        discount_type=discount_type,
        discount_value=_decimal(value, "--value"),
        description=description,
        min_purchase=_decimal(min_order, "--min-order"),
        max_discount=_decimal(max_discount, "--max-discount"),
        valid_until=expires,
        usage_limit=max_uses,
    )
    handler = CreateDiscountCodeHandler(discount_repo=container.discount_repo)

    try:
        dto = handler.handle(spec, OPERATOR)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Discount code {dto.code} created ({dto.type} {dto.value})")
