"""CLI commands for the ServiceOrder aggregate."""

from __future__ import annotations

import click

from autorepair.application.delete_order import DeleteOrderHandler
from autorepair.application.dto import OrderDetailDTO, ReplacementSelection, ServiceSelection
from autorepair.application.list_orders import ListOrdersHandler
from autorepair.application.show_order import ShowOrderHandler
from autorepair.domain.exceptions import DomainException
from autorepair.infrastructure.bootstrap import (
    create_order_handler,
    gateway,
    update_order_handler,
)
from autorepair.infrastructure.cli.formatting import fail, money, parse_ids, parse_pairs


def _services(raw: str) -> list[ServiceSelection]:
    return [ServiceSelection(service_id=i, quantity=q) for i, q in parse_pairs(raw, "service")]


def _parts(raw: str) -> list[ReplacementSelection]:
    return [ReplacementSelection(replacement_id=i, quantity=q) for i, q in parse_pairs(raw, "part")]


@click.command("create")
@click.option("--vehicle", "serial_number", required=True, help="Vehicle serial number.")
@click.option("--services", required=True, help="Services as 'ServiceID:Qty,ServiceID:Qty'.")
@click.option("--parts", default="", help="Parts as 'PartID:Qty,PartID:Qty'.")
@click.option("--mechanics", default="", help="Mechanic employee IDs as 'ID,ID'.")
def order_create(serial_number: str, services: str, parts: str, mechanics: str) -> None:
    """Open a new service order for a vehicle."""
    handler = create_order_handler()

    try:
        dto = handler.handle(
            serial_number,
            _services(services),
            replacement_selections=_parts(parts),
            mechanic_ids=parse_ids(mechanics, "mechanic"),
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Order #{dto.folio} created  (cost={money(dto.cost)}, version={dto.version})")


@click.command("update")
@click.option("--folio", required=True, type=int, help="Order folio.")
@click.option(
    "--version",
    "expected_version",
    type=int,
    required=True,
    help="Version shown by `order show`; the update fails if the order changed since.",
)
@click.option("--state", default=None, help="New state label.")
@click.option("--vehicle", "serial_number", default=None, help="Move the order to this vehicle.")
@click.option("--services", default=None, help="Replace services: 'ServiceID:Qty,...'.")
@click.option("--parts", default=None, help="Replace parts: 'PartID:Qty,...'.")
@click.option("--mechanics", default=None, help="Replace mechanics: 'ID,ID'.")
def order_update(
    folio: int,
    expected_version: int,
    state: str | None,
    serial_number: str | None,
    services: str | None,
    parts: str | None,
    mechanics: str | None,
) -> None:
    """Edit an order. Only the options given are changed."""
    try:
        update_order_handler().handle(
            folio,
            expected_version=expected_version,
            state=state,
            serial_number=serial_number,
            service_selections=_services(services) if services is not None else None,
            replacement_selections=_parts(parts) if parts is not None else None,
            mechanic_ids=parse_ids(mechanics, "mechanic") if mechanics is not None else None,
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Order #{folio} updated.")


@click.command("delete")
@click.option("--folio", required=True, type=int, help="Order folio to delete.")
def order_delete(folio: int) -> None:
    """Delete an order and all of its line items."""
    handler = DeleteOrderHandler(gateway())

    try:
        handler.handle(folio)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Order #{folio} deleted.")


def _display_order(dto: OrderDetailDTO) -> None:
    vehicle = dto.vehicle
    click.echo(f"Order #{dto.folio}  (state={dto.state}, version={dto.version})")
    click.echo(f"Customer: {vehicle.customer_name}  RFC: {vehicle.customer_rfc}")
    click.echo(
        f"Vehicle:  {vehicle.brand} {vehicle.model} {vehicle.year}  "
        f"serial={vehicle.serial_number} plate={vehicle.plate_number}"
    )
    click.echo(f"Entered:  {dto.entry_date:%Y-%m-%d %H:%M}")
    click.echo(f"Due:      {dto.estimated_delivery_time:%Y-%m-%d %H:%M}")
    if dto.delivery_time:
        click.echo(f"Delivered: {dto.delivery_time:%Y-%m-%d %H:%M}")
    click.echo()

    click.echo(f"  {'Service':<30} {'Qty':>5} {'Cost':>12} {'Total':>14}")
    click.echo(f"  {'-'*64}")
    for line in dto.services:
        click.echo(
            f"  {line.name:<30} {line.quantity:>5} "
            f"{money(line.unit_cost):>12} {money(line.line_total):>14}"
        )

    if dto.replacements:
        click.echo()
        click.echo(f"  {'Part':<30} {'Qty':>5} {'Price':>12} {'Total':>14}")
        click.echo(f"  {'-'*64}")
        for line in dto.replacements:
            label = f"{line.name} ({line.brand})"
            click.echo(
                f"  {label:<30} {line.quantity:>5} "
                f"{money(line.unit_price):>12} {money(line.line_total):>14}"
            )

    if dto.mechanics:
        click.echo()
        click.echo("  Mechanics: " + ", ".join(m.full_name for m in dto.mechanics))

    click.echo()
    click.echo(f"  {'Order Total (IVA incl.)':<37} {money(dto.cost):>27}")


@click.command("show")
@click.option("--folio", required=True, type=int, help="Order folio to display.")
def order_show(folio: int) -> None:
    """Show an order with its services, parts and mechanics."""
    handler = ShowOrderHandler(gateway())

    try:
        dto = handler.handle(folio)
    except DomainException as exc:
        raise fail(exc)

    _display_order(dto)


@click.command("list")
def order_list() -> None:
    """List all orders, newest first."""
    try:
        orders = ListOrdersHandler(gateway()).handle()
    except DomainException as exc:
        raise fail(exc)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Folio':<7} {'State':<12} {'Entered':<17} {'Vehicle':<32} {'Cost':>14}")
    click.echo("-" * 86)
    for o in orders:
        click.echo(
            f"{o.folio:<7} {o.state:<12} {o.entry_date:%Y-%m-%d %H:%M} "
            f"{o.vehicle_label:<32} {money(o.cost):>14}"
        )
