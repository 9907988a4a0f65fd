"""CLI commands for the picker lookups."""

from __future__ import annotations

import click

from autorepair.application.get_customer_vehicles import GetCustomerVehiclesHandler
from autorepair.application.get_service_entry import GetServiceEntryHandler
from autorepair.domain.exceptions import DomainException
from autorepair.infrastructure.bootstrap import gateway
from autorepair.infrastructure.cli.formatting import fail, money


@click.command("vehicles")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID.")
def lookup_vehicles(customer_id: int) -> None:
    """List a customer's vehicles."""
    try:
        dto = GetCustomerVehiclesHandler(gateway()).handle(customer_id)
    except DomainException as exc:
        raise fail(exc)

    if not dto.vehicles:
        click.echo(f"No vehicles for customer #{customer_id}.")
        return

    click.echo(f"Customer #{dto.customer_id}: {dto.customer_name}  RFC: {dto.customer_rfc}")
    for v in dto.vehicles:
        click.echo(f"  {v.serial_number:<20} {v.display_label}")


@click.command("service")
@click.option("--id", "service_id", required=True, type=int, help="Service ID.")
def lookup_service(service_id: int) -> None:
    """Show a service's name and current pre-tax cost."""
    try:
        entry = GetServiceEntryHandler(gateway()).handle(service_id)
    except DomainException as exc:
        raise fail(exc)

    if entry is None:
        click.echo(f"No service #{service_id}.")
        return

    click.echo(f"Service #{entry.service_id} '{entry.name}' costs {money(entry.cost)}")
