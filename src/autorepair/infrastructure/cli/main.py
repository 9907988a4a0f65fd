import click

from autorepair.infrastructure.cli.catalog_commands import (
    customer_add,
    customer_delete,
    db_init,
    mechanic_add,
    part_add,
    service_add,
    vehicle_add,
    vehicle_delete,
)
from autorepair.infrastructure.cli.lookup_commands import lookup_service, lookup_vehicles
from autorepair.infrastructure.cli.order_commands import (
    order_create,
    order_delete,
    order_list,
    order_show,
    order_update,
)
from autorepair.infrastructure.config import get_settings
from autorepair.infrastructure.logger import configure_logging


@click.group()
def cli() -> None:
    """AutoRepair: service orders for a repair shop."""
    configure_logging(get_settings())


@cli.group()
def db() -> None:
    """Manage the database."""


@cli.group()
def order() -> None:
    """Manage service orders."""


@cli.group()
def lookup() -> None:
    """Picker lookups."""


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def vehicle() -> None:
    """Manage vehicles."""


@cli.group()
def service() -> None:
    """Manage the service catalog."""


@cli.group()
def part() -> None:
    """Manage replacement parts."""


@cli.group()
def mechanic() -> None:
    """Manage mechanics."""


# Register subcommands
db.add_command(db_init)
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_update)
lookup.add_command(lookup_service)
lookup.add_command(lookup_vehicles)
customer.add_command(customer_add)
customer.add_command(customer_delete)
vehicle.add_command(vehicle_add)
vehicle.add_command(vehicle_delete)
service.add_command(service_add)
part.add_command(part_add)
mechanic.add_command(mechanic_add)
