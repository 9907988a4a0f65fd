"""CLI commands for the database and the catalog rows orders depend on."""

from __future__ import annotations

import click

from autorepair.application.delete_vehicle import DeleteCustomerHandler, DeleteVehicleHandler
from autorepair.application.register_catalog import (
    RegisterCustomerHandler,
    RegisterMechanicHandler,
    RegisterReplacementHandler,
    RegisterServiceHandler,
)
from autorepair.application.save_vehicle import SaveVehicleHandler
from autorepair.domain.exceptions import DomainException
from autorepair.domain.model.catalog import Customer, Mechanic, Replacement, Service, Vehicle
from autorepair.domain.model.value_objects import Money
from autorepair.infrastructure.bootstrap import gateway, store_engine
from autorepair.infrastructure.cli.formatting import fail
from autorepair.infrastructure.persistence.sql_gateway import create_schema


@click.command("init")
def db_init() -> None:
    """Create any missing tables."""
    engine = store_engine()
    create_schema(engine)
    engine.dispose()
    click.echo("Database ready.")


# --- Customers ----------------------------------------------------------------


@click.command("add")
@click.option("--rfc", required=True, help="Tax ID (RFC), up to 13 characters.")
@click.option("--name", required=True)
@click.option("--first-lastname", required=True)
@click.option("--second-lastname", default=None)
@click.option("--phone", "main_phone", default="")
@click.option("--email", default=None)
def customer_add(
    rfc: str,
    name: str,
    first_lastname: str,
    second_lastname: str | None,
    main_phone: str,
    email: str | None,
) -> None:
    """Register a customer."""
    try:
        customer = RegisterCustomerHandler(gateway()).handle(
            Customer(
                customer_id=None,
                rfc=rfc,
                name=name,
                first_lastname=first_lastname,
                second_lastname=second_lastname,
                main_phone=main_phone,
                email=email,
            )
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Customer #{customer.customer_id} '{customer.full_name}' added")


@click.command("delete")
@click.option("--id", "customer_id", required=True, type=int, help="Customer ID.")
def customer_delete(customer_id: int) -> None:
    """Delete a customer and its vehicles (refused while any has orders)."""
    try:
        DeleteCustomerHandler(gateway()).handle(customer_id)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Customer #{customer_id} deleted.")


# --- Vehicles -----------------------------------------------------------------


@click.command("add")
@click.option("--serial", "serial_number", required=True, help="Serial number (VIN).")
@click.option("--plate", "plate_number", required=True)
@click.option("--brand", required=True)
@click.option("--model", required=True)
@click.option("--year", required=True, type=int)
@click.option("--color", required=True)
@click.option("--mileage", required=True, type=int)
@click.option("--customer", "customer_id", required=True, type=int, help="Owner's customer ID.")
@click.option("--type", "vehicle_type", default=None)
def vehicle_add(
    serial_number: str,
    plate_number: str,
    brand: str,
    model: str,
    year: int,
    color: str,
    mileage: int,
    customer_id: int,
    vehicle_type: str | None,
) -> None:
    """Register or update a vehicle. Antiquity is derived from the year."""
    try:
        vehicle = SaveVehicleHandler(gateway()).handle(
            Vehicle(
                serial_number=serial_number,
                plate_number=plate_number,
                brand=brand,
                model=model,
                year=year,
                color=color,
                mileage=mileage,
                customer_id=customer_id,
                type=vehicle_type,
            )
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Vehicle '{vehicle.serial_number}' saved ({vehicle.antiquity} years old)")


@click.command("delete")
@click.option("--serial", "serial_number", required=True, help="Serial number.")
def vehicle_delete(serial_number: str) -> None:
    """Delete a vehicle (refused while it has orders)."""
    try:
        DeleteVehicleHandler(gateway()).handle(serial_number)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Vehicle '{serial_number}' deleted.")


# --- Services, parts, mechanics -----------------------------------------------


@click.command("add")
@click.option("--name", required=True)
@click.option("--cost", required=True, help="Pre-tax unit cost (e.g. 250.00).")
@click.option("--time", "estimated_time", required=True, type=int, help="Estimated minutes.")
@click.option("--description", default=None)
def service_add(name: str, cost: str, estimated_time: int, description: str | None) -> None:
    """Add a service to the catalog."""
    try:
        service = RegisterServiceHandler(gateway()).handle(
            Service(
                service_id=None,
                name=name,
                cost=Money.of(cost),
                estimated_time=estimated_time,
                description=description,
            )
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Service #{service.service_id} '{service.name}' added at {service.cost}")


@click.command("add")
@click.option("--name", required=True)
@click.option("--brand", required=True)
@click.option("--price", required=True, help="Unit price (e.g. 89.90).")
@click.option("--stock", "current_stock", default=0, type=int)
@click.option("--min-stock", "minimum_stock", default=0, type=int)
@click.option("--supplier", default=None)
def part_add(
    name: str,
    brand: str,
    price: str,
    current_stock: int,
    minimum_stock: int,
    supplier: str | None,
) -> None:
    """Add a replacement part to the catalog."""
    try:
        part = RegisterReplacementHandler(gateway()).handle(
            Replacement(
                replacement_id=None,
                name=name,
                brand=brand,
                unit_price=Money.of(price),
                current_stock=current_stock,
                minimum_stock=minimum_stock,
                supplier=supplier,
            )
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Part #{part.replacement_id} '{part.name}' added at {part.unit_price}")


@click.command("add")
@click.option("--rfc", required=True)
@click.option("--name", required=True)
@click.option("--first-lastname", required=True)
@click.option("--phone", required=True)
@click.option("--salary", required=True)
@click.option("--experience", required=True, type=int, help="Years of experience.")
@click.option("--fields", default="Otros", help="Specialty.")
def mechanic_add(
    rfc: str,
    name: str,
    first_lastname: str,
    phone: str,
    salary: str,
    experience: int,
    fields: str,
) -> None:
    """Register a mechanic."""
    try:
        mechanic = RegisterMechanicHandler(gateway()).handle(
            Mechanic(
                employee_id=None,
                rfc=rfc,
                name=name,
                first_lastname=first_lastname,
                phone=phone,
                salary=Money.of(salary),
                experience=experience,
                fields=fields,
            )
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Mechanic #{mechanic.employee_id} '{mechanic.full_name}' added")
