"""SQLAlchemy-backed implementation of PersistenceGateway / OrderStore."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy import Engine, create_engine, delete, event, func, insert, select, update
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from autorepair.domain.exceptions import (
    DomainException,
    PersistenceError,
    ReferentialIntegrityError,
)
from autorepair.domain.model.catalog import (
    Customer,
    Mechanic,
    Replacement,
    Service,
    Vehicle,
)
from autorepair.domain.model.service_order import (
    OrderMechanicLine,
    OrderReplacementLine,
    OrderServiceLine,
    ServiceOrder,
)
from autorepair.domain.model.value_objects import Money, Quantity
from autorepair.domain.repository.order_store import OrderStore
from autorepair.domain.repository.persistence_gateway import PersistenceGateway
from autorepair.infrastructure.persistence.tables import (
    Base,
    CustomerRow,
    MechanicRow,
    OrderMechanicRow,
    OrderReplacementRow,
    OrderServiceRow,
    ReplacementRow,
    ServiceOrderRow,
    ServiceRow,
    VehicleRow,
)

logger = structlog.stdlib.get_logger(__name__)


# --- Engine -------------------------------------------------------------------


def create_store_engine(
    database_url: str,
    *,
    echo: bool = False,
    busy_timeout: float = 30.0,
) -> Engine:
    url = make_url(database_url)
    engine_kwargs: dict = {"echo": echo}

    if url.get_backend_name() == "sqlite":
        engine_kwargs["connect_args"] = {"timeout": busy_timeout, "check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One shared connection, or every session would see its own empty database.
            engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **engine_kwargs)

    if url.get_backend_name() == "sqlite":
        _enforce_sqlite_foreign_keys(engine)

    return engine


def _enforce_sqlite_foreign_keys(engine: Engine) -> None:
    # SQLite ignores foreign keys, cascades included, unless asked per connection.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


# --- Gateway ------------------------------------------------------------------


class SqlAlchemyGateway(PersistenceGateway):

    def __init__(self, engine: Engine) -> None:
        self._session_factory = sessionmaker(
            bind=engine,
            expire_on_commit=False,
            autoflush=False,
        )

    @contextmanager
    def transaction(self) -> Iterator[OrderStore]:
        session = self._session_factory()
        try:
            yield SqlAlchemyOrderStore(session)
            session.commit()
        except DomainException:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("db.transaction.failed", error=str(exc))
            raise PersistenceError(
                "The operation could not be saved; no changes were applied"
            ) from exc
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def snapshot(self) -> Iterator[OrderStore]:
        session = self._session_factory()
        try:
            yield SqlAlchemyOrderStore(session)
        except SQLAlchemyError as exc:
            logger.exception("db.read.failed", error=str(exc))
            raise PersistenceError("The data could not be read") from exc
        finally:
            # Closing without commit discards anything written through it.
            session.close()


# --- Store --------------------------------------------------------------------


class SqlAlchemyOrderStore(OrderStore):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- Catalog reads --------------------------------------------------------

    def get_customer(self, customer_id: int) -> Customer | None:
        row = self._session.get(CustomerRow, customer_id)
        return _customer_to_domain(row) if row else None

    def get_vehicle(self, serial_number: str) -> Vehicle | None:
        row = self._session.get(VehicleRow, serial_number)
        return _vehicle_to_domain(row) if row else None

    def list_vehicles_for_customer(self, customer_id: int) -> list[Vehicle]:
        rows = self._session.scalars(
            select(VehicleRow)
            .where(VehicleRow.customer_id == customer_id)
            .order_by(VehicleRow.serial_number)
        )
        return [_vehicle_to_domain(row) for row in rows]

    def get_services(self, service_ids: Iterable[int]) -> dict[int, Service]:
        ids = set(service_ids)
        if not ids:
            return {}
        rows = self._session.scalars(select(ServiceRow).where(ServiceRow.service_id.in_(ids)))
        return {row.service_id: _service_to_domain(row) for row in rows}

    def get_replacements(self, replacement_ids: Iterable[int]) -> dict[int, Replacement]:
        ids = set(replacement_ids)
        if not ids:
            return {}
        rows = self._session.scalars(
            select(ReplacementRow).where(ReplacementRow.replacement_id.in_(ids))
        )
        return {row.replacement_id: _replacement_to_domain(row) for row in rows}

    def get_mechanics(self, employee_ids: Iterable[int]) -> dict[int, Mechanic]:
        ids = set(employee_ids)
        if not ids:
            return {}
        rows = self._session.scalars(select(MechanicRow).where(MechanicRow.employee_id.in_(ids)))
        return {row.employee_id: _mechanic_to_domain(row) for row in rows}

    # --- Catalog writes -------------------------------------------------------

    def save_customer(self, customer: Customer) -> None:
        row = self._session.merge(
            CustomerRow(
                customer_id=customer.customer_id,
                rfc=customer.rfc,
                name=customer.name,
                first_lastname=customer.first_lastname,
                second_lastname=customer.second_lastname,
                street=customer.street,
                street_number=customer.street_number,
                suburb=customer.suburb,
                postal_code=customer.postal_code,
                city=customer.city,
                main_phone=customer.main_phone,
                secondary_phone1=customer.secondary_phone1,
                secondary_phone2=customer.secondary_phone2,
                email=customer.email,
                registration_date=customer.registration_date,
            )
        )
        self._session.flush()
        customer.customer_id = row.customer_id

    def save_vehicle(self, vehicle: Vehicle) -> None:
        self._session.merge(
            VehicleRow(
                serial_number=vehicle.serial_number,
                plate_number=vehicle.plate_number,
                brand=vehicle.brand,
                model=vehicle.model,
                year=vehicle.year,
                color=vehicle.color,
                mileage=vehicle.mileage,
                type=vehicle.type,
                antiquity=vehicle.antiquity,
                customer_id=vehicle.customer_id,
            )
        )
        self._session.flush()

    def save_service(self, service: Service) -> None:
        row = self._session.merge(
            ServiceRow(
                service_id=service.service_id,
                name=service.name,
                description=service.description,
                cost=service.cost.amount,
                estimated_time=service.estimated_time,
            )
        )
        self._session.flush()
        service.service_id = row.service_id

    def save_replacement(self, replacement: Replacement) -> None:
        row = self._session.merge(
            ReplacementRow(
                replacement_id=replacement.replacement_id,
                name=replacement.name,
                brand=replacement.brand,
                unit_price=replacement.unit_price.amount,
                current_stock=replacement.current_stock,
                minimum_stock=replacement.minimum_stock,
                supplier=replacement.supplier,
            )
        )
        self._session.flush()
        replacement.replacement_id = row.replacement_id

    def save_mechanic(self, mechanic: Mechanic) -> None:
        row = self._session.merge(
            MechanicRow(
                employee_id=mechanic.employee_id,
                rfc=mechanic.rfc,
                name=mechanic.name,
                first_lastname=mechanic.first_lastname,
                second_lastname=mechanic.second_lastname,
                fields=mechanic.fields,
                phone=mechanic.phone,
                salary=mechanic.salary.amount,
                experience=mechanic.experience,
            )
        )
        self._session.flush()
        mechanic.employee_id = row.employee_id

    def delete_customer(self, customer_id: int) -> bool:
        if self._session.get(CustomerRow, customer_id) is None:
            return False

        blocking = self._session.scalar(
            select(func.count())
            .select_from(ServiceOrderRow)
            .join(VehicleRow, VehicleRow.serial_number == ServiceOrderRow.serial_number)
            .where(VehicleRow.customer_id == customer_id)
        )
        if blocking:
            raise ReferentialIntegrityError(
                f"Customer #{customer_id} has vehicles with {blocking} service order(s)"
            )

        # Vehicles go with it through ON DELETE CASCADE.
        self._session.execute(delete(CustomerRow).where(CustomerRow.customer_id == customer_id))
        self._session.flush()
        return True

    def delete_vehicle(self, serial_number: str) -> bool:
        if self._session.get(VehicleRow, serial_number) is None:
            return False

        orders = self.count_orders_for_vehicle(serial_number)
        if orders:
            raise ReferentialIntegrityError(
                f"Vehicle '{serial_number}' has {orders} service order(s) and cannot be deleted"
            )

        self._session.execute(delete(VehicleRow).where(VehicleRow.serial_number == serial_number))
        self._session.flush()
        return True

    def count_orders_for_vehicle(self, serial_number: str) -> int:
        return self._session.scalar(
            select(func.count())
            .select_from(ServiceOrderRow)
            .where(ServiceOrderRow.serial_number == serial_number)
        ) or 0

    # --- Order header ---------------------------------------------------------

    def get_order(self, folio: int) -> ServiceOrder | None:
        row = self._session.get(ServiceOrderRow, folio, populate_existing=True)
        return _order_to_domain(row) if row else None

    def list_orders(self) -> list[ServiceOrder]:
        rows = self._session.scalars(select(ServiceOrderRow).order_by(ServiceOrderRow.folio.desc()))
        return [_order_to_domain(row) for row in rows]

    def add_order(self, order: ServiceOrder) -> int:
        row = ServiceOrderRow(
            entry_date=order.entry_date,
            estimated_delivery_time=order.estimated_delivery_time,
            delivery_time=order.delivery_time,
            state=order.state,
            cost=order.cost.amount,
            serial_number=order.serial_number,
            version=order.version,
        )
        self._session.add(row)
        self._session.flush()
        order.folio = row.folio
        return row.folio

    def update_order(self, order: ServiceOrder, expected_version: int) -> bool:
        # Dates are not in the SET list: they are fixed at creation.
        result = self._session.execute(
            update(ServiceOrderRow)
            .where(
                ServiceOrderRow.folio == order.folio,
                ServiceOrderRow.version == expected_version,
            )
            .values(
                state=order.state,
                serial_number=order.serial_number,
                cost=order.cost.amount,
                version=expected_version + 1,
            )
        )
        if result.rowcount != 1:
            return False
        order.version = expected_version + 1
        return True

    def delete_order(self, folio: int) -> bool:
        result = self._session.execute(delete(ServiceOrderRow).where(ServiceOrderRow.folio == folio))
        return result.rowcount == 1

    # --- Line items -----------------------------------------------------------

    def list_order_services(self, folio: int) -> list[OrderServiceLine]:
        rows = self._session.scalars(
            select(OrderServiceRow)
            .where(OrderServiceRow.folio == folio)
            .order_by(OrderServiceRow.service_id)
        )
        return [OrderServiceLine(row.service_id, row.folio, Quantity(row.quantity)) for row in rows]

    def add_order_services(self, lines: Iterable[OrderServiceLine]) -> None:
        values = [
            {"service_id": line.service_id, "folio": line.folio, "quantity": line.quantity.value}
            for line in lines
        ]
        if values:
            self._session.execute(insert(OrderServiceRow), values)

    def delete_order_services(self, folio: int) -> int:
        result = self._session.execute(delete(OrderServiceRow).where(OrderServiceRow.folio == folio))
        return result.rowcount

    def list_order_replacements(self, folio: int) -> list[OrderReplacementLine]:
        rows = self._session.scalars(
            select(OrderReplacementRow)
            .where(OrderReplacementRow.folio == folio)
            .order_by(OrderReplacementRow.replacement_id)
        )
        return [
            OrderReplacementLine(row.replacement_id, row.folio, Quantity(row.quantity))
            for row in rows
        ]

    def add_order_replacements(self, lines: Iterable[OrderReplacementLine]) -> None:
        values = [
            {
                "replacement_id": line.replacement_id,
                "folio": line.folio,
                "quantity": line.quantity.value,
            }
            for line in lines
        ]
        if values:
            self._session.execute(insert(OrderReplacementRow), values)

    def delete_order_replacements(self, folio: int) -> int:
        result = self._session.execute(
            delete(OrderReplacementRow).where(OrderReplacementRow.folio == folio)
        )
        return result.rowcount

    def list_order_mechanics(self, folio: int) -> list[OrderMechanicLine]:
        rows = self._session.scalars(
            select(OrderMechanicRow)
            .where(OrderMechanicRow.folio == folio)
            .order_by(OrderMechanicRow.employee_id)
        )
        return [OrderMechanicLine(row.employee_id, row.folio) for row in rows]

    def add_order_mechanics(self, lines: Iterable[OrderMechanicLine]) -> None:
        values = [{"employee_id": line.employee_id, "folio": line.folio} for line in lines]
        if values:
            self._session.execute(insert(OrderMechanicRow), values)

    def delete_order_mechanics(self, folio: int) -> int:
        result = self._session.execute(
            delete(OrderMechanicRow).where(OrderMechanicRow.folio == folio)
        )
        return result.rowcount


# --- Row → domain mapping -----------------------------------------------------


def _customer_to_domain(row: CustomerRow) -> Customer:
    return Customer(
        customer_id=row.customer_id,
        rfc=row.rfc,
        name=row.name,
        first_lastname=row.first_lastname,
        second_lastname=row.second_lastname,
        street=row.street,
        street_number=row.street_number,
        suburb=row.suburb,
        postal_code=row.postal_code,
        city=row.city,
        main_phone=row.main_phone,
        secondary_phone1=row.secondary_phone1,
        secondary_phone2=row.secondary_phone2,
        email=row.email,
        registration_date=row.registration_date,
    )


def _vehicle_to_domain(row: VehicleRow) -> Vehicle:
    return Vehicle(
        serial_number=row.serial_number,
        plate_number=row.plate_number,
        brand=row.brand,
        model=row.model,
        year=row.year,
        color=row.color,
        mileage=row.mileage,
        customer_id=row.customer_id,
        type=row.type,
        antiquity=row.antiquity,
    )


def _mechanic_to_domain(row: MechanicRow) -> Mechanic:
    return Mechanic(
        employee_id=row.employee_id,
        rfc=row.rfc,
        name=row.name,
        first_lastname=row.first_lastname,
        second_lastname=row.second_lastname,
        fields=row.fields,
        phone=row.phone,
        salary=Money.of(row.salary),
        experience=row.experience,
    )


def _service_to_domain(row: ServiceRow) -> Service:
    return Service(
        service_id=row.service_id,
        name=row.name,
        description=row.description,
        cost=Money.of(row.cost),
        estimated_time=row.estimated_time,
    )


def _replacement_to_domain(row: ReplacementRow) -> Replacement:
    return Replacement(
        replacement_id=row.replacement_id,
        name=row.name,
        brand=row.brand,
        unit_price=Money.of(row.unit_price),
        current_stock=row.current_stock,
        minimum_stock=row.minimum_stock,
        supplier=row.supplier,
    )


def _order_to_domain(row: ServiceOrderRow) -> ServiceOrder:
    return ServiceOrder(
        folio=row.folio,
        serial_number=row.serial_number,
        entry_date=row.entry_date,
        estimated_delivery_time=row.estimated_delivery_time,
        delivery_time=row.delivery_time,
        state=row.state,
        cost=Money.of(row.cost),
        version=row.version,
    )
