"""Abstract store for the ServiceOrder aggregate and the catalog it references.

An OrderStore is always bound to one open transaction, handed out by a
PersistenceGateway. Defined in the domain layer so the domain never
depends on infrastructure. Concrete implementations (SQL, in-memory) live
elsewhere.

Navigation collections (a customer's vehicles, an order's line items) are
explicit query methods returning ordered lists.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

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


class OrderStore(ABC):

    # --- Catalog reads --------------------------------------------------------

    @abstractmethod
    def get_customer(self, customer_id: int) -> Customer | None:
        """Return a customer by ID, or None."""

    @abstractmethod
    def get_vehicle(self, serial_number: str) -> Vehicle | None:
        """Return a vehicle by serial number, or None."""

    @abstractmethod
    def list_vehicles_for_customer(self, customer_id: int) -> list[Vehicle]:
        """Return the customer's vehicles ordered by serial number."""

    @abstractmethod
    def get_services(self, service_ids: Iterable[int]) -> dict[int, Service]:
        """Return the existing services among *service_ids*, keyed by ID."""

    @abstractmethod
    def get_replacements(self, replacement_ids: Iterable[int]) -> dict[int, Replacement]:
        """Return the existing parts among *replacement_ids*, keyed by ID."""

    @abstractmethod
    def get_mechanics(self, employee_ids: Iterable[int]) -> dict[int, Mechanic]:
        """Return the existing mechanics among *employee_ids*, keyed by ID."""

    # --- Catalog writes -------------------------------------------------------

    @abstractmethod
    def save_customer(self, customer: Customer) -> None:
        """Insert or update a customer, assigning ``customer_id`` if new."""

    @abstractmethod
    def save_vehicle(self, vehicle: Vehicle) -> None:
        """Insert or update a vehicle by serial number."""

    @abstractmethod
    def save_service(self, service: Service) -> None:
        """Insert or update a service, assigning ``service_id`` if new."""

    @abstractmethod
    def save_replacement(self, replacement: Replacement) -> None:
        """Insert or update a part, assigning ``replacement_id`` if new."""

    @abstractmethod
    def save_mechanic(self, mechanic: Mechanic) -> None:
        """Insert or update a mechanic, assigning ``employee_id`` if new."""

    @abstractmethod
    def delete_customer(self, customer_id: int) -> bool:
        """Delete a customer and its vehicles. False if it did not exist.

        Raises ReferentialIntegrityError if any of its vehicles has orders.
        """

    @abstractmethod
    def delete_vehicle(self, serial_number: str) -> bool:
        """Delete a vehicle. False if it did not exist.

        Raises ReferentialIntegrityError if orders reference it.
        """

    @abstractmethod
    def count_orders_for_vehicle(self, serial_number: str) -> int:
        """Number of service orders referencing the vehicle."""

    # --- Order header ---------------------------------------------------------

    @abstractmethod
    def get_order(self, folio: int) -> ServiceOrder | None:
        """Return an order header by folio, or None."""

    @abstractmethod
    def list_orders(self) -> list[ServiceOrder]:
        """Return every order header, newest folio first."""

    @abstractmethod
    def add_order(self, order: ServiceOrder) -> int:
        """Insert a new header, set ``order.folio`` and return it.

        Folios are monotonic and never reused, even after deletes.
        """

    @abstractmethod
    def update_order(self, order: ServiceOrder, expected_version: int) -> bool:
        """Write the header only if its stored version is *expected_version*.

        On success the stored version becomes ``expected_version + 1`` and
        ``order.version`` is updated to match. Returns False, writing
        nothing, if the row is gone or its version moved on.
        """

    @abstractmethod
    def delete_order(self, folio: int) -> bool:
        """Delete the header row. False if it did not exist."""

    # --- Line items -----------------------------------------------------------

    @abstractmethod
    def list_order_services(self, folio: int) -> list[OrderServiceLine]:
        """Service lines of the order, ordered by service ID."""

    @abstractmethod
    def add_order_services(self, lines: Iterable[OrderServiceLine]) -> None:
        """Insert service lines. Duplicates of (service_id, folio) fail."""

    @abstractmethod
    def delete_order_services(self, folio: int) -> int:
        """Delete all service lines of the order, returning the count."""

    @abstractmethod
    def list_order_replacements(self, folio: int) -> list[OrderReplacementLine]:
        """Part lines of the order, ordered by replacement ID."""

    @abstractmethod
    def add_order_replacements(self, lines: Iterable[OrderReplacementLine]) -> None:
        """Insert part lines. Duplicates of (replacement_id, folio) fail."""

    @abstractmethod
    def delete_order_replacements(self, folio: int) -> int:
        """Delete all part lines of the order, returning the count."""

    @abstractmethod
    def list_order_mechanics(self, folio: int) -> list[OrderMechanicLine]:
        """Mechanic assignments of the order, ordered by employee ID."""

    @abstractmethod
    def add_order_mechanics(self, lines: Iterable[OrderMechanicLine]) -> None:
        """Insert assignments. Duplicates of (employee_id, folio) fail."""

    @abstractmethod
    def delete_order_mechanics(self, folio: int) -> int:
        """Delete all assignments of the order, returning the count."""
