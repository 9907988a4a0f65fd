"""Integration tests for the CreateOrder use case.

Uses the in-memory gateway: no database.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from autorepair.application.create_order import CreateOrderHandler
from autorepair.application.dto import ReplacementSelection, ServiceSelection
from autorepair.domain.exceptions import (
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from tests.fakes import InMemoryGateway, seeded_gateway

NOW = datetime(2024, 3, 15, 10, 30)


def _setup(**handler_kwargs) -> tuple[CreateOrderHandler, InMemoryGateway]:
    gateway = seeded_gateway()
    handler = CreateOrderHandler(gateway, clock=lambda: NOW, **handler_kwargs)
    return handler, gateway


def _sel(*pairs) -> list[ServiceSelection]:
    return [ServiceSelection(service_id=i, quantity=q) for i, q in pairs]


class TestCreateOrderHappyPath:

    def test_worked_example(self):
        handler, gateway = _setup()

        dto = handler.handle("SN123", _sel((1, 2), (2, 1)))

        assert dto.folio == 1
        assert dto.cost == Decimal("290.00")
        assert dto.version == 1
        stored = gateway.data.orders[1]
        assert stored.serial_number == "SN123"
        assert stored.state == "Abierta"

    def test_line_items_written_with_quantities(self):
        handler, gateway = _setup()

        dto = handler.handle("SN123", _sel((2, 1), (1, 2)))

        lines = {k: v.quantity.value for k, v in gateway.data.order_services.items()}
        assert lines == {(dto.folio, 1): 2, (dto.folio, 2): 1}

    def test_single_service_quantity_one(self):
        handler, _ = _setup()
        assert handler.handle("SN123", _sel((1, 1))).cost == Decimal("116.00")

    def test_single_service_maximum_quantity(self):
        handler, _ = _setup()
        assert handler.handle("SN123", _sel((1, 9999))).cost == Decimal("1159884.00")

    def test_three_services_mixed_quantities(self):
        handler, _ = _setup()
        # (200.00 + 150.00 + 120.50) * 1.16
        dto = handler.handle("SN123", _sel((1, 2), (2, 3), (3, 1)))
        assert dto.cost == Decimal("545.78")

    def test_dates_are_server_assigned(self):
        handler, gateway = _setup()

        dto = handler.handle("SN123", _sel((1, 1)))

        stored = gateway.data.orders[dto.folio]
        assert stored.entry_date == NOW
        assert stored.estimated_delivery_time == NOW + timedelta(days=1)
        assert stored.delivery_time is None

    def test_folios_increase(self):
        handler, _ = _setup()
        first = handler.handle("SN123", _sel((1, 1)))
        second = handler.handle("SN456", _sel((2, 1)))
        assert second.folio == first.folio + 1

    def test_parts_and_mechanics_recorded(self):
        handler, gateway = _setup()

        dto = handler.handle(
            "SN123",
            _sel((1, 1)),
            replacement_selections=[ReplacementSelection(replacement_id=1, quantity=2)],
            mechanic_ids=[2, 1],
        )

        assert set(gateway.data.order_services) == {(dto.folio, 1)}
        assert gateway.data.order_replacements[(dto.folio, 1)].quantity.value == 2
        assert set(gateway.data.order_mechanics) == {(dto.folio, 1), (dto.folio, 2)}

    def test_parts_not_charged_by_default(self):
        handler, _ = _setup()
        dto = handler.handle(
            "SN123",
            _sel((1, 1)),
            replacement_selections=[ReplacementSelection(replacement_id=1, quantity=2)],
        )
        assert dto.cost == Decimal("116.00")

    def test_parts_charged_when_enabled(self):
        handler, _ = _setup(include_replacements_in_cost=True)
        dto = handler.handle(
            "SN123",
            _sel((1, 1)),
            replacement_selections=[ReplacementSelection(replacement_id=1, quantity=2)],
        )
        # (100.00 + 179.80) * 1.16 = 324.568
        assert dto.cost == Decimal("324.57")

    def test_custom_tax_rate(self):
        handler, _ = _setup(tax_rate=Decimal("0.08"))
        assert handler.handle("SN123", _sel((1, 1))).cost == Decimal("108.00")


class TestCreateOrderValidation:

    def test_empty_selection_rejected_and_nothing_written(self):
        handler, gateway = _setup()
        commits = gateway.commits

        with pytest.raises(ValidationError, match="At least one service is required"):
            handler.handle("SN123", [])

        assert gateway.data.orders == {}
        assert gateway.commits == commits

    @pytest.mark.parametrize("quantity", [0, 10000])
    def test_out_of_range_quantity_rejected(self, quantity):
        handler, gateway = _setup()

        with pytest.raises(ValidationError, match="Quantity of service #1"):
            handler.handle("SN123", _sel((1, quantity)))

        assert gateway.data.orders == {}

    def test_duplicate_service_rejected(self):
        handler, gateway = _setup()

        with pytest.raises(ValidationError, match="selected more than once"):
            handler.handle("SN123", _sel((1, 1), (1, 2)))

        assert gateway.data.order_services == {}

    def test_all_errors_reported_together(self):
        handler, _ = _setup()

        with pytest.raises(ValidationError) as exc_info:
            handler.handle(
                "",
                _sel((1, 0), (1, 1)),
                replacement_selections=[ReplacementSelection(replacement_id=1, quantity=0)],
                mechanic_ids=[1, 1],
            )

        fields = [e.field for e in exc_info.value.errors]
        assert fields == [
            "serial_number",
            "service_selections[0].quantity",
            "service_selections[1].id",
            "replacement_selections[0].quantity",
            "mechanic_ids",
        ]


class TestCreateOrderReferences:

    def test_unknown_vehicle(self):
        handler, gateway = _setup()

        with pytest.raises(EntityNotFoundError, match="Vehicle 'NOPE' not found"):
            handler.handle("NOPE", _sel((1, 1)))

        assert gateway.data.orders == {}

    def test_unknown_service(self):
        handler, gateway = _setup()

        with pytest.raises(EntityNotFoundError, match="Service not found: 99"):
            handler.handle("SN123", _sel((1, 1), (99, 1)))

        assert gateway.data.orders == {}
        assert gateway.data.order_services == {}

    def test_unknown_part(self):
        handler, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Replacement not found: 7"):
            handler.handle(
                "SN123",
                _sel((1, 1)),
                replacement_selections=[ReplacementSelection(replacement_id=7, quantity=1)],
            )

    def test_unknown_mechanic(self):
        handler, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Mechanic not found: 9"):
            handler.handle("SN123", _sel((1, 1)), mechanic_ids=[9])


class TestCreateOrderAtomicity:

    def test_failed_line_insert_leaves_no_header(self):
        handler, gateway = _setup()
        gateway.fail_on("add_order_services")

        with pytest.raises(PersistenceError):
            handler.handle("SN123", _sel((1, 1)))

        assert gateway.data.orders == {}
        assert gateway.data.order_services == {}

    def test_failed_mechanic_insert_rolls_back_everything(self):
        handler, gateway = _setup()
        gateway.fail_on("add_order_mechanics")

        with pytest.raises(PersistenceError):
            handler.handle("SN123", _sel((1, 1)), mechanic_ids=[1])

        assert gateway.data.orders == {}
        assert gateway.data.order_services == {}
        assert gateway.data.order_mechanics == {}
