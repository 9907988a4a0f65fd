"""Integration tests for the UpdateOrder use case."""

from datetime import datetime
from decimal import Decimal

import pytest

from autorepair.application.create_order import CreateOrderHandler
from autorepair.application.dto import ReplacementSelection, ServiceSelection
from autorepair.application.update_order import UpdateOrderHandler
from autorepair.domain.exceptions import (
    ConcurrencyError,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from autorepair.domain.model.value_objects import Money
from tests.fakes import InMemoryGateway, InMemoryOrderStore, seeded_gateway

NOW = datetime(2024, 3, 15, 10, 30)


def _setup(**handler_kwargs) -> tuple[UpdateOrderHandler, InMemoryGateway, int]:
    """Seeded gateway holding one order: 2 x service 1 + 1 x service 2 (290.00)."""
    gateway = seeded_gateway()
    created = CreateOrderHandler(gateway, clock=lambda: NOW, **handler_kwargs).handle(
        "SN123",
        [ServiceSelection(1, 2), ServiceSelection(2, 1)],
        replacement_selections=[ReplacementSelection(1, 1)],
        mechanic_ids=[1],
    )
    return UpdateOrderHandler(gateway, **handler_kwargs), gateway, created.folio


def _service_lines(gateway: InMemoryGateway, folio: int) -> dict[int, int]:
    return {
        service_id: line.quantity.value
        for (f, service_id), line in gateway.data.order_services.items()
        if f == folio
    }


class TestUpdateOrderServices:

    def test_replacing_services_recomputes_cost(self):
        handler, gateway, folio = _setup()

        handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(3, 2)])

        stored = gateway.data.orders[folio]
        # 241.00 * 1.16
        assert stored.cost == Money.of("279.56")
        assert _service_lines(gateway, folio) == {3: 2}

    def test_version_is_bumped(self):
        handler, gateway, folio = _setup()

        handler.handle(folio, expected_version=1, state="En proceso")

        assert gateway.data.orders[folio].version == 2

    def test_dates_never_change(self):
        handler, gateway, folio = _setup()
        before = gateway.data.orders[folio]

        handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(1, 1)])

        after = gateway.data.orders[folio]
        assert after.entry_date == before.entry_date
        assert after.estimated_delivery_time == before.estimated_delivery_time

    def test_state_only_update_keeps_cost(self):
        handler, gateway, folio = _setup()
        # Catalog price changes after the order was opened.
        with gateway.transaction() as store:
            service = store.get_services([1])[1]
            service.cost = Money.of("500.00")
            store.save_service(service)

        handler.handle(folio, expected_version=1, state="Terminada")

        stored = gateway.data.orders[folio]
        assert stored.state == "Terminada"
        assert stored.cost == Money.of("290.00")

    def test_untouched_collections_are_kept(self):
        handler, gateway, folio = _setup()

        handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(2, 4)])

        assert set(gateway.data.order_replacements) == {(folio, 1)}
        assert set(gateway.data.order_mechanics) == {(folio, 1)}

    def test_mechanics_can_be_cleared(self):
        handler, gateway, folio = _setup()

        handler.handle(folio, expected_version=1, mechanic_ids=[])

        assert gateway.data.order_mechanics == {}

    def test_replacing_parts_with_toggle_reprices_from_stored_services(self):
        handler, gateway, folio = _setup(include_replacements_in_cost=True)

        handler.handle(
            folio,
            expected_version=1,
            replacement_selections=[ReplacementSelection(2, 2)],
        )

        # (200.00 + 50.00 + 90.00) * 1.16
        assert gateway.data.orders[folio].cost == Money.of("394.40")

    def test_replacing_parts_without_toggle_keeps_cost(self):
        handler, gateway, folio = _setup()

        handler.handle(
            folio,
            expected_version=1,
            replacement_selections=[ReplacementSelection(2, 5)],
        )

        assert gateway.data.orders[folio].cost == Money.of("290.00")
        assert set(gateway.data.order_replacements) == {(folio, 2)}


class TestUpdateOrderVehicle:

    def test_reassign_to_existing_vehicle(self):
        handler, gateway, folio = _setup()

        handler.handle(folio, expected_version=1, serial_number="SN456")

        assert gateway.data.orders[folio].serial_number == "SN456"

    def test_reassign_to_unknown_vehicle(self):
        handler, gateway, folio = _setup()

        with pytest.raises(EntityNotFoundError, match="Vehicle 'NOPE' not found"):
            handler.handle(folio, expected_version=1, serial_number="NOPE")

        assert gateway.data.orders[folio].serial_number == "SN123"


class TestUpdateOrderRejections:

    def test_unknown_folio(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Order #999 not found"):
            handler.handle(999, expected_version=1, state="X")

    def test_invalid_selection_writes_nothing(self):
        handler, gateway, folio = _setup()

        with pytest.raises(ValidationError):
            handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(1, 0)])

        assert _service_lines(gateway, folio) == {1: 2, 2: 1}
        assert gateway.data.orders[folio].version == 1

    def test_empty_service_list_rejected(self):
        handler, _, folio = _setup()
        with pytest.raises(ValidationError, match="At least one service is required"):
            handler.handle(folio, expected_version=1, service_selections=[])

    def test_long_state_rolls_back(self):
        handler, gateway, folio = _setup()

        with pytest.raises(ValidationError, match="cannot exceed 30"):
            handler.handle(folio, expected_version=1, state="X" * 31)

        assert gateway.data.orders[folio].state == "Abierta"

    def test_unknown_service_leaves_lines_alone(self):
        handler, gateway, folio = _setup()

        with pytest.raises(EntityNotFoundError):
            handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(42, 1)])

        assert _service_lines(gateway, folio) == {1: 2, 2: 1}

    def test_failed_line_insert_rolls_back_header(self):
        handler, gateway, folio = _setup()
        gateway.fail_on("add_order_services")

        with pytest.raises(PersistenceError):
            handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(3, 1)])

        assert gateway.data.orders[folio].version == 1
        assert gateway.data.orders[folio].cost == Money.of("290.00")
        assert _service_lines(gateway, folio) == {1: 2, 2: 1}


class TestUpdateOrderConcurrency:

    def test_second_editor_with_stale_version_is_rejected(self):
        handler, gateway, folio = _setup()

        # Both editors read version 1; the first one saves.
        handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(3, 1)])

        with pytest.raises(ConcurrencyError, match="changed by someone else"):
            handler.handle(
                folio,
                expected_version=1,
                state="Cancelada",
                service_selections=[ServiceSelection(1, 9)],
            )

        stored = gateway.data.orders[folio]
        assert stored.version == 2
        assert stored.state == "Abierta"
        assert stored.cost == Money.of("139.78")
        assert _service_lines(gateway, folio) == {3: 1}

    def test_retry_with_fresh_version_succeeds(self):
        handler, gateway, folio = _setup()
        handler.handle(folio, expected_version=1, state="En proceso")

        handler.handle(folio, expected_version=2, state="Terminada")

        assert gateway.data.orders[folio].state == "Terminada"
        assert gateway.data.orders[folio].version == 3

    def test_lost_race_at_write_time_changes_nothing(self, monkeypatch):
        handler, gateway, folio = _setup()
        # Another writer commits between our read and our conditional write.
        monkeypatch.setattr(
            InMemoryOrderStore, "update_order", lambda self, order, expected_version: False
        )

        with pytest.raises(ConcurrencyError):
            handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(3, 1)])

        assert _service_lines(gateway, folio) == {1: 2, 2: 1}
        assert gateway.data.orders[folio].cost == Money.of("290.00")

    def test_version_reported_in_message(self):
        handler, _, folio = _setup()
        handler.handle(folio, expected_version=1, state="En proceso")

        with pytest.raises(ConcurrencyError) as exc_info:
            handler.handle(folio, expected_version=1, state="Terminada")

        assert "version 2, you had 1" in str(exc_info.value)


def test_cost_is_always_decimal_cents():
    handler, gateway, folio = _setup()
    handler.handle(folio, expected_version=1, service_selections=[ServiceSelection(3, 3)])
    assert gateway.data.orders[folio].cost.amount == Decimal("419.34")
