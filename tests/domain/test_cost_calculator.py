"""Unit tests for the order cost calculation."""

from decimal import Decimal

import pytest

from autorepair.domain.exceptions import ValidationError
from autorepair.domain.model.value_objects import Money
from autorepair.domain.service.cost_calculator import IVA_RATE, compute_order_cost


class TestComputeOrderCost:

    def test_iva_rate(self):
        assert IVA_RATE == Decimal("0.16")

    def test_single_service_quantity_one(self):
        assert compute_order_cost([(Money.of("100.00"), 1)]) == Money.of("116.00")

    def test_single_service_maximum_quantity(self):
        assert compute_order_cost([(Money.of("100.00"), 9999)]) == Money.of("1159884.00")

    def test_three_services_mixed_quantities(self):
        lines = [
            (Money.of("120.50"), 2),   # 241.00
            (Money.of("75.25"), 3),    # 225.75
            (Money.of("999.99"), 1),   # 999.99
        ]
        # 1466.74 * 1.16 = 1701.4184
        assert compute_order_cost(lines) == Money.of("1701.42")

    def test_worked_example(self):
        lines = [(Money.of("100.00"), 2), (Money.of("50.00"), 1)]
        assert compute_order_cost(lines) == Money.of("290.00")

    def test_result_has_two_decimal_places(self):
        total = compute_order_cost([(Money.of("10.01"), 1)])
        assert total.amount == Decimal("11.61")
        assert total.amount.as_tuple().exponent == -2

    def test_rounds_half_up(self):
        # 0.15 * 1.10 = 0.165 exactly
        total = compute_order_cost([(Money.of("0.15"), 1)], tax_rate=Decimal("0.10"))
        assert total == Money.of("0.17")

    def test_custom_tax_rate(self):
        total = compute_order_cost([(Money.of("100.00"), 1)], tax_rate=Decimal("0"))
        assert total == Money.of("100.00")

    def test_no_lines_costs_nothing(self):
        assert compute_order_cost([]) == Money.of("0.00")

    def test_is_deterministic(self):
        lines = [(Money.of("33.33"), 3), (Money.of("0.01"), 7)]
        assert compute_order_cost(lines) == compute_order_cost(list(lines))

    def test_total_over_column_maximum_rejected(self):
        with pytest.raises(ValidationError, match="exceeds the maximum"):
            compute_order_cost([(Money.of("1000000.00"), 9999)])
