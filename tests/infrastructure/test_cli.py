"""End-to-end CLI tests against a throwaway SQLite file."""

import pytest
from click.testing import CliRunner

from autorepair.infrastructure.cli import main
from autorepair.infrastructure.config import clear_settings_cache


@pytest.fixture
def runner(tmp_path, monkeypatch) -> CliRunner:
    monkeypatch.setenv("AUTOREPAIR_DATABASE_URL", f"sqlite:///{tmp_path / 'shop.db'}")
    # Keep pytest's own log capture in place.
    monkeypatch.setattr(main, "configure_logging", lambda settings: None)
    clear_settings_cache()
    yield CliRunner()
    clear_settings_cache()


def _run(runner: CliRunner, *args: str):
    result = runner.invoke(main.cli, list(args))
    assert result.exit_code == 0, result.output
    return result


@pytest.fixture
def shop(runner) -> CliRunner:
    _run(runner, "db", "init")
    _run(runner, "customer", "add", "--rfc", "GOLA800101AB1", "--name", "Ana",
         "--first-lastname", "Gomez")
    _run(runner, "vehicle", "add", "--serial", "SN123", "--plate", "ABC-123",
         "--brand", "Nissan", "--model", "Versa", "--year", "2018", "--color", "Rojo",
         "--mileage", "45000", "--customer", "1")
    _run(runner, "service", "add", "--name", "Afinacion", "--cost", "100.00", "--time", "90")
    _run(runner, "service", "add", "--name", "Aceite", "--cost", "50.00", "--time", "30")
    _run(runner, "mechanic", "add", "--rfc", "MECH900101XY1", "--name", "Luis",
         "--first-lastname", "Perez", "--phone", "555", "--salary", "12000", "--experience", "5")
    _run(runner, "part", "add", "--name", "Filtro", "--brand", "Bosch", "--price", "89.90")
    return runner


class TestOrderCommands:

    def test_create_and_show(self, shop):
        result = _run(shop, "order", "create", "--vehicle", "SN123", "--services", "1:2,2:1",
                      "--mechanics", "1", "--parts", "1:1")
        assert "Order #1 created" in result.output
        assert "$290.00" in result.output

        result = _run(shop, "order", "show", "--folio", "1")
        assert "Afinacion" in result.output
        assert "Ana Gomez" in result.output
        assert "Luis Perez" in result.output
        assert "Filtro (Bosch)" in result.output
        assert "$290.00" in result.output

    def test_update_with_current_version(self, shop):
        _run(shop, "order", "create", "--vehicle", "SN123", "--services", "1:1")

        _run(shop, "order", "update", "--folio", "1", "--version", "1", "--state", "Terminada",
             "--services", "2:2")

        result = _run(shop, "order", "show", "--folio", "1")
        assert "state=Terminada, version=2" in result.output
        assert "$116.00" in result.output

    def test_update_requires_version(self, shop):
        _run(shop, "order", "create", "--vehicle", "SN123", "--services", "1:1")

        result = shop.invoke(main.cli, ["order", "update", "--folio", "1", "--state", "B"])

        assert result.exit_code == 2
        assert "--version" in result.output
        assert "state=Abierta, version=1" in _run(shop, "order", "show", "--folio", "1").output

    def test_update_with_stale_version_fails(self, shop):
        _run(shop, "order", "create", "--vehicle", "SN123", "--services", "1:1")
        _run(shop, "order", "update", "--folio", "1", "--version", "1", "--state", "A")

        result = shop.invoke(main.cli, ["order", "update", "--folio", "1", "--version", "1",
                                        "--state", "B"])

        assert result.exit_code == 1
        assert "changed by someone else" in result.output

    def test_every_validation_error_is_printed(self, shop):
        result = shop.invoke(main.cli, ["order", "create", "--vehicle", "SN123",
                                        "--services", "1:0,1:1"])

        assert result.exit_code == 1
        assert "Invalid input:" in result.output
        assert "Quantity of service #1 must be at least 1" in result.output
        assert "Service 1 is selected more than once" in result.output

    def test_bad_item_format(self, shop):
        result = shop.invoke(main.cli, ["order", "create", "--vehicle", "SN123",
                                        "--services", "oops"])
        assert result.exit_code == 2

    def test_delete_then_list(self, shop):
        _run(shop, "order", "create", "--vehicle", "SN123", "--services", "1:1")
        _run(shop, "order", "create", "--vehicle", "SN123", "--services", "2:1")

        _run(shop, "order", "delete", "--folio", "1")

        result = _run(shop, "order", "list")
        lines = [line for line in result.output.splitlines() if line.startswith(("1 ", "2 "))]
        assert len(lines) == 1 and lines[0].startswith("2 ")

    def test_delete_unknown(self, shop):
        result = shop.invoke(main.cli, ["order", "delete", "--folio", "9"])
        assert result.exit_code == 1
        assert "Order #9 not found" in result.output

    def test_list_empty(self, shop):
        assert "No orders found." in _run(shop, "order", "list").output


class TestLookupAndCatalogCommands:

    def test_lookup_vehicles(self, shop):
        result = _run(shop, "lookup", "vehicles", "--customer", "1")
        assert "Nissan Versa - ABC-123 (2018)" in result.output
        assert "GOLA800101AB1" in result.output

    def test_lookup_vehicles_unknown_customer(self, shop):
        assert "No vehicles" in _run(shop, "lookup", "vehicles", "--customer", "5").output

    def test_lookup_service(self, shop):
        assert "costs $100.00" in _run(shop, "lookup", "service", "--id", "1").output
        assert "No service #9" in _run(shop, "lookup", "service", "--id", "9").output

    def test_vehicle_with_orders_cannot_be_deleted(self, shop):
        _run(shop, "order", "create", "--vehicle", "SN123", "--services", "1:1")

        result = shop.invoke(main.cli, ["vehicle", "delete", "--serial", "SN123"])

        assert result.exit_code == 1
        assert "cannot be deleted" in result.output

    def test_customer_delete_cascades(self, shop):
        _run(shop, "customer", "delete", "--id", "1")
        assert "No vehicles" in _run(shop, "lookup", "vehicles", "--customer", "1").output

    def test_invalid_customer_rfc(self, runner):
        _run(runner, "db", "init")
        result = runner.invoke(main.cli, ["customer", "add", "--rfc", "X" * 14, "--name", "A",
                                          "--first-lastname", "B"])
        assert result.exit_code == 1
        assert "RFC cannot exceed 13" in result.output

    def test_service_price_finer_than_cents_rejected(self, runner):
        _run(runner, "db", "init")
        result = runner.invoke(main.cli, ["service", "add", "--name", "Aceite", "--cost", "10.005",
                                          "--time", "30"])
        assert result.exit_code == 1
        assert "at most 2 decimal places" in result.output
        assert "No service #1" in _run(runner, "lookup", "service", "--id", "1").output
