"""End-to-end tests for the click CLI against JSON files in a temp dir."""

import pytest
from click.testing import CliRunner

from storefront.infrastructure.cli.main import cli


@pytest.fixture
def invoke(tmp_path):
    runner = CliRunner()

    def _invoke(*args, decline="0.0"):
        return runner.invoke(
            cli,
            ["--data-dir", str(tmp_path), "--decline-probability", decline, *args],
        )

    return _invoke


def _add_lamp(invoke, stock="10"):
    result = invoke(
        "product", "add", "--name", "Desk Lamp", "--price", "20.00",
        "--category", "Home", "--stock", stock,
    )
    assert result.exit_code == 0, result.output
    return result


class TestProductCommands:

    def test_add_and_list(self, invoke):
        result = _add_lamp(invoke)
        assert "Product #1 'Desk Lamp' added at $20.00 (10 in stock)" in result.output

        listing = invoke("product", "list", "--category", "home")
        assert listing.exit_code == 0
        assert "Desk Lamp" in listing.output

    def test_list_empty(self, invoke):
        result = invoke("product", "list", "--search", "sofa")
        assert result.exit_code == 0
        assert "No products found." in result.output

    def test_set_stock(self, invoke):
        _add_lamp(invoke)
        result = invoke("product", "stock", "--id", "1", "--quantity", "3")
        assert result.exit_code == 0
        assert " 3" in invoke("product", "show", "--id", "1").output

    def test_negative_stock_is_an_error(self, invoke):
        _add_lamp(invoke)
        result = invoke("product", "stock", "--id", "1", "--quantity", "-3")
        assert result.exit_code == 1
        assert "non-negative" in result.output

    def test_price_change_keeps_existing_order_totals(self, invoke):
        _add_lamp(invoke)
        invoke("order", "create", "--email", "a@example.com", "--name", "A",
               "--product", "1", "--quantity", "2")

        result = invoke("product", "price", "--id", "1", "--price", "25.00")

        assert result.exit_code == 0, result.output
        assert "Price for product #1 set to $25.00" in result.output
        assert "$25.00" in invoke("product", "show", "--id", "1").output
        assert "$40.00" in invoke("order", "show", "--id", "1").output

    def test_invalid_price(self, invoke):
        _add_lamp(invoke)
        result = invoke("product", "price", "--id", "1", "--price", "cheap")
        assert result.exit_code == 1
        assert "Invalid money amount" in result.output

    def test_unknown_product(self, invoke):
        result = invoke("product", "show", "--id", "42")
        assert result.exit_code == 1
        assert "Product with ID '42' not found" in result.output


class TestOrderCommands:

    def test_create_pay_and_revenue(self, invoke):
        _add_lamp(invoke)

        created = invoke(
            "order", "create", "--email", "alice@example.com", "--name", "Alice",
            "--product", "1", "--quantity", "3",
        )
        assert created.exit_code == 0, created.output
        assert "Order #1 created  (status=PENDING)" in created.output
        assert "$60.00" in created.output

        paid = invoke("order", "pay", "--id", "1", "--method", "CREDIT_CARD")
        assert paid.exit_code == 0, paid.output
        assert "CONFIRMED" in paid.output

        assert "Total revenue: $60.00" in invoke("revenue").output
        assert "Paid via: CREDIT_CARD" in invoke("order", "show", "--id", "1").output

    def test_declined_payment_exits_non_zero(self, invoke):
        _add_lamp(invoke)
        invoke("order", "create", "--email", "a@example.com", "--name", "A",
               "--product", "1", "--quantity", "1")

        result = invoke("order", "pay", "--id", "1", decline="1.0")

        assert result.exit_code == 1
        assert "Payment for order #1 failed" in result.output
        assert "Total revenue: $0.00" in invoke("revenue").output

    def test_insufficient_stock(self, invoke):
        _add_lamp(invoke, stock="2")
        result = invoke("order", "create", "--email", "a@example.com", "--name", "A",
                        "--product", "1", "--quantity", "5")
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output

    def test_status_and_listing(self, invoke):
        _add_lamp(invoke)
        invoke("order", "create", "--email", "a@example.com", "--name", "A",
               "--product", "1", "--quantity", "1")
        invoke("order", "create", "--email", "b@example.com", "--name", "B",
               "--product", "1", "--quantity", "1")

        result = invoke("order", "status", "--id", "2", "--status", "cancelled")
        assert result.exit_code == 0
        assert "Order #2 is now CANCELLED" in result.output

        mine = invoke("order", "list", "--email", "b@example.com")
        assert "CANCELLED" in mine.output
        assert "a@example.com" not in mine.output

    def test_show_unknown_order(self, invoke):
        result = invoke("order", "show", "--id", "9")
        assert result.exit_code == 1
        assert "Order #9 not found" in result.output


class TestSimulateCommand:

    def test_traffic_run(self, invoke):
        _add_lamp(invoke, stock="50")
        result = invoke("simulate", "traffic", "--requests", "30", "--workers", "4", "--seed", "1")
        assert result.exit_code == 0, result.output
        assert "Requests:          30" in result.output
