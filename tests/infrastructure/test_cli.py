"""CLI tests through click's CliRunner, over in-memory fakes."""

import pytest
from click.testing import CliRunner

from storefront.infrastructure.cli.main import cli
from tests.fakes import make_store

ADDRESS = ["--address", "1 Main St", "--city", "Springfield", "--postal-code", "12345", "--country", "US"]


@pytest.fixture
def store():
    return make_store()


@pytest.fixture
def run(store):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, list(args), obj=store.services)

    return invoke


class TestCartCommands:

    def test_add_and_show(self, run):
        result = run("cart", "add", "--buyer", "alice", "--product", "1", "--quantity", "3")
        assert result.exit_code == 0, result.output
        assert "Widget" in result.output
        assert "$113.50" in result.output

        result = run("cart", "show", "--buyer", "bob")
        assert "Cart for bob is empty." in result.output

    def test_unknown_product(self, run):
        result = run("cart", "add", "--buyer", "alice", "--product", "42")
        assert result.exit_code == 1
        assert "Product '42' not found" in result.output

    def test_set_zero_removes(self, run):
        run("cart", "add", "--buyer", "alice", "--product", "1")
        result = run("cart", "set", "--buyer", "alice", "--product", "1", "--quantity", "0")
        assert "is empty" in result.output


class TestOrderCommands:

    def test_checkout_then_cancel(self, run, store):
        run("cart", "add", "--buyer", "alice", "--product", "1", "--quantity", "2")

        result = run("order", "checkout", "--buyer", "alice", *ADDRESS)
        assert result.exit_code == 0, result.output
        assert "placed" in result.output
        assert "Pay at: https://pay.test/session/ORD-" in result.output
        assert store.inventory.get_by_product_id("1").stock == 8

        result = run("order", "cancel", "--id", "1", "--actor", "alice")
        assert result.exit_code == 0, result.output
        assert store.inventory.get_by_product_id("1").stock == 10

    def test_checkout_empty_cart(self, run):
        result = run("order", "checkout", "--buyer", "alice", *ADDRESS)
        assert result.exit_code == 1
        assert "Cart is empty" in result.output

    def test_checkout_explicit_items_cod(self, run):
        result = run(
            "order", "checkout", "--buyer", "alice", "--items", "2:2,1:1", "--payment", "cod", *ADDRESS
        )
        assert result.exit_code == 0, result.output
        assert "Pay at" not in result.output
        assert "Gadget" in result.output

    def test_bad_items_format(self, run):
        result = run("order", "checkout", "--buyer", "alice", "--items", "Widget", *ADDRESS)
        assert result.exit_code == 2
        assert "Expected 'ProductID:Quantity'" in result.output

    def test_status_pay_and_stats(self, run):
        run("order", "checkout", "--buyer", "alice", "--items", "1:1", "--payment", "cod", *ADDRESS)

        result = run("order", "status", "--id", "1", "--to", "processing", "--actor", "alice")
        assert result.exit_code == 1
        assert "sellers and admins" in result.output

        result = run("order", "status", "--id", "1", "--to", "processing", "--actor", "sam", "--role", "seller")
        assert "is now processing" in result.output

        result = run("order", "pay", "--id", "1", "--reference", "pi_1")
        assert "marked paid" in result.output

        result = run("order", "stats", "--actor", "root", "--role", "admin")
        assert "Total orders:  1" in result.output
        assert "processing       1" in result.output

    def test_show_requires_one_reference(self, run):
        result = run("order", "show", "--actor", "alice")
        assert result.exit_code == 2

    def test_list_for_buyer_and_staff(self, run):
        run("order", "checkout", "--buyer", "alice", "--items", "1:1", "--payment", "cod", *ADDRESS)
        run("order", "checkout", "--buyer", "bob", "--items", "2:1", "--payment", "cod", *ADDRESS)

        mine = run("order", "list", "--actor", "alice")
        assert "1 order(s)" in mine.output
        assert "bob" not in mine.output

        everyone = run("order", "list", "--actor", "sam", "--role", "seller")
        assert "Page 1 of 1 (2 order(s))" in everyone.output


class TestCatalogCommands:

    def test_product_add_and_list(self, run):
        result = run("product", "add", "--name", "Doohickey", "--price", "4.25", "--stock", "7")
        assert result.exit_code == 0, result.output
        assert "Product #4 'Doohickey' added at $4.25" in result.output

        assert "Doohickey" in run("product", "list").output

    def test_inventory_set_and_show(self, run):
        result = run("inventory", "set", "--product", "2", "--stock", "42")
        assert result.exit_code == 0, result.output
        assert "Stock for Gadget (#2) set to 42 (0 sold)" in result.output

        assert "42" in run("inventory", "show").output


class TestGlobalOptions:

    def test_unknown_log_level_is_a_usage_error(self, run):
        result = run("--log-level", "chatty", "cart", "show", "--buyer", "alice")
        assert result.exit_code == 2
        assert "Invalid value for '--log-level'" in result.output

    def test_log_level_is_case_insensitive(self, run):
        result = run("--log-level", "debug", "cart", "show", "--buyer", "alice")
        assert result.exit_code == 0, result.output
