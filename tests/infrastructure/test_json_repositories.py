"""Tests for the JSON-file-backed repositories."""

import json
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository


def _lamp() -> Product:
    return Product.create("Desk Lamp", Money.of("19.99"), "Home", 10)


class TestJsonProductRepository:

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "products.json"
        JsonProductRepository(path)
        assert json.loads(path.read_text()) == []

    def test_save_assigns_sequential_ids(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        first, second = _lamp(), _lamp()
        repo.save(first)
        repo.save(second)
        assert (first.id, second.id) == ("1", "2")

    def test_round_trip_keeps_decimal_and_stock(self, tmp_path):
        path = tmp_path / "products.json"
        repo = JsonProductRepository(path)
        repo.save(_lamp())

        loaded = JsonProductRepository(path).get_by_id("1")

        assert loaded.price.amount == Decimal("19.99")
        assert loaded.stock == 10
        assert loaded.category == "Home"
        assert json.loads(path.read_text())[0]["price"] == "19.99"

    def test_save_updates_in_place(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        product = _lamp()
        repo.save(product)
        product.set_stock(3)
        repo.save(product)

        assert [p.stock for p in repo.list_all()] == [3]

    def test_missing_product(self, tmp_path):
        assert JsonProductRepository(tmp_path / "products.json").get_by_id("9") is None

    def test_concurrent_saves_are_not_lost(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda n: repo.save(Product.create(f"P{n}", Money.of("1"))), range(40)))

        products = repo.list_all()
        assert len(products) == 40
        assert len({p.id for p in products}) == 40

    def test_writes_leave_no_temp_files(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        for _ in range(5):
            repo.save(_lamp())

        assert list(tmp_path.glob("*.tmp")) == []
        assert len(json.loads((tmp_path / "products.json").read_text())) == 5

    def test_failed_write_keeps_previous_file(self, tmp_path, monkeypatch):
        path = tmp_path / "products.json"
        repo = JsonProductRepository(path)
        repo.save(_lamp())
        before = path.read_text()

        def fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("storefront.infrastructure.persistence.json_file.os.replace", fail)
        with pytest.raises(OSError, match="disk full"):
            repo.save(_lamp())

        assert path.read_text() == before
        assert list(tmp_path.glob("*.tmp")) == []

    def test_instances_on_one_file_share_record_lock_files(self, tmp_path):
        path = tmp_path / "products.json"
        first, second = JsonProductRepository(path), JsonProductRepository(path)

        assert first.record_lock("7").lock_file == second.record_lock("7").lock_file
        assert first.record_lock("7") is not second.record_lock("7")


class TestJsonOrderRepository:

    def _order(self) -> Order:
        product = Product(id="1", name="Desk Lamp", price=Money.of("19.99"), stock=5)
        return Order.create("alice@example.com", "Alice", product, Quantity(2))

    def test_round_trip(self, tmp_path):
        path = tmp_path / "orders.json"
        repo = JsonOrderRepository(path)
        order = self._order()
        order.confirm_payment("PAYPAL")
        repo.save(order)

        loaded = JsonOrderRepository(path).get_by_id(order.id)

        assert loaded.id == 1
        assert loaded.total_amount == Money.of("39.98")
        assert loaded.unit_price == Money.of("19.99")
        assert loaded.status == OrderStatus.CONFIRMED
        assert loaded.payment_method == "PAYPAL"
        assert loaded.created_at == order.created_at

    def test_queries(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        first, second = self._order(), self._order()
        second.customer_email = "bob@example.com"
        second.confirm_payment("CREDIT_CARD")
        repo.save(first)
        repo.save(second)

        assert [o.id for o in repo.list_by_customer("ALICE@example.com")] == [1]
        assert [o.id for o in repo.list_by_status(OrderStatus.CONFIRMED)] == [2]
        assert repo.next_id() == 3

    def test_delete(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = self._order()
        repo.save(order)
        repo.delete(order.id)
        assert repo.get_by_id(order.id) is None
        assert repo.list_all() == []

    def test_save_takes_next_id_from_the_file(self, tmp_path):
        path = tmp_path / "orders.json"
        JsonOrderRepository(path).save(self._order())

        # A second instance sees the order the first one wrote.
        order = self._order()
        JsonOrderRepository(path).save(order)

        assert order.id == 2
