"""Tests for ProductService use cases."""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from unittest.mock import create_autospec

import pytest

from stockroom.domain.errors import PersistenceError
from stockroom.domain.product import Product
from stockroom.domain.repositories import ProductRepository
from stockroom.infrastructure.memory import InMemoryProductRepository
from stockroom.services.products import ProductService
from tests.conftest import make_product, register


@pytest.fixture
def mock_repo() -> ProductRepository:
    repo = create_autospec(ProductRepository, instance=True)
    repo.exists_by_name.return_value = False
    repo.get_by_id.return_value = None
    return repo


class TestRegisterNewProduct:
    def test_success(
        self, service: ProductService, memory_repo: InMemoryProductRepository
    ) -> None:
        result = service.register_new_product("Widget", Decimal("9.99"), 10)
        assert result.ok
        assert result.op == "register_new_product"
        assert result.data["name"] == "Widget"
        assert result.data["price"] == "9.99"
        assert result.data["stock"] == 10
        assert result.data["active"] is True
        assert len(memory_repo) == 1

    def test_with_supplier_email(self, service: ProductService) -> None:
        data = register(service, "Widget", supplier_email="Orders@ACME.com")
        assert data["supplier_email"] == "Orders@acme.com"

    def test_duplicate_name_rejected(self, service: ProductService) -> None:
        register(service, "Widget")
        result = service.register_new_product("Widget", "5.00", 1)
        assert not result.ok
        assert result.error.code == "ALREADY_REGISTERED"
        assert result.error.kind == "business_rule"
        assert result.error.detail == {"name": "Widget"}

    def test_duplicate_checked_after_strip(self, service: ProductService) -> None:
        register(service, "Widget")
        result = service.register_new_product("  Widget ", "5.00")
        assert not result.ok
        assert result.error.code == "ALREADY_REGISTERED"

    def test_duplicate_never_writes(self, mock_repo: ProductRepository) -> None:
        mock_repo.exists_by_name.return_value = True
        result = ProductService(mock_repo).register_new_product("Widget", "9.99")
        assert not result.ok
        mock_repo.exists_by_name.assert_called_once_with("Widget")
        mock_repo.add.assert_not_called()

    def test_unique_name_added_once(self, mock_repo: ProductRepository) -> None:
        result = ProductService(mock_repo).register_new_product("Widget", "9.99", 3)
        assert result.ok
        mock_repo.add.assert_called_once()
        added = mock_repo.add.call_args.args[0]
        assert isinstance(added, Product)
        assert added.name == "Widget"
        assert str(added.id) == result.data["id"]

    @pytest.mark.parametrize(
        ("name", "price", "stock"),
        [("", "9.99", 0), ("Widget", "0", 0), ("Widget", "-3", 0), ("Widget", "9.99", -1)],
    )
    def test_invalid_input_never_touches_store(
        self, mock_repo: ProductRepository, name: str, price: str, stock: int
    ) -> None:
        result = ProductService(mock_repo).register_new_product(name, price, stock)
        assert not result.ok
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.kind == "validation"
        mock_repo.exists_by_name.assert_not_called()
        mock_repo.add.assert_not_called()

    def test_invalid_email(self, service: ProductService) -> None:
        result = service.register_new_product("Widget", "1", supplier_email="abc")
        assert not result.ok
        assert result.error.code == "VALIDATION_FAILED"

    def test_persistence_error_propagates(self, mock_repo: ProductRepository) -> None:
        mock_repo.add.side_effect = PersistenceError("disk full")
        with pytest.raises(PersistenceError, match="disk full"):
            ProductService(mock_repo).register_new_product("Widget", "9.99")

    def test_rejection_logged(
        self, service: ProductService, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="stockroom"):
            service.register_new_product("", "9.99")
        assert any("VALIDATION_FAILED" in rec.getMessage() for rec in caplog.records)


class TestReads:
    def test_get_product(self, service: ProductService) -> None:
        created = register(service, "Widget")
        result = service.get_product(created["id"])
        assert result.ok
        assert result.data == created

    def test_get_product_accepts_uuid(self, service: ProductService) -> None:
        created = register(service, "Widget")
        assert service.get_product(uuid.UUID(created["id"])).ok

    @pytest.mark.parametrize("product_id", ["not-a-uuid", str(uuid.uuid4())])
    def test_get_missing(self, service: ProductService, product_id: str) -> None:
        result = service.get_product(product_id)
        assert not result.ok
        assert result.error.code == "NOT_FOUND"

    def test_list_products(self, service: ProductService) -> None:
        register(service, "A")
        b = register(service, "B")
        service.deactivate_product(b["id"])

        everything = service.list_products()
        assert everything.ok
        assert everything.data["count"] == 2
        assert [p["name"] for p in everything.data["items"]] == ["A", "B"]

        active = service.list_products(include_inactive=False)
        assert [p["name"] for p in active.data["items"]] == ["A"]

    def test_list_empty(self, service: ProductService) -> None:
        result = service.list_products()
        assert result.data == {"count": 0, "items": []}


class TestSingleProductMutations:
    def test_deactivate(self, service: ProductService) -> None:
        created = register(service, "Widget")
        result = service.deactivate_product(created["id"])
        assert result.ok
        assert result.data["active"] is False
        assert service.get_product(created["id"]).data["active"] is False

    def test_deactivate_twice(self, service: ProductService) -> None:
        created = register(service, "Widget")
        service.deactivate_product(created["id"])
        result = service.deactivate_product(created["id"])
        assert not result.ok
        assert result.error.code == "VALIDATION_FAILED"

    def test_reactivate(self, service: ProductService) -> None:
        created = register(service, "Widget")
        service.deactivate_product(created["id"])
        result = service.reactivate_product(created["id"])
        assert result.ok
        assert result.data["active"] is True

    def test_update_price(self, service: ProductService) -> None:
        created = register(service, "Widget", price="9.99")
        result = service.update_product_price(created["id"], "12.50")
        assert result.ok
        assert service.get_product(created["id"]).data["price"] == "12.50"

    def test_update_price_invalid_keeps_stored(self, service: ProductService) -> None:
        created = register(service, "Widget", price="9.99")
        result = service.update_product_price(created["id"], -1)
        assert not result.ok
        assert service.get_product(created["id"]).data["price"] == "9.99"

    def test_restock(self, service: ProductService) -> None:
        created = register(service, "Widget", stock=2)
        result = service.restock_product(created["id"], 5)
        assert result.ok
        assert result.data["stock"] == 7

    def test_restock_non_positive(self, service: ProductService) -> None:
        created = register(service, "Widget", stock=2)
        result = service.restock_product(created["id"], 0)
        assert not result.ok
        assert service.get_product(created["id"]).data["stock"] == 2

    def test_missing_product_never_writes(self, mock_repo: ProductRepository) -> None:
        result = ProductService(mock_repo).deactivate_product(uuid.uuid4())
        assert not result.ok
        assert result.error.code == "NOT_FOUND"
        mock_repo.update.assert_not_called()

    def test_failed_change_never_writes(self, mock_repo: ProductRepository) -> None:
        mock_repo.get_by_id.return_value = make_product()
        result = ProductService(mock_repo).reactivate_product(uuid.uuid4())
        assert not result.ok
        mock_repo.update.assert_not_called()


class TestRenameProduct:
    def test_rename(self, service: ProductService) -> None:
        created = register(service, "Widget")
        result = service.rename_product(created["id"], "Gadget")
        assert result.ok
        assert result.data["name"] == "Gadget"
        assert service.get_product(created["id"]).data["name"] == "Gadget"

    def test_rename_to_taken_name(self, service: ProductService) -> None:
        register(service, "Widget")
        gadget = register(service, "Gadget")
        result = service.rename_product(gadget["id"], "Widget")
        assert not result.ok
        assert result.error.code == "ALREADY_REGISTERED"
        assert service.get_product(gadget["id"]).data["name"] == "Gadget"

    def test_rename_unchanged_warns(self, mock_repo: ProductRepository) -> None:
        mock_repo.get_by_id.return_value = make_product("Widget")
        result = ProductService(mock_repo).rename_product(uuid.uuid4(), "Widget")
        assert result.ok
        assert result.warnings == ["Name unchanged"]
        mock_repo.update.assert_not_called()

    def test_rename_empty(self, service: ProductService) -> None:
        created = register(service, "Widget")
        result = service.rename_product(created["id"], "  ")
        assert not result.ok
        assert result.error.code == "VALIDATION_FAILED"


class TestRemoveProduct:
    def test_remove(self, service: ProductService) -> None:
        created = register(service, "Widget")
        result = service.remove_product(created["id"])
        assert result.ok
        assert result.data == {"id": created["id"], "name": "Widget"}
        assert service.get_product(created["id"]).error.code == "NOT_FOUND"

    def test_name_free_after_remove(self, service: ProductService) -> None:
        created = register(service, "Widget")
        service.remove_product(created["id"])
        assert service.register_new_product("Widget", "1").ok

    def test_remove_missing(self, service: ProductService) -> None:
        result = service.remove_product(uuid.uuid4())
        assert not result.ok
        assert result.error.code == "NOT_FOUND"


class TestTransferStock:
    def test_transfer(self, service: ProductService) -> None:
        source = register(service, "Source", stock=10)
        destination = register(service, "Destination", stock=1)

        result = service.transfer_stock(source["id"], destination["id"], 4)
        assert result.ok
        assert result.data["quantity"] == 4
        assert result.data["source"]["stock"] == 6
        assert result.data["destination"]["stock"] == 5
        assert service.get_product(source["id"]).data["stock"] == 6
        assert service.get_product(destination["id"]).data["stock"] == 5

    def test_transfer_entire_stock(self, service: ProductService) -> None:
        source = register(service, "Source", stock=3)
        destination = register(service, "Destination", stock=0)
        assert service.transfer_stock(source["id"], destination["id"], 3).ok
        assert service.get_product(source["id"]).data["stock"] == 0

    def test_insufficient_stock_no_partial_write(self, service: ProductService) -> None:
        source = register(service, "Source", stock=2)
        destination = register(service, "Destination", stock=1)

        result = service.transfer_stock(source["id"], destination["id"], 5)
        assert not result.ok
        assert result.error.code == "INSUFFICIENT_STOCK"
        assert result.error.kind == "business_rule"
        assert result.error.detail["available"] == 2
        assert service.get_product(source["id"]).data["stock"] == 2
        assert service.get_product(destination["id"]).data["stock"] == 1

    def test_missing_destination_no_write(self, mock_repo: ProductRepository) -> None:
        source = make_product("Source", stock=5)
        mock_repo.get_by_id.side_effect = lambda pid: source if pid == source.id else None
        result = ProductService(mock_repo).transfer_stock(source.id, uuid.uuid4(), 1)
        assert not result.ok
        assert result.error.code == "NOT_FOUND"
        mock_repo.update.assert_not_called()

    def test_same_product_rejected(self, service: ProductService) -> None:
        source = register(service, "Source", stock=5)
        result = service.transfer_stock(source["id"], source["id"], 1)
        assert not result.ok
        assert result.error.code == "BUSINESS_RULE"
        assert service.get_product(source["id"]).data["stock"] == 5

    def test_inactive_product_rejected(self, service: ProductService) -> None:
        source = register(service, "Source", stock=5)
        destination = register(service, "Destination")
        service.deactivate_product(destination["id"])
        result = service.transfer_stock(source["id"], destination["id"], 1)
        assert not result.ok
        assert result.error.code == "BUSINESS_RULE"
        assert service.get_product(source["id"]).data["stock"] == 5

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_invalid_quantity(self, mock_repo: ProductRepository, quantity: int) -> None:
        result = ProductService(mock_repo).transfer_stock(uuid.uuid4(), uuid.uuid4(), quantity)
        assert not result.ok
        assert result.error.code == "VALIDATION_FAILED"
        mock_repo.get_by_id.assert_not_called()

    def test_both_updates_issued(self, mock_repo: ProductRepository) -> None:
        source = make_product("Source", stock=5)
        destination = make_product("Destination", stock=0)
        by_id = {source.id: source, destination.id: destination}
        mock_repo.get_by_id.side_effect = by_id.get

        result = ProductService(mock_repo).transfer_stock(source.id, destination.id, 2)
        assert result.ok
        updated = [c.args[0] for c in mock_repo.update.call_args_list]
        assert [p.id for p in updated] == [source.id, destination.id]
        assert [p.stock for p in updated] == [3, 2]
