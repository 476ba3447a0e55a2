"""Unit tests for ProductService.

Covers:
- create_product: happy path, duplicate SKU.
- get_product: happy path, not found.
- list_products: delegation to repository.
- update_stock: absolute write, negative quantity, unknown product,
  ``product.stock.updated`` publishing.
- update_product / delete_product: partial edits, retirement, not found.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    InvalidStockQuantity,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_repo():
    return MagicMock()


@pytest.fixture()
def mock_bus():
    return MagicMock()


@pytest.fixture()
def service(mock_repo, mock_bus):
    return ProductService(repository=mock_repo, event_bus=mock_bus)


def _product(**overrides) -> Product:
    defaults = {
        "sku": "SKU-001",
        "name": "Widget",
        "price": Decimal("19.99"),
        "stock_quantity": 10,
    }
    defaults.update(overrides)
    return Product(**defaults)


# ---------------------------------------------------------------------------
# create_product
# ---------------------------------------------------------------------------


class TestCreateProduct:
    def test_creates_product(self, service, mock_repo):
        mock_repo.get_by_sku.return_value = None
        mock_repo.save.side_effect = lambda p: p
        dto = CreateProductDTO(
            sku="new-01", name="Gadget", price=Decimal("5.00"), stock_quantity=3
        )

        product = service.create_product(dto)

        assert product.sku == "NEW-01"
        assert product.stock_quantity == 3
        mock_repo.save.assert_called_once()

    def test_duplicate_sku(self, service, mock_repo):
        mock_repo.get_by_sku.return_value = _product()
        dto = CreateProductDTO(sku="SKU-001", name="Dup", price=Decimal("1.00"))

        with pytest.raises(ProductAlreadyExists):
            service.create_product(dto)

        mock_repo.save.assert_not_called()


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_get_product(self, service, mock_repo):
        product = _product()
        mock_repo.get_by_id.return_value = product

        assert service.get_product(str(product.id)) is product

    def test_get_product_not_found(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(ProductNotFound):
            service.get_product("missing")

    def test_get_product_empty_id(self, service, mock_repo):
        with pytest.raises(ProductNotFound):
            service.get_product("")
        mock_repo.get_by_id.assert_not_called()

    def test_list_products_delegates(self, service, mock_repo):
        service.list_products({"stock_quantity__gt": 0})
        mock_repo.list.assert_called_once_with({"stock_quantity__gt": 0})


# ---------------------------------------------------------------------------
# update_stock
# ---------------------------------------------------------------------------


class TestUpdateStock:
    def test_writes_absolute_quantity_and_publishes(self, service, mock_repo, mock_bus):
        mock_repo.update_stock.return_value = 1

        service.update_stock("p1", 7)

        mock_repo.update_stock.assert_called_once_with("p1", 7)
        event = mock_bus.publish.call_args.args[0]
        assert event.event_type == "product.stock.updated"
        assert event.payload == {"product_id": "p1", "stock_quantity": 7}

    def test_zero_is_allowed(self, service, mock_repo):
        mock_repo.update_stock.return_value = 1
        service.update_stock("p1", 0)
        mock_repo.update_stock.assert_called_once_with("p1", 0)

    def test_negative_quantity(self, service, mock_repo, mock_bus):
        with pytest.raises(InvalidStockQuantity):
            service.update_stock("p1", -1)

        mock_repo.update_stock.assert_not_called()
        mock_bus.publish.assert_not_called()

    def test_unknown_product(self, service, mock_repo, mock_bus):
        mock_repo.update_stock.return_value = 0

        with pytest.raises(ProductNotFound):
            service.update_stock("missing", 3)

        mock_bus.publish.assert_not_called()

    def test_publish_failure_ignored(self, service, mock_repo, mock_bus):
        mock_repo.update_stock.return_value = 1
        mock_bus.publish.side_effect = RuntimeError("bus down")

        service.update_stock("p1", 2)


# ---------------------------------------------------------------------------
# update_product / delete_product
# ---------------------------------------------------------------------------


class TestUpdateProduct:
    def test_applies_only_supplied_fields(self, service, mock_repo):
        product = _product()
        mock_repo.get_by_id.return_value = product
        mock_repo.save.side_effect = lambda p: p

        updated = service.update_product(
            str(product.id), UpdateProductDTO(price=Decimal("24.50"))
        )

        assert updated.price == Decimal("24.50")
        assert updated.name == "Widget"
        assert updated.stock_quantity == 10
        mock_repo.save.assert_called_once_with(product)

    def test_stock_correction_is_not_published(self, service, mock_repo, mock_bus):
        product = _product()
        mock_repo.get_by_id.return_value = product
        mock_repo.save.side_effect = lambda p: p

        service.update_product(str(product.id), UpdateProductDTO(stock_quantity=3))

        assert product.stock_quantity == 3
        mock_bus.publish.assert_not_called()

    def test_unknown_product(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(ProductNotFound):
            service.update_product("missing", UpdateProductDTO(name="New"))

        mock_repo.save.assert_not_called()

    @pytest.mark.parametrize(
        "fields",
        [{"price": Decimal("0")}, {"stock_quantity": -1}, {"name": "  "}],
    )
    def test_dto_rejects_invalid_values(self, fields):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            UpdateProductDTO(**fields)


class TestDeleteProduct:
    def test_retires_product(self, service, mock_repo):
        mock_repo.delete.return_value = True

        service.delete_product("p1")

        mock_repo.delete.assert_called_once_with("p1")

    @pytest.mark.parametrize("product_id", ["missing", ""])
    def test_unknown_product(self, service, mock_repo, product_id):
        mock_repo.delete.return_value = False

        with pytest.raises(ProductNotFound):
            service.delete_product(product_id)
