"""Product service layer (Use Cases).

Besides catalogue management this service is the **stock boundary** of
the order workflow: ``get_product`` reads the live quantity and
``update_stock`` overwrites it with an absolute value computed by the
caller.  The boundary keeps no state between calls, so a read followed
by a write from the caller is a read-modify-write that other requests
can interleave with.

Business rules enforced here:
- SKU must be unique.
- Price must be greater than zero (validated by DTO).
- Stock cannot be negative.
- Deleted products are retired: hidden from reads and no longer orderable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models, transaction

from modules.products.events import ProductStockUpdated
from modules.products.exceptions import (
    InvalidStockQuantity,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` and an event bus via constructor
    injection (DIP).
    """

    def __init__(self, repository: IProductRepository, event_bus: IEventBus) -> None:
        self._repo = repository
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing uniqueness rules.

        Raises:
            ProductAlreadyExists: if SKU is already taken.
        """
        log = logger.bind(sku=dto.sku)

        if self._repo.get_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        product = Product(
            sku=dto.sku,
            name=dto.name,
            price=dto.price,
            description=dto.description,
            stock_quantity=dto.stock_quantity,
        )
        product = self._repo.save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the fields set on *dto* to a live product.

        A stock change made here is an operator correction; it is written
        like any other field and is not announced on the bus.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self.get_product(id)
        changes = dto.changes()
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save(product)
        logger.info(
            "product.updated", product_id=str(product.id), fields=sorted(changes)
        )
        return product

    def delete_product(self, id: str) -> None:
        """Retire a product; existing orders keep referencing it.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not id or not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=str(id))

    def update_stock(self, id: str, quantity: int) -> None:
        """Set the available quantity of a product to *quantity*.

        Raises:
            InvalidStockQuantity: if *quantity* is negative.
            ProductNotFound: if the product does not exist.
        """
        if quantity < 0:
            raise InvalidStockQuantity(
                f"Stock for product {id} cannot be set to {quantity}."
            )
        if not self._repo.update_stock(id, quantity):
            raise ProductNotFound(f"Product {id} not found.")

        logger.info("product.stock_updated", product_id=str(id), quantity=quantity)

        try:
            self._event_bus.publish(
                ProductStockUpdated(aggregate_id=str(id), stock_quantity=quantity)
            )
        except Exception:
            logger.exception("product.event_publish_failed", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """Return products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id) if id else None
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product
