"""Product repository interface.

Extends ``IRepository[Product]`` with the SKU look-up used to keep SKUs
unique and the absolute stock write used by the order workflow.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional filters."""

    @abstractmethod
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Retire a product; ``False`` when there is no live product."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU."""

    @abstractmethod
    def update_stock(self, id: str, quantity: int) -> int:
        """Overwrite the stock quantity of a product.

        Returns the number of rows affected (``0`` when the product
        does not exist).  No arithmetic and no locking: the caller
        computes the new absolute value from its own earlier read.
        """
