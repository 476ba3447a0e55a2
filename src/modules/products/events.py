"""Domain events for the Products bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ProductStockUpdated(DomainEvent):
    """Raised whenever a product's available quantity is overwritten."""

    event_type = "product.stock.updated"
    aggregate_key = "product_id"

    stock_quantity: int
