"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    event_type = "order.created"
    aggregate_key = "order_id"

    user_id: str
    total: Decimal


@dataclass(frozen=True, kw_only=True)
class OrderStatusUpdated(DomainEvent):
    """Raised when an order status changes."""

    event_type = "order.status.updated"
    aggregate_key = "order_id"

    old_status: str
    new_status: str


@dataclass(frozen=True, kw_only=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""

    event_type = "order.cancelled"
    aggregate_key = "order_id"

    user_id: str
    total: Decimal
