"""Order aggregate.

``Order`` and ``OrderItem`` are plain immutable records.  ``OrderAggregate``
wraps an ``Order`` and is the only place that produces new versions of it,
so every mutation goes through the invariants below:

- ``total == sum(item.price * item.quantity)``, recomputed on every change.
- ``items`` is never empty and ``total`` is always greater than zero.
- Items can only change while the order is ``pending``.
- Status changes follow ``VALID_TRANSITIONS``.

``OrderItem.price`` is the unit price captured when the order was placed;
later product price changes never reach existing orders.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from modules.orders.constants import VALID_TRANSITIONS, OrderStatus
from modules.orders.exceptions import (
    InvalidOrderData,
    InvalidOrderStatus,
    OrderAlreadyCancelled,
    OrderInTerminalState,
    OrderNotMutable,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Order:
    id: str
    user_id: str
    items: Tuple[OrderItem, ...]
    status: str
    total: Decimal
    created_at: datetime
    updated_at: datetime


class OrderAggregate:
    """Business rules for a single order."""

    def __init__(self, order: Order) -> None:
        self._order = order

    @classmethod
    def create(
        cls,
        id: str,
        user_id: str,
        items: Iterable[OrderItem],
        now: Optional[datetime] = None,
    ) -> OrderAggregate:
        """Build a new ``pending`` order.

        Raises:
            InvalidOrderData: empty user id, no items, or an invalid item.
        """
        items = tuple(items)
        _validate_user_id(user_id)
        _validate_items(items)

        timestamp = now or _now()
        return cls(
            Order(
                id=id,
                user_id=user_id,
                items=items,
                status=OrderStatus.PENDING.value,
                total=calculate_total(items),
                created_at=timestamp,
                updated_at=timestamp,
            )
        )

    @property
    def order(self) -> Order:
        return self._order

    # ------------------------------------------------------------------
    # Status machine
    # ------------------------------------------------------------------

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self._order.status, set())

    def update_status(self, new_status: str) -> None:
        """Move the order to *new_status*.

        Raises:
            InvalidOrderStatus: *new_status* is not reachable from the
                current status (or is not a known status at all).
        """
        if not self.can_transition_to(new_status):
            raise InvalidOrderStatus(
                f"Invalid status transition from {self._order.status} "
                f"to {new_status}."
            )
        self._order = replace(
            self._order, status=OrderStatus(new_status).value, updated_at=_now()
        )

    def cancel(self) -> None:
        """Cancel the order.

        Raises:
            OrderAlreadyCancelled: the order is already cancelled.
            OrderInTerminalState: the order was delivered.
            InvalidOrderStatus: any other status that cannot be cancelled.
        """
        if self._order.status == OrderStatus.CANCELLED:
            raise OrderAlreadyCancelled(f"Order {self._order.id} is already cancelled.")
        if self._order.status == OrderStatus.DELIVERED:
            raise OrderInTerminalState(
                f"Cannot cancel order {self._order.id}: it was already delivered."
            )
        self.update_status(OrderStatus.CANCELLED.value)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(self, item: OrderItem) -> None:
        """Append *item* and recompute the total.

        Raises:
            OrderNotMutable: the order is no longer pending.
            InvalidOrderData: the item is invalid.
        """
        if self._order.status != OrderStatus.PENDING:
            raise OrderNotMutable(
                f"Items can only be added to pending orders "
                f"(order {self._order.id} is {self._order.status})."
            )
        _validate_item(item)

        items = self._order.items + (item,)
        self._order = replace(
            self._order,
            items=items,
            total=calculate_total(items),
            updated_at=_now(),
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Re-check every invariant; called before persisting.

        Raises:
            InvalidOrderData: the first violated invariant.
        """
        if not self._order.id:
            raise InvalidOrderData("Order ID cannot be empty.")
        _validate_user_id(self._order.user_id)
        _validate_items(self._order.items)
        if self._order.total <= 0:
            raise InvalidOrderData("Order total must be greater than zero.")


def calculate_total(items: Iterable[OrderItem]) -> Decimal:
    return sum((item.subtotal for item in items), Decimal("0"))


def _validate_user_id(user_id: str) -> None:
    if not user_id:
        raise InvalidOrderData("User ID cannot be empty.")


def _validate_items(items: Tuple[OrderItem, ...]) -> None:
    if not items:
        raise InvalidOrderData("Order must have at least one item.")
    for position, item in enumerate(items):
        try:
            _validate_item(item)
        except InvalidOrderData as exc:
            raise InvalidOrderData(f"Invalid item at position {position}: {exc}") from exc


def _validate_item(item: OrderItem) -> None:
    if not item.product_id:
        raise InvalidOrderData("Product ID cannot be empty.")
    if item.quantity <= 0:
        raise InvalidOrderData("Quantity must be greater than zero.")
    if item.price is None or item.price <= 0:
        raise InvalidOrderData("Price must be greater than zero.")
