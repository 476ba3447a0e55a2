"""Order domain exceptions.

Raised by the aggregate and the Service Layer when business rules are
violated.  The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderError(Exception):
    """Base class for every order workflow failure."""


class InvalidOrderData(OrderError):
    """Malformed input to an aggregate operation (empty ids, bad quantities)."""


class InvalidOrderStatus(OrderError):
    """An invalid status transition was attempted."""


class OrderAlreadyCancelled(InvalidOrderStatus):
    """Cancellation requested for an order that is already cancelled."""


class OrderInTerminalState(InvalidOrderStatus):
    """Cancellation requested for an order that was already delivered."""


class OrderNotMutable(OrderError):
    """Items can only be added while the order is pending."""


class InvalidUser(OrderError):
    """The user referenced by the request does not exist."""


class InvalidProduct(OrderError):
    """A product referenced by an order item does not exist."""


class InsufficientStock(OrderError):
    """Not enough stock to fulfil the order.

    Quantities of line items sharing a product are summed before the check.
    """

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}."
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class OrderNotFound(OrderError):
    """The requested order does not exist."""


class OrderPersistenceError(OrderError):
    """The storage boundary failed, or an update matched no rows."""
