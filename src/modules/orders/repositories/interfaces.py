"""Order repository interface.

The persistence boundary of the Order aggregate.  It stores and loads
the plain ``Order`` record from ``modules.orders.domain``; the ORM never
leaks into the Service Layer.

``update`` reports how many rows it touched so the caller can tell a
vanished order (``0``) from a successful write.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.domain import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, order: Order) -> None:
        """Insert the order and its items atomically."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its items, or ``None``."""

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> List[Order]:
        """All orders of a user, newest first."""

    @abstractmethod
    def update(self, order: Order) -> int:
        """Write status, total and items; return the number of orders updated."""
