"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Write operations are wrapped in ``transaction.atomic()`` so the order
header and its items are persisted together.  Database errors are
re-raised as ``OrderPersistenceError``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from modules.orders import domain
from modules.orders.exceptions import OrderPersistenceError
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_TWO_PLACES = Decimal("0.01")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, order: domain.Order) -> None:
        try:
            with transaction.atomic():
                row = Order(
                    id=order.id,
                    user_id=order.user_id,
                    status=order.status,
                    total_amount=order.total,
                )
                row.save(force_insert=True)
                # auto_now fields ignore assigned values; keep the aggregate's clock.
                Order.objects.filter(id=order.id).update(
                    created_at=order.created_at, updated_at=order.updated_at
                )
                self._write_items(order.id, order.items)
        except DatabaseError as exc:
            raise OrderPersistenceError(f"Failed to create order {order.id}.") from exc

        logger.info(
            "order.persisted", order_id=order.id, item_count=len(order.items)
        )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(self, order: domain.Order) -> int:
        try:
            with transaction.atomic():
                rows = Order.objects.filter(id=order.id).update(
                    status=order.status,
                    total_amount=order.total,
                    updated_at=order.updated_at,
                )
                if rows:
                    OrderItem.objects.filter(order_id=order.id).delete()
                    self._write_items(order.id, order.items)
        except DatabaseError as exc:
            raise OrderPersistenceError(f"Failed to update order {order.id}.") from exc

        logger.info("order.updated", order_id=order.id, rows=rows)
        return rows

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[domain.Order]:
        """Retrieve an order with prefetched items.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            row = Order.objects.prefetch_related("items").filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        return _to_domain(row) if row else None

    def get_by_user_id(self, user_id: str) -> List[domain.Order]:
        try:
            rows = list(
                Order.objects.prefetch_related("items")
                .filter(user_id=user_id)
                .order_by("-created_at", "-id")
            )
        except (ValueError, ValidationError):
            return []
        return [_to_domain(row) for row in rows]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _write_items(order_id: str, items: tuple[domain.OrderItem, ...]) -> None:
        for position, item in enumerate(items):
            OrderItem(
                order_id=order_id,
                product_id=item.product_id,
                position=position,
                quantity=item.quantity,
                unit_price=item.price,
            ).save()


def _to_domain(row: Order) -> domain.Order:
    items = tuple(
        domain.OrderItem(
            product_id=str(item.product_id),
            quantity=item.quantity,
            price=item.unit_price,
        )
        for item in sorted(row.items.all(), key=lambda i: i.position)
    )
    return domain.Order(
        id=str(row.id),
        user_id=str(row.user_id),
        items=items,
        status=row.status,
        total=row.total_amount.quantize(_TWO_PLACES),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
