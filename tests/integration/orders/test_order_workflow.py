"""Integration tests for the order workflow wired through the container.

Runs ``OrderService`` against the Django repositories, the real
``ProductService`` stock boundary and the process-wide event bus.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.core.container import build_order_service, build_product_service
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    OrderPersistenceError,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.models import Product

pytestmark = pytest.mark.integration


@pytest.fixture()
def service():
    return build_order_service()


def _dto(user, *lines):
    return CreateOrderDTO(
        user_id=str(user.id),
        items=[
            CreateOrderItemDTO(product_id=str(p.id), quantity=q) for p, q in lines
        ],
    )


def _stock(product) -> int:
    return Product.objects.get(id=product.id).stock_quantity


def test_lifecycle_against_database(service, shopper, make_product):
    p1 = make_product(price="10.00", stock=5)

    order = service.create_order(_dto(shopper, (p1, 3)))
    assert order.total == Decimal("30.00")
    assert order.status == OrderStatus.PENDING
    assert _stock(p1) == 2

    service.update_status(order.id, OrderStatus.CONFIRMED)
    with pytest.raises(InvalidOrderStatus):
        service.update_status(order.id, OrderStatus.DELIVERED)

    service.cancel_order(order.id)
    assert _stock(p1) == 5
    assert Order.objects.get(id=order.id).status == OrderStatus.CANCELLED


def test_combined_lines_exceed_stock(service, shopper, make_product):
    p1 = make_product(stock=4)

    with pytest.raises(InsufficientStock):
        service.create_order(_dto(shopper, (p1, 2), (p1, 3)))

    assert _stock(p1) == 4
    assert not Order.objects.exists()


def test_persist_failure_restores_stock(service, shopper, make_product):
    p1 = make_product(stock=5)
    p2 = make_product(stock=6)

    with patch.object(
        OrderDjangoRepository, "create", side_effect=DatabaseError("db down")
    ):
        with pytest.raises(OrderPersistenceError):
            service.create_order(_dto(shopper, (p1, 5), (p2, 1)))

    assert _stock(p1) == 5
    assert _stock(p2) == 6
    assert not Order.objects.exists()


def test_cancel_shipped_keeps_stock(service, shopper, make_product):
    p1 = make_product(stock=5)
    order = service.create_order(_dto(shopper, (p1, 2)))
    service.update_status(order.id, OrderStatus.CONFIRMED)
    service.update_status(order.id, OrderStatus.SHIPPED)

    with pytest.raises(InvalidOrderStatus):
        service.cancel_order(order.id)

    assert _stock(p1) == 3


def test_events_reach_celery_task(service, shopper, make_product):
    p1 = make_product(stock=5)

    with patch("modules.orders.handlers.notify_order_event") as task:
        order = service.create_order(_dto(shopper, (p1, 1)))

    event_type, payload = task.delay.call_args.args
    assert event_type == "order.created"
    assert payload["order_id"] == order.id


def test_created_order_matches_stored_order(service, shopper, make_product):
    p1 = make_product(stock=5)

    created = service.create_order(_dto(shopper, (p1, 1)))
    stored = service.get_order(created.id)

    assert stored.created_at == created.created_at
    assert stored.updated_at == created.updated_at
    assert stored == created


def test_cancel_with_retired_product_still_cancels(service, shopper, make_product):
    kept = make_product(stock=5)
    retired = make_product(stock=5)
    order = service.create_order(_dto(shopper, (kept, 2), (retired, 1)))
    build_product_service().delete_product(str(retired.id))

    cancelled = service.cancel_order(order.id)

    assert cancelled.status == OrderStatus.CANCELLED
    assert _stock(kept) == 5
    assert _stock(retired) == 4
