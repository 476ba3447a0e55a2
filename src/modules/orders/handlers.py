"""Event handlers for Orders domain events.

Handlers run synchronously inside ``InMemoryEventBus.publish``; anything
slow is handed to Celery so the request never waits on it.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import structlog
from django.core.serializers.json import DjangoJSONEncoder

from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusUpdated
from modules.orders.tasks import notify_order_event
from shared.domain.bus import IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


def _json_payload(event: DomainEvent) -> Dict[str, Any]:
    # Decimal totals and datetimes must survive the JSON task serializer.
    return json.loads(json.dumps(event.payload, cls=DjangoJSONEncoder))


def _dispatch(event: DomainEvent) -> None:
    notify_order_event.delay(event.event_type, _json_payload(event))


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created_received",
            order_id=event.aggregate_id,
            user_id=event.user_id,
            total=str(event.total),
        )
        _dispatch(event)


class OrderStatusUpdatedHandler(IEventHandler[OrderStatusUpdated]):
    def handle(self, event: OrderStatusUpdated) -> None:
        logger.info(
            "order.event.status_updated_received",
            order_id=event.aggregate_id,
            old_status=event.old_status,
            new_status=event.new_status,
        )
        _dispatch(event)


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled_received",
            order_id=event.aggregate_id,
            user_id=event.user_id,
        )
        _dispatch(event)


order_created_handler = OrderCreatedHandler()
order_status_updated_handler = OrderStatusUpdatedHandler()
order_cancelled_handler = OrderCancelledHandler()
