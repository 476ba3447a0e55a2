"""Asynchronous tasks for the Orders module."""

from __future__ import annotations

from typing import Any, Dict

import structlog

from config.celery import app

logger = structlog.get_logger(__name__)


@app.task(name="orders.notify_order_event")
def notify_order_event(event_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Deliver an order event to downstream consumers.

    Today the only consumer is the log stream; the task boundary keeps the
    request path free of whatever notification channel gets plugged in.
    """
    logger.info(
        "order.notification_sent",
        event_type=event_type,
        order_id=payload.get("order_id"),
    )
    return {"event_type": event_type, "order_id": payload.get("order_id")}
