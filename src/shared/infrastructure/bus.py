"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Handlers run synchronously, in subscription order.  A failing handler
    is logged and skipped so the remaining subscribers still receive
    the event.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[IEventHandler]] = {}

    def subscribe(self, event_type: str, handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler.handle(event)
            except Exception:
                logger.exception(
                    "event_bus.handler_failed",
                    event_type=event.event_type,
                    event_id=str(event.event_id),
                    handler=type(handler).__name__,
                )


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
