"""Domain bus interfaces for in-process event handling."""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Handler interface for domain events."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Event bus interface.

    Handlers are registered per ``event_type`` string (e.g. ``order.created``).
    """

    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(self, event_type: str, handler: IEventHandler) -> None: ...
