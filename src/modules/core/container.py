"""Composition root.

Wires services to their Django repositories and the process-wide event
bus.  Views and tasks build services through these factories instead of
instantiating repositories themselves; tests construct the services
directly with fakes.
"""

from __future__ import annotations

from typing import Optional

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService
from modules.users.repositories.django_repository import UserDjangoRepository
from modules.users.services import UserService
from shared.domain.bus import IEventBus
from shared.infrastructure.bus import event_bus as default_event_bus


def build_user_service() -> UserService:
    return UserService(repository=UserDjangoRepository())


def build_product_service(event_bus: Optional[IEventBus] = None) -> ProductService:
    return ProductService(
        repository=ProductDjangoRepository(),
        event_bus=event_bus or default_event_bus,
    )


def build_order_service(event_bus: Optional[IEventBus] = None) -> OrderService:
    bus = event_bus or default_event_bus
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_service=build_product_service(bus),
        user_service=build_user_service(),
        event_bus=bus,
    )
