"""In-memory collaborators for OrderService unit tests."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

import pytest
from django.db import DatabaseError

from modules.orders.domain import Order
from modules.orders.repositories.interfaces import IOrderRepository
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository
from modules.products.services import ProductService
from modules.users.models import User
from modules.users.repositories.interfaces import IUserRepository
from modules.users.services import UserService
from modules.orders.services import OrderService


class FakeUserRepository(IUserRepository):
    def __init__(self) -> None:
        self.users: Dict[str, User] = {}

    def get_by_id(self, id: str) -> Optional[User]:
        return self.users.get(str(id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def save(self, entity: User) -> User:
        self.users[str(entity.id)] = entity
        return entity

    def delete(self, id: str) -> bool:
        return self.users.pop(str(id), None) is not None


class FakeProductRepository(IProductRepository):
    """Stores products in a dict; ``fail_writes_for`` simulates a broken store."""

    def __init__(self) -> None:
        self.products: Dict[str, Product] = {}
        self.fail_writes_for: set = set()
        self.stock_writes: List[tuple] = []

    def get_by_id(self, id: str) -> Optional[Product]:
        return self.products.get(str(id))

    def list(self, filters=None):
        return list(self.products.values())

    def save(self, entity: Product) -> Product:
        self.products[str(entity.id)] = entity
        return entity

    def delete(self, id: str) -> bool:
        return self.products.pop(str(id), None) is not None

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return next((p for p in self.products.values() if p.sku == sku), None)

    def update_stock(self, id: str, quantity: int) -> int:
        if str(id) in self.fail_writes_for:
            raise DatabaseError("stock store unavailable")
        product = self.products.get(str(id))
        if product is None:
            return 0
        self.stock_writes.append((str(id), quantity))
        product.stock_quantity = quantity
        return 1

    def stock(self, product: Product) -> int:
        return self.products[str(product.id)].stock_quantity


class FakeOrderRepository(IOrderRepository):
    def __init__(self) -> None:
        self.orders: Dict[str, Order] = {}
        self.create_error: Optional[Exception] = None
        self.lookups: List[str] = []

    def create(self, order: Order) -> None:
        if self.create_error is not None:
            raise self.create_error
        self.orders[order.id] = order

    def get_by_id(self, id: str) -> Optional[Order]:
        self.lookups.append(id)
        return self.orders.get(id)

    def get_by_user_id(self, user_id: str) -> List[Order]:
        self.lookups.append(user_id)
        return sorted(
            (o for o in self.orders.values() if o.user_id == user_id),
            key=lambda o: (o.created_at, o.id),
            reverse=True,
        )

    def update(self, order: Order) -> int:
        if order.id not in self.orders:
            return 0
        self.orders[order.id] = order
        return 1


class RecordingEventBus:
    def __init__(self) -> None:
        self.published: list = []
        self.fail = False

    def publish(self, event) -> None:
        if self.fail:
            raise RuntimeError("bus down")
        self.published.append(event)

    def subscribe(self, event_type, handler) -> None:
        raise NotImplementedError

    def types(self) -> List[str]:
        return [e.event_type for e in self.published]


@pytest.fixture()
def user_repo():
    return FakeUserRepository()


@pytest.fixture()
def product_repo():
    return FakeProductRepository()


@pytest.fixture()
def order_repo():
    return FakeOrderRepository()


@pytest.fixture()
def bus():
    return RecordingEventBus()


@pytest.fixture()
def service(user_repo, product_repo, order_repo, bus):
    return OrderService(
        order_repository=order_repo,
        product_service=ProductService(repository=product_repo, event_bus=bus),
        user_service=UserService(repository=user_repo),
        event_bus=bus,
    )


@pytest.fixture()
def user(user_repo):
    return user_repo.save(User(name="Unit Shopper", email="unit@example.com"))


@pytest.fixture()
def add_product(product_repo):
    def _add(sku, price="10.00", stock=10):
        return product_repo.save(
            Product(sku=sku, name=sku, price=Decimal(price), stock_quantity=stock)
        )

    return _add
