from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.core.container import build_order_service
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock
from modules.products.models import Product
from modules.users.models import User


class Command(BaseCommand):
    help = "Seed database with development data (placing orders through the workflow)."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=20)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        api_accounts = self._seed_api_accounts()
        users = self._seed_users()
        products = self._seed_products()
        orders_created = self._seed_orders(users, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"api_accounts={api_accounts}, "
                f"users={len(users)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_api_accounts(self) -> int:
        Account = get_user_model()
        if Account.objects.filter(username="admin").exists():
            return 0
        Account.objects.create_superuser("admin", password="admin123")
        return 1

    def _seed_users(self) -> list[User]:
        self.stdout.write("Creating users...")
        seed_users = [
            ("Ana Souza", "ana@example.com"),
            ("Bruno Lima", "bruno@example.com"),
            ("Carla Mendes", "carla@example.com"),
            ("Daniel Costa", "daniel@example.com"),
            ("Helena Ferreira", "helena@example.com"),
        ]
        users = [
            _revive(User.objects.get_or_create(email=email, defaults={"name": name})[0])
            for name, email in seed_users
        ]
        self.stdout.write(self.style.SUCCESS("Creating users... Done!"))
        return users

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        catalog = [
            ("ELEC-001", 'Monitor 27"', "Electronics", Decimal("299.90")),
            ("ELEC-002", "Mechanical Keyboard", "Electronics", Decimal("89.90")),
            ("ELEC-003", "Gaming Mouse", "Electronics", Decimal("49.90")),
            ("FURN-001", "Office Desk", "Furniture", Decimal("199.00")),
            ("FURN-002", "Ergonomic Chair", "Furniture", Decimal("349.00")),
            ("OFF-001", "A4 Paper", "Office", Decimal("5.90")),
            ("OFF-002", "Blue Pen", "Office", Decimal("0.99")),
            ("OFF-003", "Notebook", "Office", Decimal("3.90")),
        ]
        products = [
            _revive(
                Product.objects.get_or_create(
                    sku=sku,
                    defaults={
                        "name": name,
                        "description": category,
                        "price": price,
                        "stock_quantity": random.randint(10, 200),
                    },
                )[0]
            )
            for sku, name, category, price in catalog
        ]
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, users: list[User], products: list[Product], count: int) -> int:
        self.stdout.write("Creating orders...")
        if not users or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no users/products)."))
            return 0

        service = build_order_service()
        follow_ups = [
            [],
            [OrderStatus.CONFIRMED],
            [OrderStatus.CONFIRMED, OrderStatus.SHIPPED],
            [OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED],
            [OrderStatus.CANCELLED],
        ]

        orders_created = 0
        for _ in range(count):
            picked = random.sample(products, k=random.randint(1, min(3, len(products))))
            dto = CreateOrderDTO(
                user_id=str(random.choice(users).id),
                items=[
                    CreateOrderItemDTO(product_id=str(p.id), quantity=random.randint(1, 3))
                    for p in picked
                ],
            )
            try:
                order = service.create_order(dto)
            except InsufficientStock as exc:
                self.stdout.write(self.style.WARNING(f"Skipped order: {exc}"))
                continue

            for status in random.choice(follow_ups):
                if status == OrderStatus.CANCELLED:
                    service.cancel_order(order.id)
                else:
                    service.update_status(order.id, status)
            orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created


def _revive(record):
    """Bring a retired demo record back so it can take part in orders."""
    if record.is_deleted:
        record.deleted_at = None
        record.save(update_fields=["deleted_at"])
    return record
