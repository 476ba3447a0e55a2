import pytest
from django.core.management import call_command

from modules.orders.models import Order
from modules.products.models import Product
from modules.users.models import User

pytestmark = pytest.mark.integration


def test_seed_places_orders_through_workflow():
    call_command("seed_data", orders=5)

    assert User.objects.count() == 5
    assert Product.objects.count() == 8
    assert Order.objects.count() == 5
    for order in Order.objects.prefetch_related("items"):
        assert order.total_amount == sum(i.subtotal for i in order.items.all())


def test_seed_is_rerunnable():
    call_command("seed_data", orders=1)
    call_command("seed_data", orders=1)

    assert User.objects.count() == 5
    assert Product.objects.count() == 8


def test_seed_revives_retired_demo_records():
    call_command("seed_data", orders=0)
    Product.objects.get(sku="OFF-001").delete()
    User.objects.get(email="ana@example.com").delete()

    call_command("seed_data", orders=3)

    assert Product.objects.alive().count() == 8
    assert User.objects.alive().count() == 5
