from decimal import Decimal

import pytest

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from config.celery import app as celery_app


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _celery_eager():
    """Run tasks synchronously in the test process."""
    # The app reads Django settings with namespace="CELERY", so the
    # override must use the prefixed key to take precedence.
    previous = celery_app.conf.task_always_eager
    celery_app.conf["CELERY_TASK_ALWAYS_EAGER"] = True
    yield
    celery_app.conf["CELERY_TASK_ALWAYS_EAGER"] = previous


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django account."""
    client = APIClient()
    account = get_user_model().objects.create_user(
        username="api-tester", password="testpass123"
    )
    client.force_authenticate(user=account)
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def shopper():
    from modules.users.models import User

    return User.objects.create(name="Shopper One", email="shopper@example.com")


@pytest.fixture()
def make_product():
    """Factory creating catalogue products with a unique SKU."""
    from modules.products.models import Product

    counter = {"n": 0}

    def _make(price="10.00", stock=10, name=None):
        counter["n"] += 1
        n = counter["n"]
        return Product.objects.create(
            sku=f"TEST-{n:03d}",
            name=name or f"Test Product {n}",
            price=Decimal(price),
            stock_quantity=stock,
        )

    return _make
