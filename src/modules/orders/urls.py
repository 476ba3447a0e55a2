"""Order routes.

``orders/`` (create), ``orders/{id}/`` (retrieve),
``orders/{id}/status/`` and ``orders/{id}/cancel/``.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

router = SimpleRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
