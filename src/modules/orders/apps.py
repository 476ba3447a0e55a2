from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            OrderCancelled,
            OrderCreated,
            OrderStatusUpdated,
        )
        from modules.orders.handlers import (
            order_cancelled_handler,
            order_created_handler,
            order_status_updated_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated.event_type, order_created_handler)
        event_bus.subscribe(OrderStatusUpdated.event_type, order_status_updated_handler)
        event_bus.subscribe(OrderCancelled.event_type, order_cancelled_handler)
