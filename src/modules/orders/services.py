"""Order service layer (Use Cases).

Orchestrates order creation, status management and cancellation across
the product stock boundary and order persistence.

Stock and orders live behind separate boundaries with no shared
transaction, so the workflow keeps them consistent by compensation:

- Creation decrements stock *before* persisting the order.  If the
  order cannot be stored, every decremented product gets its quantity
  back (best effort; a failed restore is logged, never raised, and never
  hides the original failure).  A crash between the two steps leaves
  stock decremented with no order.
- Cancelling a ``pending`` or ``confirmed`` order adds each item's
  quantity back to its product, item by item, before the cancellation
  is stored.

Stock writes are read-then-write with absolute quantities and no lock:
two concurrent orders for the same product can both pass the stock
check and oversell.  Ordering between such requests has to come from
the storage layer.

Events are published after the state change is stored; publishing is
best effort and never undoes or fails the operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

import structlog
import uuid6

from modules.orders.constants import STOCK_RESTORING_STATES
from modules.orders.domain import Order, OrderAggregate, OrderItem
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusUpdated
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    InvalidProduct,
    InvalidUser,
    OrderNotFound,
    OrderPersistenceError,
)
from modules.products.exceptions import ProductNotFound
from modules.users.exceptions import UserNotFound

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.services import ProductService
    from modules.users.services import UserService
    from shared.domain.bus import IEventBus
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_service: ProductService,
        user_service: UserService,
        event_bus: IEventBus,
    ) -> None:
        self._order_repo = order_repository
        self._product_service = product_service
        self._user_service = user_service
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Place a new order and reserve its stock.

        Steps:
        1. Validate the user exists.
        2. Resolve each distinct product once.
        3. Check stock per product against the summed quantity of all
           lines that reference it.
        4. Snapshot current prices into the items and build the aggregate.
        5. Decrement stock, then persist the order (compensating on failure).
        6. Publish ``order.created``.

        Raises:
            InvalidUser: the user does not exist.
            InvalidProduct: a product does not exist.
            InsufficientStock: not enough stock for a product.
            InvalidOrderData: the aggregate rejected the order.
            OrderPersistenceError: stock or order storage failed.
        """
        log = logger.bind(user_id=dto.user_id)
        log.info("order.creation_started", item_count=len(dto.items))

        self._require_user(dto.user_id)

        products: Dict[str, Product] = {}
        consumed: Dict[str, int] = {}
        for line in dto.items:
            if line.product_id not in products:
                products[line.product_id] = self._resolve_product(line.product_id)
            consumed[line.product_id] = consumed.get(line.product_id, 0) + line.quantity

        for product_id, quantity in consumed.items():
            available = products[product_id].stock_quantity
            if available < quantity:
                log.warning(
                    "order.insufficient_stock",
                    product_id=product_id,
                    requested=quantity,
                    available=available,
                )
                raise InsufficientStock(product_id, quantity, available)

        items = [
            OrderItem(
                product_id=line.product_id,
                quantity=line.quantity,
                price=products[line.product_id].price,
            )
            for line in dto.items
        ]
        aggregate = OrderAggregate.create(str(uuid6.uuid7()), dto.user_id, items)
        aggregate.validate()
        order = aggregate.order
        log = log.bind(order_id=order.id)

        self._reserve_stock(products, consumed, log)

        try:
            self._order_repo.create(order)
        except Exception as exc:
            log.error("order.persist_failed", error=str(exc))
            self._restore_stock(consumed.items(), log)
            if isinstance(exc, OrderPersistenceError):
                raise
            raise OrderPersistenceError(f"Failed to create order {order.id}.") from exc

        log.info("order.created", total=str(order.total))
        self._publish(
            OrderCreated(aggregate_id=order.id, user_id=order.user_id, total=order.total)
        )
        return order

    def update_status(self, order_id: str, new_status: str) -> Order:
        """Transition an order to a new status.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: transition is not allowed.
            OrderPersistenceError: the order vanished before the write.
        """
        order = self.get_order(order_id)
        log = logger.bind(
            order_id=order.id,
            current_status=order.status,
            new_status=str(new_status),
        )

        aggregate = OrderAggregate(order)
        try:
            aggregate.update_status(new_status)
        except InvalidOrderStatus:
            log.warning("order.invalid_transition")
            raise

        updated = aggregate.order
        self._store_update(updated)
        log.info("order.status_updated")

        self._publish(
            OrderStatusUpdated(
                aggregate_id=updated.id,
                old_status=order.status,
                new_status=updated.status,
            )
        )
        return updated

    def cancel_order(self, order_id: str) -> Order:
        """Cancel an order and give back its stock when it was still reserved.

        Stock is only restored for orders cancelled from ``pending`` or
        ``confirmed``; a failed restore for one item is logged and the
        remaining items and the cancellation itself still go through.

        Raises:
            OrderNotFound: order does not exist.
            OrderAlreadyCancelled: the order is already cancelled.
            OrderInTerminalState: the order was delivered.
            InvalidOrderStatus: cancellation not allowed from current status.
            OrderPersistenceError: the order vanished before the write.
        """
        order = self.get_order(order_id)
        log = logger.bind(order_id=order.id, current_status=order.status)

        aggregate = OrderAggregate(order)
        try:
            aggregate.cancel()
        except InvalidOrderStatus:
            log.warning("order.cancel_not_allowed")
            raise

        if order.status in STOCK_RESTORING_STATES:
            self._restore_stock(
                ((item.product_id, item.quantity) for item in order.items), log
            )

        cancelled = aggregate.order
        self._store_update(cancelled)
        log.info("order.cancelled")

        self._publish(
            OrderCancelled(
                aggregate_id=cancelled.id,
                user_id=cancelled.user_id,
                total=cancelled.total,
            )
        )
        return cancelled

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id) if order_id else None
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_user_orders(self, user_id: str) -> List[Order]:
        """Return every order of a user, newest first.

        Raises:
            InvalidUser: the user does not exist (the order store is not queried).
        """
        self._require_user(user_id)
        return self._order_repo.get_by_user_id(user_id)

    # ------------------------------------------------------------------
    # Collaborator helpers
    # ------------------------------------------------------------------

    def _require_user(self, user_id: str) -> None:
        try:
            self._user_service.get_user(user_id)
        except UserNotFound as exc:
            logger.warning("order.invalid_user", user_id=user_id)
            raise InvalidUser(f"Invalid user ID: {user_id}.") from exc

    def _resolve_product(self, product_id: str) -> Product:
        try:
            return self._product_service.get_product(product_id)
        except ProductNotFound as exc:
            logger.warning("order.invalid_product", product_id=product_id)
            raise InvalidProduct(f"Invalid product ID: {product_id}.") from exc

    def _reserve_stock(
        self,
        products: Dict[str, Product],
        consumed: Dict[str, int],
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        """Write ``stock - consumed`` for every product, undoing on failure."""
        reserved: Dict[str, int] = {}
        for product_id, quantity in consumed.items():
            remaining = products[product_id].stock_quantity - quantity
            try:
                self._product_service.update_stock(product_id, remaining)
            except Exception as exc:
                log.error(
                    "order.stock_reservation_failed",
                    product_id=product_id,
                    error=str(exc),
                )
                self._restore_stock(reserved.items(), log)
                raise OrderPersistenceError(
                    f"Failed to update stock for product {product_id}."
                ) from exc
            reserved[product_id] = quantity
            log.info(
                "order.stock_reserved",
                product_id=product_id,
                quantity=quantity,
                remaining=remaining,
            )

    def _restore_stock(
        self,
        quantities: Iterable[Tuple[str, int]],
        log: structlog.stdlib.BoundLogger,
    ) -> List[str]:
        """Add quantities back to products; return the ids that failed."""
        failed: List[str] = []
        for product_id, quantity in quantities:
            try:
                product = self._product_service.get_product(product_id)
                restored = product.stock_quantity + quantity
                self._product_service.update_stock(product_id, restored)
            except Exception as exc:
                failed.append(product_id)
                log.error(
                    "order.stock_restore_failed",
                    product_id=product_id,
                    quantity=quantity,
                    error=str(exc),
                )
                continue
            log.info(
                "order.stock_restored",
                product_id=product_id,
                quantity=quantity,
                restored_stock=restored,
            )
        return failed

    def _store_update(self, order: Order) -> None:
        if not self._order_repo.update(order):
            logger.error("order.update_missed", order_id=order.id)
            raise OrderPersistenceError(
                f"Order {order.id} was not updated: no matching row."
            )

    def _publish(self, event: DomainEvent) -> None:
        try:
            self._event_bus.publish(event)
        except Exception:
            logger.exception(
                "order.event_publish_failed",
                event_type=event.event_type,
                order_id=event.aggregate_id,
            )
            return
        logger.info(
            "order.event_published",
            event_type=event.event_type,
            order_id=event.aggregate_id,
        )
