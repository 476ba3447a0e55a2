"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

import structlog
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.container import build_order_service
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderData,
    InvalidOrderStatus,
    InvalidProduct,
    InvalidUser,
    OrderError,
    OrderNotFound,
    OrderNotMutable,
    OrderPersistenceError,
)
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)

logger = structlog.get_logger(__name__)

# Most specific first: subclasses share their parent's status otherwise.
_ERROR_STATUS = (
    (InvalidOrderData, status.HTTP_400_BAD_REQUEST),
    (InvalidUser, status.HTTP_404_NOT_FOUND),
    (InvalidProduct, status.HTTP_404_NOT_FOUND),
    (OrderNotFound, status.HTTP_404_NOT_FOUND),
    (InsufficientStock, status.HTTP_409_CONFLICT),
    (InvalidOrderStatus, status.HTTP_409_CONFLICT),
    (OrderNotMutable, status.HTTP_409_CONFLICT),
    (OrderPersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def order_error_response(exc: OrderError) -> Response:
    """Translate an order-domain exception into an HTTP response."""
    for exc_type, http_status in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            break
    else:
        http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    if http_status >= 500:
        logger.error("order.request_failed", error=str(exc))
        return Response(
            {"detail": "Order could not be stored. Please retry."},
            status=http_status,
        )
    return Response({"detail": str(exc)}, status=http_status)


class OrderViewSet(ViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` built by the composition root (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            user_id=data["user_id"],
            items=[
                CreateOrderItemDTO(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in data["items"]
            ],
        )

        try:
            order = self._service.create_order(dto)
        except OrderError as exc:
            return order_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk or "")
        except OrderError as exc:
            return order_error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/status/

        Cancellations are **not** accepted here because they must give
        stock back; use ``POST /orders/{id}/cancel/`` instead.
        """
        status_serializer = UpdateOrderStatusSerializer(data=request.data)
        status_serializer.is_valid(raise_exception=True)
        new_status = status_serializer.validated_data["status"]

        if new_status == OrderStatus.CANCELLED:
            return Response(
                {"detail": "Use the /cancel/ endpoint for cancellations."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            order = self._service.update_status(pk or "", new_status)
        except OrderError as exc:
            return order_error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Cancel (dedicated action)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Cancels an order and gives reserved stock back.
        """
        try:
            order = self._service.cancel_order(pk or "")
        except OrderError as exc:
            return order_error_response(exc)
        return Response(OrderSerializer(order).data)
