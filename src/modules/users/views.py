"""User API views.

Registration, profile edits, retirement, look-up and the per-user
order history.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.container import build_order_service, build_user_service
from modules.orders.exceptions import OrderError
from modules.orders.serializers import OrderSerializer
from modules.orders.views import order_error_response
from modules.users.dtos import CreateUserDTO, UpdateUserDTO
from modules.users.exceptions import UserAlreadyExists, UserNotFound
from modules.users.serializers import UserSerializer


class UserViewSet(ViewSet):
    """ViewSet for User operations.

    Uses ``UserService`` built by the composition root (DIP).
    """

    pagination_class = LimitOffsetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_user_service()

    def create(self, request: Request) -> Response:
        """POST /api/v1/users/"""
        data = request.data

        try:
            dto = CreateUserDTO(
                name=data.get("name", ""),
                email=data.get("email", ""),
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            user = self._service.create_user(dto)
        except UserAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/users/{pk}/"""
        try:
            user = self._service.get_user(pk or "")
        except UserNotFound:
            return Response(
                {"detail": "User not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(UserSerializer(user).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/users/{pk}/"""
        data = request.data

        try:
            dto = UpdateUserDTO(name=data.get("name"), email=data.get("email"))
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            user = self._service.update_user(pk or "", dto)
        except UserNotFound:
            return Response(
                {"detail": "User not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except UserAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(UserSerializer(user).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/users/{pk}/"""
        try:
            self._service.delete_user(pk or "")
        except UserNotFound:
            return Response(
                {"detail": "User not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"])
    def orders(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/users/{pk}/orders/?limit=&offset=

        Newest orders first.
        """
        try:
            orders = build_order_service().list_user_orders(pk or "")
        except OrderError as exc:
            return order_error_response(exc)

        paginator = self.pagination_class()
        page = paginator.paginate_queryset(orders, request, view=self)
        serializer = OrderSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)
