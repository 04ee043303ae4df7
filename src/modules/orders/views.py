"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into envelope responses;
anything else reaches the project exception handler.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.cache import get_catalog_cache
from modules.core.responses import (
    error_detail,
    error_response,
    paginated_response,
    success_response,
)
from modules.orders.dtos import OrderOutputDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderError,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderPageQuerySerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.cache import CatalogCacheInvalidator
from modules.products.repositories.django_repository import ProductDjangoRepository

_ERROR_STATUS = {
    ProductNotFound: status.HTTP_404_NOT_FOUND,
    InsufficientStock: status.HTTP_400_BAD_REQUEST,
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    OrderAccessDenied: status.HTTP_403_FORBIDDEN,
    InvalidOrderStatus: status.HTTP_400_BAD_REQUEST,
}


def _error(exc: OrderError) -> Response:
    extra = {}
    if isinstance(exc, InsufficientStock):
        extra = {
            "product_id": exc.product_id,
            "available": exc.available,
            "requested": exc.requested,
        }
    elif isinstance(exc, ProductNotFound):
        extra = {"product_id": exc.product_id}
    return Response(
        error_response(str(exc), [error_detail(exc.code, str(exc), **extra)]),
        status=_ERROR_STATUS[type(exc)],
    )


def _render(order) -> dict:
    return OrderOutputDTO.from_entity(order).model_dump(mode="json", by_alias=True)


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Every action requires authentication (project default) and only ever
    exposes the requesting user's orders.  Does **not** extend
    ``ModelViewSet``: all ORM access goes through the service/repository
    layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            cache_invalidator=CatalogCacheInvalidator(cache=get_catalog_cache()),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "order_creation" if self.action == "create" else None
        return super().get_throttles()

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.place_order(request.user, serializer.to_dto())
        except (ProductNotFound, InsufficientStock) as exc:
            return _error(exc)
        return Response(_render(order), status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/"""
        history = self._service.list_order_history(request.user)
        return Response([entry.model_dump(mode="json") for entry in history])

    @action(detail=False, methods=["get"], url_path="paged")
    def paged(self, request: Request) -> Response:
        """GET /api/v1/orders/paged/

        Full orders with paging metadata; ``status`` narrows the listing.
        """
        query_serializer = OrderPageQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)
        query = query_serializer.to_dto()

        orders, total = self._service.list_orders(request.user, query)
        return Response(
            paginated_response(
                "Orders retrieved successfully",
                [_render(order) for order in orders],
                page_number=query.page,
                page_size=query.page_size,
                total_size=total,
            )
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk, request.user)
        except (OrderNotFound, OrderAccessDenied) as exc:
            return _error(exc)
        return Response(success_response("Order retrieved successfully", _render(order)))

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/status/"""
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                pk, request.user, serializer.validated_data["status"]
            )
        except (OrderNotFound, OrderAccessDenied, InvalidOrderStatus) as exc:
            return _error(exc)
        return Response(
            success_response("Order status updated successfully", _render(order))
        )
