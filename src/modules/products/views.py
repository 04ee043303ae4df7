"""Product API views.

Exposes ``CatalogQueryService`` (listing) and ``ProductService`` (detail and
mutations) via HTTP using a DRF ViewSet.  Domain exceptions are caught and
translated into envelope responses; anything else reaches the project
exception handler.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny, BasePermission, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.cache import get_catalog_cache
from modules.core.responses import error_detail, error_response, success_response
from modules.products.cache import CatalogCacheInvalidator
from modules.products.catalog import CatalogQueryService
from modules.products.dtos import ProductOutputDTO
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductQuerySerializer, ProductWriteSerializer
from modules.products.services import ProductService

_PUBLIC_ACTIONS = {"list", "retrieve"}


def _not_found(exc: ProductNotFound) -> Response:
    return Response(
        error_response(
            str(exc),
            [error_detail(exc.code, str(exc), product_id=exc.product_id)],
        ),
        status=status.HTTP_404_NOT_FOUND,
    )


def _render(product) -> dict:
    return ProductOutputDTO.from_entity(product).model_dump(mode="json", by_alias=True)


class ProductViewSet(GenericViewSet):
    """ViewSet for the product catalog.

    Reads are public; mutations require a staff user.  Does **not** extend
    ``ModelViewSet``: all ORM access goes through the service/repository
    layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = ProductDjangoRepository()
        cache = get_catalog_cache()
        self._catalog = CatalogQueryService(repository=repository, cache=cache)
        self._service = ProductService(
            repository=repository,
            cache_invalidator=CatalogCacheInvalidator(cache=cache),
        )

    def get_permissions(self) -> list[BasePermission]:
        if self.action in _PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAdminUser()]

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = (
            None if self.action in _PUBLIC_ACTIONS else "product_mutation"
        )
        return super().get_throttles()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        query_serializer = ProductQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        result = self._catalog.list_products(query_serializer.to_dto())
        return Response(result.model_dump(mode="json", by_alias=True))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(_render(product))

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = self._service.create_product(
            serializer.to_create_dto(), owner=request.user
        )
        return Response(
            success_response("Product created successfully.", _render(product)),
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/ (partial in both cases)"""
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            product = self._service.update_product(pk, serializer.to_update_dto())
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(success_response("Product updated successfully.", _render(product)))

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(success_response("Product deleted successfully."))
