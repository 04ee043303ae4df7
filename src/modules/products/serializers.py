"""Product DRF serializers for API input.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Output is rendered straight from the
output DTOs, so there are no read serializers here.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.products.dtos import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    CreateProductDTO,
    ProductQueryDTO,
    SortField,
    SortOrder,
    UpdateProductDTO,
)

# ---------------------------------------------------------------------------
# Catalog query parameters
# ---------------------------------------------------------------------------


class ProductQuerySerializer(serializers.Serializer):
    """Validates catalog query-string parameters.

    ``limit`` and ``pageSize`` are aliases; ``limit`` wins when both are sent.
    """

    page = serializers.IntegerField(
        min_value=1, max_value=MAX_PAGE, required=False, default=1
    )
    limit = serializers.IntegerField(min_value=1, max_value=MAX_PAGE_SIZE, required=False)
    pageSize = serializers.IntegerField(
        min_value=1, max_value=MAX_PAGE_SIZE, required=False
    )
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    minPrice = serializers.DecimalField(
        max_digits=None, decimal_places=None, min_value=Decimal("0"), required=False
    )
    maxPrice = serializers.DecimalField(
        max_digits=None, decimal_places=None, min_value=Decimal("0"), required=False
    )
    sortBy = serializers.ChoiceField(
        choices=[field.value for field in SortField],
        required=False,
        default=SortField.CREATED_AT.value,
    )
    sortOrder = serializers.ChoiceField(
        choices=[order.value for order in SortOrder],
        required=False,
        default=SortOrder.DESC.value,
    )

    def to_dto(self) -> ProductQueryDTO:
        data = self.validated_data
        page_size = data.get("limit") or data.get("pageSize") or DEFAULT_PAGE_SIZE
        return ProductQueryDTO(
            page=data["page"],
            page_size=page_size,
            category=data.get("category"),
            search=data.get("search"),
            min_price=data.get("minPrice"),
            max_price=data.get("maxPrice"),
            sort_by=SortField(data["sortBy"]),
            sort_order=SortOrder(data["sortOrder"]),
        )


# ---------------------------------------------------------------------------
# Mutation bodies
# ---------------------------------------------------------------------------


class ProductWriteSerializer(serializers.Serializer):
    """Validates product create/update bodies.

    Instantiate with ``partial=True`` for updates: every rule still applies
    to the fields that are present.
    """

    name = serializers.CharField(min_length=3, max_length=100)
    description = serializers.CharField(min_length=10)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.01")
    )
    stock = serializers.IntegerField(min_value=0)
    category = serializers.CharField(max_length=100)
    imageUrl = serializers.URLField(
        source="image_url", max_length=500, required=False, allow_null=True
    )

    def to_create_dto(self) -> CreateProductDTO:
        return CreateProductDTO(**self.validated_data)

    def to_update_dto(self) -> UpdateProductDTO:
        return UpdateProductDTO(**self.validated_data)
