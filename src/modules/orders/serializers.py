"""Order DRF serializers for API input.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, OrderPageQueryDTO
from modules.products.dtos import DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single line of a placement request.

    Unknown keys, including a client-supplied ``price``, are ignored.
    """

    productId = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(min_value=1)

    def validate_productId(self, value: str) -> str:
        # Same canonical form the DTO uses, so duplicates are caught here.
        return CreateOrderItemDTO(product_id=value, quantity=1).product_id


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order placement payload."""

    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=500
    )
    products = CreateOrderItemSerializer(many=True, allow_empty=False)

    def validate_products(self, value):
        ids = [item["productId"] for item in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError(
                "Duplicate product IDs are not allowed in the same order.",
                code="duplicate_product",
            )
        return value

    def to_dto(self) -> CreateOrderDTO:
        data = self.validated_data
        return CreateOrderDTO(
            description=data.get("description"),
            items=[
                CreateOrderItemDTO(product_id=item["productId"], quantity=item["quantity"])
                for item in data["products"]
            ],
        )


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value: str) -> str:
        if value not in OrderStatus.values:
            raise serializers.ValidationError(
                f"Invalid status. Must be one of: {', '.join(OrderStatus.values)}",
                code="invalid_status",
            )
        return value


class OrderPageQuerySerializer(serializers.Serializer):
    """Validates the paged order listing query string."""

    page = serializers.IntegerField(
        min_value=1, max_value=MAX_PAGE, required=False, default=1
    )
    pageSize = serializers.IntegerField(
        min_value=1, max_value=MAX_PAGE_SIZE, required=False, default=DEFAULT_PAGE_SIZE
    )
    status = serializers.ChoiceField(choices=OrderStatus.values, required=False)

    def to_dto(self) -> OrderPageQueryDTO:
        data = self.validated_data
        return OrderPageQueryDTO(
            page=data["page"], page_size=data["pageSize"], status=data.get("status")
        )
