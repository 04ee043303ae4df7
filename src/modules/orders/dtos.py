"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line.
- ``CreateOrderDTO``: input for order placement (nested items).
- ``OrderOutputDTO``: full order with lines and product snapshots,
  camelCase on the wire.
- ``OrderPageQueryDTO``: paging and status filter for the paged listing.
- ``OrderSummaryDTO``: order history entry.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from modules.orders.constants import OrderStatus
from modules.products.dtos import DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderLine


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single line in a placement request.

    The client sends ``product_id`` and ``quantity`` only.  Prices are
    resolved by the Service Layer from the product catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int

    @field_validator("product_id")
    @classmethod
    def product_id_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product ID must not be empty.")
        try:
            # One canonical spelling per UUID, so duplicates are detectable.
            return str(UUID(v))
        except ValueError:
            return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order placement requests.

    Validates:
    - ``items`` must contain at least one line.
    - A product may appear only once per order.
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]
    description: Optional[str] = None

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must contain at least one product.")
        return v

    @model_validator(mode="after")
    def no_duplicate_products(self):
        product_ids = [item.product_id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product IDs are not allowed in the same order.")
        return self


class OrderPageQueryDTO(BaseModel):
    """Paged listing of the caller's orders, optionally by status."""

    model_config = ConfigDict(frozen=True)

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    status: Optional[str] = None

    @field_validator("page")
    @classmethod
    def page_in_range(cls, v: int) -> int:
        if not 1 <= v <= MAX_PAGE:
            raise ValueError(f"Page must be between 1 and {MAX_PAGE}.")
        return v

    @field_validator("page_size")
    @classmethod
    def page_size_in_range(cls, v: int) -> int:
        if not 1 <= v <= MAX_PAGE_SIZE:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}.")
        return v

    @field_validator("status")
    @classmethod
    def status_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in OrderStatus.values:
            raise ValueError("Invalid status value.")
        return v

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProductSnapshotDTO(_CamelModel):
    """Current catalog view of the product on an order line."""

    id: UUID
    name: str
    description: str
    price: Decimal
    category: str


class OrderLineOutputDTO(_CamelModel):
    product_id: UUID
    quantity: int
    price: Decimal
    product: ProductSnapshotDTO

    @classmethod
    def from_entity(cls, line: OrderLine) -> OrderLineOutputDTO:
        product = line.product
        return cls(
            product_id=line.product_id,
            quantity=line.quantity,
            price=line.price,
            product=ProductSnapshotDTO(
                id=product.id,
                name=product.name,
                description=product.description,
                price=product.price,
                category=product.category,
            ),
        )


class OrderOutputDTO(_CamelModel):
    """Immutable DTO for full order responses."""

    id: UUID
    user_id: int
    description: Optional[str] = None
    status: str
    total_price: Decimal
    created_at: datetime
    updated_at: datetime
    products: List[OrderLineOutputDTO]

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        """Build an output DTO from an Order model instance.

        Assumes ``lines__product`` is prefetched.
        """
        return cls(
            id=order.id,
            user_id=order.owner_id,
            description=order.description,
            status=order.status,
            total_price=order.total_price,
            created_at=order.created_at,
            updated_at=order.updated_at,
            products=[OrderLineOutputDTO.from_entity(line) for line in order.lines.all()],
        )


class OrderSummaryDTO(BaseModel):
    """Order history entry (snake_case on the wire)."""

    model_config = ConfigDict(frozen=True)

    order_id: UUID
    status: str
    total_price: Decimal
    created_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> OrderSummaryDTO:
        return cls(
            order_id=order.id,
            status=order.status,
            total_price=order.total_price,
            created_at=order.created_at,
        )
