"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  DTOs are
immutable (``frozen=True``).

- ``CreateProductDTO`` / ``UpdateProductDTO``: mutation inputs.
- ``ProductOutputDTO``: full product detail.
- ``ProductQueryDTO``: the normalised catalog query shape.  Defaults are
  applied here, once, before cache-key generation or store translation.
- ``ProductSummaryDTO`` / ``ProductListResultDTO``: catalog listing output,
  also the JSON document stored in the cache.

Output DTOs serialise with camelCase aliases (``by_alias=True``).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from modules.products.models import Product

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps the offset inside a 64-bit SQL integer.
MAX_PAGE = 1_000_000


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    price: Decimal
    stock: int = 0
    category: str
    image_url: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative.")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields are written.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Field must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Stock cannot be negative.")
        return v

    def changes(self) -> dict:
        """Fields the caller actually supplied."""
        return self.model_dump(exclude_none=True)


class SortField(str, Enum):
    PRICE = "price"
    NAME = "name"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ProductQueryDTO(BaseModel):
    """Normalised catalog query.

    ``search`` is trimmed but keeps its case, the store matches it
    case-insensitively and the cache key folds case on its own;
    blank ``search`` / ``category`` collapse to ``None`` so that "no filter"
    has exactly one representation.
    """

    model_config = ConfigDict(frozen=True)

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    category: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @field_validator("page")
    @classmethod
    def page_must_be_positive(cls, v: int) -> int:
        if not 1 <= v <= MAX_PAGE:
            raise ValueError(f"Page must be between 1 and {MAX_PAGE}.")
        return v

    @field_validator("page_size")
    @classmethod
    def page_size_in_range(cls, v: int) -> int:
        if not 1 <= v <= MAX_PAGE_SIZE:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}.")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("search", mode="before")
    @classmethod
    def normalise_search(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("min_price", "max_price")
    @classmethod
    def price_bound_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Price bounds must be non-negative.")
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


class ProductOutputDTO(_CamelModel):
    """Complete product detail."""

    id: UUID
    name: str
    description: str
    price: Decimal
    stock: int
    category: str
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            stock=product.stock,
            category=product.category,
            image_url=product.image_url,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductSummaryDTO(_CamelModel):
    """Catalog listing entry."""

    id: UUID
    name: str
    price: Decimal
    stock: int
    category: str
    description: str
    image_url: Optional[str] = None

    @classmethod
    def from_entity(cls, product: Product) -> ProductSummaryDTO:
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            stock=product.stock,
            category=product.category,
            description=product.description,
            image_url=product.image_url,
        )


class ProductListResultDTO(_CamelModel):
    """One page of catalog results plus pagination metadata."""

    current_page: int
    page_size: int
    total_pages: int
    total_products: int
    products: List[ProductSummaryDTO] = Field(default_factory=list)
