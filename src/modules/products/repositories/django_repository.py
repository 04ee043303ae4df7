"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising, and the Service Layer decides how to report a missing
entity.  Soft-deleted rows are invisible to every method.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.products.dtos import ProductQueryDTO, SortField, SortOrder
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

_SORT_COLUMNS = {
    SortField.PRICE: "price",
    SortField.NAME: "name",
    SortField.CREATED_AT: "created_at",
}


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a live product; ``None`` for missing or malformed IDs."""
        try:
            return Product.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def search(self, query: ProductQueryDTO) -> Tuple[List[Product], int]:
        """Filter, order and slice the live catalog.

        Ties on the sort column are broken by ``id`` in the same direction,
        so consecutive pages never overlap.
        """
        filterset = ProductFilter(
            data=_filter_data(query),
            queryset=Product.objects.alive(),
        )
        direction = "-" if query.sort_order is SortOrder.DESC else ""
        queryset = filterset.qs.order_by(
            f"{direction}{_SORT_COLUMNS[query.sort_by]}",
            f"{direction}id",
        )
        total = queryset.count()
        page = list(queryset[query.offset : query.offset + query.page_size])
        return page, total

    @transaction.atomic
    def save(
        self, entity: Product, update_fields: Optional[Iterable[str]] = None
    ) -> Product:
        """Persist (create or update) a product."""
        entity.save(update_fields=update_fields)
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True

    def get_for_update(self, id: str) -> Optional[Product]:
        try:
            return (
                Product.objects.alive().select_for_update().filter(id=id).first()
            )
        except (ValueError, ValidationError):
            return None

    def decrement_stock(self, id: str, quantity: int) -> bool:
        updated = (
            Product.objects.alive()
            .filter(id=id, stock__gte=quantity)
            .update(stock=F("stock") - quantity, updated_at=timezone.now())
        )
        return updated == 1


def _filter_data(query: ProductQueryDTO) -> Dict[str, Any]:
    data = {
        "category": query.category,
        "search": query.search,
        "min_price": query.min_price,
        "max_price": query.max_price,
    }
    return {key: str(value) for key, value in data.items() if value is not None}
