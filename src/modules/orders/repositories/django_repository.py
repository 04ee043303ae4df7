"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Placement
writes do not open their own transaction: the Service Layer owns the
unit of work, so a failure on any line rolls back the header too.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderLine
from modules.orders.repositories.interfaces import IOrderRepository

if TYPE_CHECKING:
    from modules.orders.dtos import OrderPageQueryDTO

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Placement writes
    # ------------------------------------------------------------------

    def create_order(
        self,
        owner: Any,
        total_price: Decimal,
        description: Optional[str] = None,
    ) -> Order:
        return Order.objects.create(
            owner=owner,
            description=description or "",
            status=OrderStatus.PENDING,
            total_price=total_price,
        )

    def add_line(
        self,
        order: Order,
        product: Any,
        quantity: int,
        price: Decimal,
    ) -> OrderLine:
        return OrderLine.objects.create(
            order=order,
            product=product,
            quantity=quantity,
            price=price,
        )

    def set_total(self, order: Order, total_price: Decimal) -> Order:
        order.total_price = total_price
        order.save(update_fields=["total_price"])
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded lines and products.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return (
                Order.objects.prefetch_related("lines__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list_for_owner(self, owner: Any) -> List[Order]:
        return list(Order.objects.filter(owner=owner).order_by("-created_at", "-id"))

    def search_for_owner(
        self, owner: Any, query: OrderPageQueryDTO
    ) -> Tuple[List[Order], int]:
        queryset = Order.objects.filter(owner=owner)
        if query.status:
            queryset = queryset.filter(status=query.status)
        total = queryset.count()
        page = list(
            queryset.prefetch_related("lines__product")
            .order_by("-created_at", "-id")[query.offset : query.offset + query.page_size]
        )
        return page, total

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order, update_fields: Optional[Iterable[str]] = None) -> Order:
        """Persist (create or update) an order."""
        entity.save(update_fields=update_fields)
        logger.info("order.saved", order_id=str(entity.id), status=entity.status)
        return entity
