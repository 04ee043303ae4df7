"""Order service layer (Use Cases).

Order placement runs in two phases:

1. Pre-check, outside any transaction: every line's product must exist and
   have enough stock; an expected total is computed from current prices.
   Failing fast here avoids taking locks for baskets that cannot succeed.
2. Commit, in one ``transaction.atomic`` block: products are locked with
   ``SELECT ... FOR UPDATE`` in ascending id order, existence and stock are
   re-validated against the locked rows, lines are priced from the locked
   rows, and stock is decremented with a conditional UPDATE.  Any failure
   rolls back the whole order.

The pre-check is advisory; the locked re-validation is authoritative.  When
a product price changed between the phases, the order total follows the
locked prices.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

import structlog
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.dtos import OrderSummaryDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderNotFound,
    ProductNotFound,
)

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO, OrderPageQueryDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.cache import CatalogCacheInvalidator
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and the catalog cache invalidator via
    constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        cache_invalidator: CatalogCacheInvalidator,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._invalidator = cache_invalidator

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def place_order(self, owner: Any, dto: CreateOrderDTO) -> Order:
        """Place an order for *owner*.

        Raises:
            ProductNotFound: a product does not exist or was deleted.
            InsufficientStock: a product cannot cover the requested quantity.
        """
        log = logger.bind(owner_id=str(owner.pk), line_count=len(dto.items))
        log.info("order.placement_started")

        expected_total = self._precheck(dto)
        order = self._commit(owner, dto, expected_total, log)

        log.info(
            "order.placed",
            order_id=str(order.id),
            total_price=str(order.total_price),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    def update_status(self, order_id: str, owner: Any, status: str) -> Order:
        """Set the status of one of *owner*'s orders.

        Raises:
            InvalidOrderStatus: *status* is not a known order status.
            OrderNotFound: order does not exist.
            OrderAccessDenied: order belongs to another user.
        """
        if status not in OrderStatus.values:
            raise InvalidOrderStatus(status, OrderStatus.values)

        with transaction.atomic():
            order = self._order_repo.get_for_update(order_id)
            self._check_owner(order, order_id, owner)

            old_status = order.status
            order.status = status
            self._order_repo.save(order)

        logger.info(
            "order.status_updated",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return self._order_repo.get_by_id(str(order_id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str, owner: Any) -> Order:
        """Retrieve one of *owner*'s orders.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: order belongs to another user.
        """
        order = self._order_repo.get_by_id(order_id)
        self._check_owner(order, order_id, owner)
        return order

    def list_order_history(self, owner: Any) -> List[OrderSummaryDTO]:
        """Summaries of *owner*'s orders, newest first."""
        return [
            OrderSummaryDTO.from_entity(order)
            for order in self._order_repo.list_for_owner(owner)
        ]

    def list_orders(
        self, owner: Any, query: OrderPageQueryDTO
    ) -> Tuple[List[Order], int]:
        """One page of *owner*'s full orders plus the total match count."""
        return self._order_repo.search_for_owner(owner, query)

    # ------------------------------------------------------------------
    # Placement phases
    # ------------------------------------------------------------------

    def _precheck(self, dto: CreateOrderDTO) -> Decimal:
        total = Decimal("0.00")
        for item in dto.items:
            product = self._product_repo.get_by_id(item.product_id)
            if product is None:
                raise ProductNotFound(item.product_id)
            if product.stock < item.quantity:
                raise InsufficientStock(
                    product_id=product.id,
                    product_name=product.name,
                    available=product.stock,
                    requested=item.quantity,
                )
            total += product.price * item.quantity
        return total

    def _commit(
        self,
        owner: Any,
        dto: CreateOrderDTO,
        expected_total: Decimal,
        log: Any,
    ) -> Order:
        with transaction.atomic():
            order = self._order_repo.create_order(
                owner=owner,
                total_price=expected_total,
                description=dto.description,
            )
            locked = self._lock_products(item.product_id for item in dto.items)

            total = Decimal("0.00")
            for item in dto.items:
                product = locked[item.product_id]
                if product.stock < item.quantity:
                    log.warning(
                        "order.stock_lost_to_concurrent_order",
                        product_id=str(product.id),
                        available=product.stock,
                        requested=item.quantity,
                    )
                    raise InsufficientStock(
                        product_id=product.id,
                        product_name=product.name,
                        available=product.stock,
                        requested=item.quantity,
                    )

                line_price = product.price * item.quantity
                self._order_repo.add_line(order, product, item.quantity, line_price)
                if not self._product_repo.decrement_stock(product.id, item.quantity):
                    raise InsufficientStock(
                        product_id=product.id,
                        product_name=product.name,
                        available=product.stock,
                        requested=item.quantity,
                    )
                total += line_price
                log.info(
                    "order.stock_reserved",
                    product_id=str(product.id),
                    quantity=item.quantity,
                    remaining=product.stock - item.quantity,
                )

            if total != expected_total:
                log.warning(
                    "order.repriced",
                    order_id=str(order.id),
                    expected_total=str(expected_total),
                    total=str(total),
                )
                order = self._order_repo.set_total(order, total)

            self._invalidator.invalidate_on_commit("order.placed")
        return order

    def _lock_products(self, product_ids) -> Dict[str, Product]:
        """Lock every referenced product, in ascending id order."""
        locked: Dict[str, Product] = {}
        for product_id in sorted(set(product_ids)):
            product = self._product_repo.get_for_update(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            locked[product_id] = product
        return locked

    @staticmethod
    def _check_owner(order: Order | None, order_id: str, owner: Any) -> None:
        if order is None:
            raise OrderNotFound(order_id)
        if order.owner_id != owner.pk:
            logger.warning(
                "order.access_denied",
                order_id=str(order_id),
                owner_id=str(owner.pk),
            )
            raise OrderAccessDenied(order_id)
