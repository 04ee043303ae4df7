"""Order repository interface.

Extends ``IRepository[Order]`` with the writes order placement needs
(order header, lines, total correction) and the owner-scoped reads of
the order history.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.dtos import OrderPageQueryDTO
    from modules.orders.models import Order, OrderLine
    from modules.products.models import Product


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    Writes are expected to run inside the caller's transaction.
    """

    @abstractmethod
    def create_order(
        self,
        owner: Any,
        total_price: Decimal,
        description: Optional[str] = None,
    ) -> Order:
        """Insert a new ``pending`` order header."""

    @abstractmethod
    def add_line(
        self,
        order: Order,
        product: Product,
        quantity: int,
        price: Decimal,
    ) -> OrderLine:
        """Insert one order line; ``price`` is the line total."""

    @abstractmethod
    def set_total(self, order: Order, total_price: Decimal) -> Order:
        """Overwrite the order total (placement-time repricing only)."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched lines and products."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def list_for_owner(self, owner: Any) -> List[Order]:
        """All orders of *owner*, newest first."""

    @abstractmethod
    def search_for_owner(
        self, owner: Any, query: OrderPageQueryDTO
    ) -> Tuple[List[Order], int]:
        """One page of *owner*'s orders, newest first, and the match count."""
