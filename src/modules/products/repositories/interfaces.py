"""Product repository interface.

Extends ``IRepository[Product]`` with the catalog search used by the
query engine and the locked read / conditional decrement used by order
placement.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.dtos import ProductQueryDTO
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate.

    Every read hides soft-deleted products.
    """

    @abstractmethod
    def search(self, query: ProductQueryDTO) -> Tuple[List[Product], int]:
        """Return one page of matching products and the total match count."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete a product; ``False`` when it does not exist."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside ``transaction.atomic``.
        """

    @abstractmethod
    def decrement_stock(self, id: str, quantity: int) -> bool:
        """Atomically subtract *quantity* if enough stock remains.

        Returns ``False`` (and changes nothing) when stock is insufficient.
        """
