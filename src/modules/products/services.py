"""Product service layer (Use Cases).

Orchestrates the product mutation path, delegating persistence to the
injected ``IProductRepository`` and catalog-cache purges to the injected
``CatalogCacheInvalidator``.

Business rules enforced here:
- Price must be greater than zero and stock non-negative (validated by DTO).
- Deletion is a soft delete; deleted products disappear from every read.
- Every committed mutation purges the cached catalog listings.  A rolled-back
  mutation purges nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.cache import CatalogCacheInvalidator
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        cache_invalidator: CatalogCacheInvalidator,
    ) -> None:
        self._repo = repository
        self._invalidator = cache_invalidator

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO, owner: Optional[Any] = None) -> Product:
        product = Product(
            name=dto.name,
            description=dto.description,
            price=dto.price,
            stock=dto.stock,
            category=dto.category,
            image_url=dto.image_url,
            owner=owner,
        )
        product = self._repo.save(product)
        self._invalidator.invalidate_on_commit("product.created")
        logger.info(
            "product.created",
            product_id=str(product.id),
            category=product.category,
        )
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields to an existing product.

        The row is locked for the read and only the supplied columns are
        written; concurrent stock decrements survive.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(id)

        changes = dto.changes()
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save(product, update_fields=list(changes))
        self._invalidator.invalidate_on_commit("product.updated")
        logger.info("product.updated", product_id=str(id), fields=sorted(changes))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(id)
        self._invalidator.invalidate_on_commit("product.deleted")
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, id: str) -> Product:
        """Retrieve a single live product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)
        return product
