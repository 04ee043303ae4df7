"""Catalog read path (cache-aside).

``CatalogQueryService.list_products`` answers a paginated, filtered and
sorted catalog query.  The cache is consulted first; on a miss, or when the
cache cannot be reached, the repository is queried and the assembled page is
written back with the configured TTL.  Repository errors propagate; cache
errors never do.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

import structlog
from django.conf import settings
from pydantic import ValidationError

from modules.core.cache import BestEffortCache
from modules.products.cache import build_catalog_cache_key
from modules.products.dtos import ProductListResultDTO, ProductSummaryDTO

if TYPE_CHECKING:
    from modules.core.cache import ICacheAdapter
    from modules.products.dtos import ProductQueryDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CatalogQueryService:
    def __init__(
        self,
        repository: IProductRepository,
        cache: ICacheAdapter,
        ttl: Optional[int] = None,
        prefix: Optional[str] = None,
    ) -> None:
        self._repo = repository
        self._cache = cache if isinstance(cache, BestEffortCache) else BestEffortCache(cache)
        self._ttl = settings.CATALOG_CACHE_TTL if ttl is None else ttl
        self._prefix = prefix or settings.CATALOG_CACHE_PREFIX

    def list_products(self, query: ProductQueryDTO) -> ProductListResultDTO:
        key = build_catalog_cache_key(query, self._prefix)
        log = logger.bind(cache_key=key)

        cached = self._read_cached(key)
        if cached is not None:
            log.debug("catalog.cache_hit")
            return cached

        log.debug("catalog.cache_miss")
        products, total = self._repo.search(query)
        result = ProductListResultDTO(
            current_page=query.page,
            page_size=query.page_size,
            total_pages=math.ceil(total / query.page_size),
            total_products=total,
            products=[ProductSummaryDTO.from_entity(p) for p in products],
        )
        self._cache.set(key, result.model_dump_json(by_alias=True), self._ttl)
        return result

    def _read_cached(self, key: str) -> Optional[ProductListResultDTO]:
        raw = self._cache.get(key)
        if raw is None:
            return None
        try:
            return ProductListResultDTO.model_validate_json(raw)
        except (ValidationError, TypeError) as exc:
            # Unreadable entries are dropped and recomputed.
            logger.warning("catalog.cache_corrupt", cache_key=key, error=str(exc))
            self._cache.delete(key)
            return None
