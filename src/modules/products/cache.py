"""Catalog cache keys and invalidation.

Every catalog listing is cached under a key derived from its query shape and
starting with ``CATALOG_CACHE_PREFIX``.  The cache has no back-reference from a
product to the listings that contain it, so invalidation is coarse: any
committed product mutation or order placement purges the whole prefix.
"""

from __future__ import annotations

from decimal import Decimal
from functools import partial
from typing import Optional
from urllib.parse import quote

import structlog
from django.conf import settings
from django.db import transaction

from modules.core.cache import BestEffortCache, ICacheAdapter
from modules.products.dtos import ProductQueryDTO, SortField, SortOrder

logger = structlog.get_logger(__name__)


def build_catalog_cache_key(query: ProductQueryDTO, prefix: Optional[str] = None) -> str:
    """Deterministic key for a normalised query.

    Segment order is fixed.  Optional segments are emitted only when they
    differ from their default, so an omitted ``sortOrder`` and an explicit
    ``sortOrder=desc`` share a key.  Search text is folded to lower case, so
    case variants share an entry.
    """
    parts = [
        prefix or settings.CATALOG_CACHE_PREFIX,
        f"page:{query.page}",
        f"limit:{query.page_size}",
    ]
    if query.category is not None:
        parts.append(f"category:{_encode(query.category)}")
    if query.search is not None:
        parts.append(f"search:{_encode(query.search.lower())}")
    if query.min_price is not None:
        parts.append(f"minPrice:{_canonical_decimal(query.min_price)}")
    if query.max_price is not None:
        parts.append(f"maxPrice:{_canonical_decimal(query.max_price)}")
    if query.sort_by is not SortField.CREATED_AT:
        parts.append(f"sortBy:{query.sort_by.value}")
    if query.sort_order is not SortOrder.DESC:
        parts.append(f"sortOrder:{query.sort_order.value}")
    return ":".join(parts)


def _encode(value: str) -> str:
    # Free text must not be able to forge a ":" separator.
    return quote(value, safe="")


def _canonical_decimal(value: Decimal) -> str:
    return format(value.normalize(), "f")


class CatalogCacheInvalidator:
    """Purges cached catalog listings after committed writes.

    With ``async_mode`` the purge is handed to the Celery task
    ``products.purge_catalog_cache``; a failed dispatch falls back to an
    inline purge.
    """

    def __init__(
        self,
        cache: ICacheAdapter,
        prefix: Optional[str] = None,
        async_mode: Optional[bool] = None,
    ) -> None:
        self._cache = cache if isinstance(cache, BestEffortCache) else BestEffortCache(cache)
        self.prefix = prefix or settings.CATALOG_CACHE_PREFIX
        self._async = (
            settings.CATALOG_CACHE_INVALIDATION_ASYNC if async_mode is None else async_mode
        )

    def invalidate(self, reason: str = "manual") -> Optional[int]:
        """Purge now.  Never raises; an unreachable cache is only logged."""
        removed = self._cache.delete_by_prefix(f"{self.prefix}:")
        logger.info(
            "catalog.cache_invalidated",
            prefix=self.prefix,
            reason=reason,
            removed=removed,
        )
        return removed

    def invalidate_on_commit(self, reason: str) -> None:
        """Purge once the surrounding transaction commits; skip on rollback."""
        transaction.on_commit(partial(self._dispatch, reason))

    def _dispatch(self, reason: str) -> None:
        if not self._async:
            self.invalidate(reason)
            return

        from modules.products.tasks import purge_catalog_cache

        try:
            purge_catalog_cache.delay(prefix=self.prefix, reason=reason)
        except Exception as exc:
            logger.warning(
                "catalog.cache_purge_dispatch_failed",
                reason=reason,
                error=str(exc),
            )
            self.invalidate(reason)
