"""Asynchronous tasks of the products module."""

from typing import Optional

import structlog
from celery import shared_task

from modules.core.cache import get_catalog_cache
from modules.products.cache import CatalogCacheInvalidator

logger = structlog.get_logger(__name__)


@shared_task(name="products.purge_catalog_cache")
def purge_catalog_cache(prefix: Optional[str] = None, reason: str = "task") -> dict:
    """Drop every cached catalog listing under *prefix*."""
    invalidator = CatalogCacheInvalidator(
        cache=get_catalog_cache(),
        prefix=prefix,
        async_mode=False,
    )
    removed = invalidator.invalidate(reason)
    logger.info("purge_catalog_cache.executed", prefix=invalidator.prefix)
    return {"status": "ok", "prefix": invalidator.prefix, "removed": removed}
