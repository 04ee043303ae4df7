"""Cache capability used by the catalog layer.

The cache is a disposable accelerator: nothing stored here is authoritative,
and every consumer must be able to serve its request from the database alone.

- ``ICacheAdapter``: the four operations the application relies on.
- ``DjangoCacheAdapter``: delegates to a Django cache alias (django-redis in
  production, local memory in tests).
- ``BestEffortCache``: wraps any adapter so that failures are logged and
  reported as a miss / no-op instead of propagating.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import structlog
from django.conf import settings
from django.core.cache import caches

logger = structlog.get_logger(__name__)


class ICacheAdapter(ABC):
    """Key/value store with per-key expiry and prefix purge."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or ``None`` when absent or expired."""

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store *value* under *key* for *ttl_seconds*."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a single key."""

    @abstractmethod
    def delete_by_prefix(self, prefix: str) -> Optional[int]:
        """Remove every key starting with *prefix*.

        Returns the number of removed keys when the backend reports it.
        """


class DjangoCacheAdapter(ICacheAdapter):
    """Adapter over ``django.core.cache.caches[alias]``."""

    def __init__(self, alias: str = "default") -> None:
        self._alias = alias

    @property
    def _backend(self):
        # ``caches`` hands out one connection per thread.
        return caches[self._alias]

    def get(self, key: str) -> Optional[str]:
        return self._backend.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._backend.set(key, value, timeout=ttl_seconds)

    def delete(self, key: str) -> None:
        self._backend.delete(key)

    def delete_by_prefix(self, prefix: str) -> Optional[int]:
        backend = self._backend
        delete_pattern = getattr(backend, "delete_pattern", None)
        if delete_pattern is not None:
            return delete_pattern(f"{prefix}*")
        # Backends without key scanning (locmem, memcached) are flushed whole,
        # so catalog entries live in their own alias.
        backend.clear()
        return None


class BestEffortCache(ICacheAdapter):
    """Swallow-and-log wrapper: a broken cache behaves like an empty one."""

    def __init__(self, inner: ICacheAdapter) -> None:
        self._inner = inner

    def get(self, key: str) -> Optional[str]:
        try:
            return self._inner.get(key)
        except Exception as exc:
            logger.warning("cache.get_failed", key=key, error=str(exc))
            return None

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._inner.set(key, value, ttl_seconds)
        except Exception as exc:
            logger.warning("cache.set_failed", key=key, error=str(exc))

    def delete(self, key: str) -> None:
        try:
            self._inner.delete(key)
        except Exception as exc:
            logger.warning("cache.delete_failed", key=key, error=str(exc))

    def delete_by_prefix(self, prefix: str) -> Optional[int]:
        try:
            return self._inner.delete_by_prefix(prefix)
        except Exception as exc:
            logger.warning("cache.purge_failed", prefix=prefix, error=str(exc))
            return None


def get_catalog_cache() -> BestEffortCache:
    """The catalog cache handle views and tasks inject into services."""
    return BestEffortCache(DjangoCacheAdapter(settings.CATALOG_CACHE_ALIAS))
