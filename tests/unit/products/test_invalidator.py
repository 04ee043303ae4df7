"""Unit tests for CatalogCacheInvalidator."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from django.db import transaction

from modules.core.cache import BestEffortCache
from modules.products.cache import CatalogCacheInvalidator

pytestmark = pytest.mark.unit


@pytest.fixture()
def inner():
    adapter = MagicMock()
    adapter.delete_by_prefix.return_value = 3
    return adapter


class TestInvalidate:
    def test_purges_prefix_with_separator(self, inner):
        invalidator = CatalogCacheInvalidator(cache=inner, prefix="products")

        assert invalidator.invalidate("test") == 3
        inner.delete_by_prefix.assert_called_once_with("products:")

    def test_prefix_defaults_to_setting(self, inner, settings):
        settings.CATALOG_CACHE_PREFIX = "catalog"
        CatalogCacheInvalidator(cache=inner).invalidate()
        inner.delete_by_prefix.assert_called_once_with("catalog:")

    def test_cache_failure_is_swallowed(self, inner):
        inner.delete_by_prefix.side_effect = ConnectionError("down")
        assert CatalogCacheInvalidator(cache=inner).invalidate() is None

    def test_wraps_raw_adapters_once(self, inner):
        wrapped = BestEffortCache(inner)
        invalidator = CatalogCacheInvalidator(cache=wrapped)
        assert invalidator._cache is wrapped


class TestInvalidateOnCommit:
    def test_runs_after_commit(self, inner, django_capture_on_commit_callbacks):
        invalidator = CatalogCacheInvalidator(cache=inner, async_mode=False)

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            invalidator.invalidate_on_commit("product.updated")
            inner.delete_by_prefix.assert_not_called()

        assert len(callbacks) == 1
        inner.delete_by_prefix.assert_called_once_with("products:")

    def test_skipped_on_rollback(self, inner, django_capture_on_commit_callbacks):
        invalidator = CatalogCacheInvalidator(cache=inner, async_mode=False)

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    invalidator.invalidate_on_commit("product.updated")
                    raise RuntimeError("boom")

        assert callbacks == []
        inner.delete_by_prefix.assert_not_called()


class TestAsyncMode:
    def test_dispatches_celery_task(self, inner, django_capture_on_commit_callbacks):
        invalidator = CatalogCacheInvalidator(cache=inner, async_mode=True)

        with patch("modules.products.tasks.purge_catalog_cache.delay") as delay:
            with django_capture_on_commit_callbacks(execute=True):
                invalidator.invalidate_on_commit("order.placed")

        delay.assert_called_once_with(prefix="products", reason="order.placed")
        inner.delete_by_prefix.assert_not_called()

    def test_falls_back_inline_when_broker_unreachable(
        self, inner, django_capture_on_commit_callbacks
    ):
        invalidator = CatalogCacheInvalidator(cache=inner, async_mode=True)

        with patch(
            "modules.products.tasks.purge_catalog_cache.delay",
            side_effect=ConnectionError("broker down"),
        ):
            with django_capture_on_commit_callbacks(execute=True):
                invalidator.invalidate_on_commit("order.placed")

        inner.delete_by_prefix.assert_called_once_with("products:")

    def test_mode_defaults_to_setting(self, inner, settings):
        settings.CATALOG_CACHE_INVALIDATION_ASYNC = True
        assert CatalogCacheInvalidator(cache=inner)._async is True
