from __future__ import annotations

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import caches
from rest_framework.test import APIClient

from modules.products.models import Product

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _local_cache(settings):
    """Swap Redis for in-process caches, empty for every test."""
    settings.CACHES = {
        alias: {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": f"storefront-tests-{alias}",
        }
        for alias in ("default", "catalog")
    }
    for backend in caches.all():
        backend.clear()
    yield
    for backend in caches.all():
        backend.clear()


@pytest.fixture()
def catalog_cache():
    """Raw Django cache holding catalog listings."""
    return caches["catalog"]


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    return User.objects.create_user(username="shopper", password="shopper-pass-123")


@pytest.fixture()
def other_user():
    return User.objects.create_user(username="someone-else", password="other-pass-123")


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="catalog-admin", password="admin-pass-123", is_staff=True
    )


@pytest.fixture()
def auth_client(user):
    """APIClient with a force-authenticated regular user."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def admin_client(admin_user):
    """APIClient with a force-authenticated staff user."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture()
def make_product():
    """Factory persisting a Product with sensible defaults."""

    def _make(**overrides) -> Product:
        defaults = {
            "name": "Widget",
            "description": "A perfectly ordinary widget.",
            "price": Decimal("10.00"),
            "stock": 10,
            "category": "Gadgets",
        }
        defaults.update(overrides)
        return Product.objects.create(**defaults)

    return _make
