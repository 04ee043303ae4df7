"""Integration tests for Product API endpoints.

Covers:
- Public catalog listing: filters, sorting, paging, cache-aside behaviour.
- Admin CRUD via /api/v1/products/ with envelope responses.
- Permission enforcement (401 anonymous, 403 non-staff).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

PRODUCTS_URL = "/api/v1/products/"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_product(make_product):
    return make_product(name="Widget Alpha", price=Decimal("19.99"), stock=100)


@pytest.fixture()
def catalog(make_product):
    return [
        make_product(name="Smartphone X", category="Electronics", price=Decimal("499.00")),
        make_product(name="Phone Case", category="Accessories", price=Decimal("19.90")),
        make_product(name="Laptop Pro", category="Electronics", price=Decimal("1999.00")),
        make_product(name="Desk", category="Furniture", price=Decimal("250.00")),
        make_product(name="Headphones", category="Electronics", price=Decimal("89.00")),
    ]


def _valid_payload(**overrides) -> dict:
    payload = {
        "name": "Desk Lamp",
        "description": "An adjustable lamp for late nights.",
        "price": "35.00",
        "stock": 12,
        "category": "Home",
    }
    payload.update(overrides)
    return payload


# ===========================================================================
# LIST
# ===========================================================================


class TestProductList:
    def test_list_empty(self, api_client):
        response = api_client.get(PRODUCTS_URL)
        assert response.status_code == 200
        assert response.json() == {
            "currentPage": 1,
            "pageSize": 10,
            "totalPages": 0,
            "totalProducts": 0,
            "products": [],
        }

    def test_list_returns_summaries(self, api_client, sample_product):
        data = api_client.get(PRODUCTS_URL).json()
        assert data["totalProducts"] == 1
        entry = data["products"][0]
        assert entry["id"] == str(sample_product.id)
        assert entry["name"] == "Widget Alpha"
        assert entry["price"] == "19.99"
        assert "imageUrl" in entry

    def test_category_filter_and_price_sort(self, api_client, catalog):
        response = api_client.get(
            PRODUCTS_URL,
            {"category": "Electronics", "sortBy": "price", "sortOrder": "asc"},
        )
        names = [p["name"] for p in response.json()["products"]]
        assert names == ["Headphones", "Smartphone X", "Laptop Pro"]

    def test_search_and_price_range(self, api_client, catalog):
        response = api_client.get(
            PRODUCTS_URL, {"search": "phone", "minPrice": "20", "maxPrice": "500"}
        )
        data = response.json()
        assert data["totalProducts"] == 2
        assert {p["name"] for p in data["products"]} == {"Smartphone X", "Headphones"}

    def test_min_price_excludes_cheap_match(self, api_client, make_product):
        make_product(name="Laptop", price=Decimal("999.00"))
        make_product(name="Laptop Stand", price=Decimal("50.00"))

        data = api_client.get(
            PRODUCTS_URL,
            {
                "search": "Laptop",
                "minPrice": "500",
                "maxPrice": "2000",
                "sortBy": "price",
                "sortOrder": "asc",
                "page": 1,
                "limit": 20,
            },
        ).json()

        assert [p["name"] for p in data["products"]] == ["Laptop"]
        assert data["pageSize"] == 20

    def test_paging_metadata(self, api_client, catalog):
        data = api_client.get(PRODUCTS_URL, {"page": 2, "limit": 2}).json()
        assert data["currentPage"] == 2
        assert data["pageSize"] == 2
        assert data["totalPages"] == 3
        assert data["totalProducts"] == 5
        assert len(data["products"]) == 2

    def test_page_size_alias(self, api_client, catalog):
        data = api_client.get(PRODUCTS_URL, {"pageSize": 4}).json()
        assert data["pageSize"] == 4
        assert len(data["products"]) == 4

    def test_deleted_products_hidden(self, api_client, catalog):
        catalog[0].delete()
        assert api_client.get(PRODUCTS_URL).json()["totalProducts"] == 4

    @pytest.mark.parametrize(
        "params",
        [{"page": 0}, {"limit": 101}, {"minPrice": "-1"}, {"sortBy": "stock"}, {"sortOrder": "up"}],
    )
    def test_invalid_query_returns_400(self, api_client, params):
        response = api_client.get(PRODUCTS_URL, params)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"]

    def test_page_beyond_integer_range_returns_400(self, api_client, catalog):
        response = api_client.get(PRODUCTS_URL, {"page": "10000000000000000000"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "page"

    def test_far_page_is_empty(self, api_client, catalog):
        data = api_client.get(PRODUCTS_URL, {"page": 1_000_000}).json()
        assert data["currentPage"] == 1_000_000
        assert data["totalProducts"] == 5
        assert data["products"] == []

    def test_search_keeps_non_ascii_case(self, api_client, make_product):
        make_product(name="Écran 4K", category="Electronics", price=Decimal("300.00"))

        data = api_client.get(PRODUCTS_URL, {"search": "Écran"}).json()

        assert [p["name"] for p in data["products"]] == ["Écran 4K"]


class TestCatalogCache:
    def test_second_read_is_served_from_cache(self, api_client, sample_product, catalog_cache):
        first = api_client.get(PRODUCTS_URL).json()

        # Bypasses the service layer, so nothing purges the cache.
        Product.objects.filter(id=sample_product.id).update(name="Changed Behind Cache")

        assert api_client.get(PRODUCTS_URL).json() == first
        assert catalog_cache.get("products:page:1:limit:10") is not None

    def test_admin_update_invalidates_listing(
        self, api_client, admin_client, sample_product, django_capture_on_commit_callbacks
    ):
        api_client.get(PRODUCTS_URL)

        with django_capture_on_commit_callbacks(execute=True):
            response = admin_client.patch(
                f"{PRODUCTS_URL}{sample_product.id}/",
                {"price": "24.50"},
                format="json",
            )
        assert response.status_code == 200

        listed = api_client.get(PRODUCTS_URL).json()["products"][0]
        assert listed["price"] == "24.50"

    def test_admin_create_invalidates_listing(
        self, api_client, admin_client, django_capture_on_commit_callbacks
    ):
        assert api_client.get(PRODUCTS_URL).json()["totalProducts"] == 0

        with django_capture_on_commit_callbacks(execute=True):
            admin_client.post(PRODUCTS_URL, _valid_payload(), format="json")

        assert api_client.get(PRODUCTS_URL).json()["totalProducts"] == 1


# ===========================================================================
# RETRIEVE
# ===========================================================================


class TestProductRetrieve:
    def test_retrieve_success(self, api_client, sample_product):
        response = api_client.get(f"{PRODUCTS_URL}{sample_product.id}/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Widget Alpha"
        assert data["stock"] == 100
        assert {"createdAt", "updatedAt", "imageUrl"} <= set(data)

    @pytest.mark.parametrize("product_id", ["0190c9d4-0000-7000-8000-000000000000", "nope"])
    def test_retrieve_not_found(self, api_client, product_id):
        response = api_client.get(f"{PRODUCTS_URL}{product_id}/")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["code"] == "product_not_found"
        assert body["errors"][0]["product_id"] == product_id

    def test_retrieve_deleted_is_404(self, api_client, sample_product):
        sample_product.delete()
        assert api_client.get(f"{PRODUCTS_URL}{sample_product.id}/").status_code == 404


# ===========================================================================
# CREATE / UPDATE / DELETE
# ===========================================================================


class TestProductPermissions:
    def test_anonymous_create_returns_401(self, api_client):
        response = api_client.post(PRODUCTS_URL, _valid_payload(), format="json")
        assert response.status_code == 401

    def test_regular_user_create_returns_403(self, auth_client):
        response = auth_client.post(PRODUCTS_URL, _valid_payload(), format="json")
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_regular_user_delete_returns_403(self, auth_client, sample_product):
        response = auth_client.delete(f"{PRODUCTS_URL}{sample_product.id}/")
        assert response.status_code == 403
        assert Product.objects.alive().filter(id=sample_product.id).exists()


class TestProductMutations:
    def test_create_success(self, admin_client, admin_user):
        response = admin_client.post(
            PRODUCTS_URL,
            _valid_payload(imageUrl="https://cdn.example.com/lamp.png"),
            format="json",
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Product created successfully."
        assert body["errors"] is None
        assert body["object"]["imageUrl"] == "https://cdn.example.com/lamp.png"

        product = Product.objects.get(id=body["object"]["id"])
        assert product.owner == admin_user
        assert product.price == Decimal("35.00")

    def test_create_missing_fields_returns_400(self, admin_client):
        response = admin_client.post(PRODUCTS_URL, {"name": "Lamp"}, format="json")
        assert response.status_code == 400
        fields = {error.get("field") for error in response.json()["errors"]}
        assert {"description", "price", "stock", "category"} <= fields

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": "0"},
            {"price": "1.999"},
            {"stock": -1},
            {"name": "ab"},
            {"description": "too short"},
            {"imageUrl": "not-a-url"},
        ],
    )
    def test_create_invalid_payload_returns_400(self, admin_client, overrides):
        response = admin_client.post(PRODUCTS_URL, _valid_payload(**overrides), format="json")
        assert response.status_code == 400
        assert not Product.objects.exists()

    def test_partial_update(self, admin_client, sample_product):
        response = admin_client.patch(
            f"{PRODUCTS_URL}{sample_product.id}/", {"stock": 7}, format="json"
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Product updated successfully."
        assert body["object"]["stock"] == 7
        assert body["object"]["name"] == "Widget Alpha"

    def test_put_is_partial_too(self, admin_client, sample_product):
        response = admin_client.put(
            f"{PRODUCTS_URL}{sample_product.id}/", {"name": "Widget Beta"}, format="json"
        )
        assert response.status_code == 200
        sample_product.refresh_from_db()
        assert sample_product.name == "Widget Beta"

    def test_update_not_found(self, admin_client):
        response = admin_client.patch(
            f"{PRODUCTS_URL}0190c9d4-0000-7000-8000-000000000000/",
            {"stock": 1},
            format="json",
        )
        assert response.status_code == 404

    def test_destroy_soft_deletes(self, admin_client, sample_product):
        response = admin_client.delete(f"{PRODUCTS_URL}{sample_product.id}/")
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Product deleted successfully.",
            "object": None,
            "errors": None,
        }
        sample_product.refresh_from_db()
        assert sample_product.is_deleted

    def test_destroy_twice_is_404(self, admin_client, sample_product):
        admin_client.delete(f"{PRODUCTS_URL}{sample_product.id}/")
        assert admin_client.delete(f"{PRODUCTS_URL}{sample_product.id}/").status_code == 404
