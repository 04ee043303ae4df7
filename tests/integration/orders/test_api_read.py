"""Integration tests for order history, detail and status endpoints.

Covers:
- History lists only the caller's orders, newest first.
- Paged listing carries paging metadata and filters by status.
- Detail returns the envelope for owners, 403 for others, 404 when missing.
- Status updates validate the value and enforce ownership.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderLine

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"
MISSING_ID = "0190c9d4-0000-7000-8000-000000000000"


@pytest.fixture()
def make_order(make_product):
    def _make(owner, quantity=1, price=Decimal("10.00")) -> Order:
        product = make_product(price=price)
        order = Order.objects.create(owner=owner, total_price=price * quantity)
        OrderLine.objects.create(
            order=order, product=product, quantity=quantity, price=price * quantity
        )
        return order

    return _make


@pytest.fixture()
def order(make_order, user):
    return make_order(user, quantity=2)


# ===========================================================================
# History
# ===========================================================================


class TestOrderHistory:
    def test_empty(self, auth_client):
        response = auth_client.get(ORDERS_URL)
        assert response.status_code == 200
        assert response.json() == []

    def test_lists_own_orders_newest_first(self, auth_client, make_order, user, other_user):
        older = make_order(user)
        newer = make_order(user, price=Decimal("5.00"))
        make_order(other_user)

        data = auth_client.get(ORDERS_URL).json()

        assert [entry["order_id"] for entry in data] == [str(newer.id), str(older.id)]
        assert data[0] == {
            "order_id": str(newer.id),
            "status": "pending",
            "total_price": "5.00",
            "created_at": data[0]["created_at"],
        }

    def test_unauthenticated_returns_401(self, api_client):
        assert api_client.get(ORDERS_URL).status_code == 401


# ===========================================================================
# Paged listing
# ===========================================================================


PAGED_URL = f"{ORDERS_URL}paged/"


class TestPagedOrders:
    def test_envelope_with_paging_metadata(self, auth_client, make_order, user, other_user):
        orders = [make_order(user) for _ in range(3)]
        make_order(other_user)

        response = auth_client.get(PAGED_URL, {"page": 1, "pageSize": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Orders retrieved successfully"
        assert body["errors"] is None
        assert body["pageNumber"] == 1
        assert body["pageSize"] == 2
        assert body["totalSize"] == 3
        assert [entry["id"] for entry in body["object"]] == [
            str(orders[2].id),
            str(orders[1].id),
        ]
        assert body["object"][0]["products"][0]["quantity"] == 1

    def test_second_page(self, auth_client, make_order, user):
        orders = [make_order(user) for _ in range(3)]

        body = auth_client.get(PAGED_URL, {"page": 2, "pageSize": 2}).json()

        assert [entry["id"] for entry in body["object"]] == [str(orders[0].id)]
        assert body["totalSize"] == 3

    def test_defaults(self, auth_client, order):
        body = auth_client.get(PAGED_URL).json()
        assert body["pageNumber"] == 1
        assert body["pageSize"] == 10
        assert body["totalSize"] == 1

    def test_status_filter(self, auth_client, make_order, user):
        make_order(user)
        shipped = make_order(user)
        Order.objects.filter(id=shipped.id).update(status=OrderStatus.SHIPPED)

        body = auth_client.get(PAGED_URL, {"status": "shipped"}).json()

        assert body["totalSize"] == 1
        assert body["object"][0]["id"] == str(shipped.id)
        assert body["object"][0]["status"] == "shipped"

    @pytest.mark.parametrize(
        "params",
        [
            {"page": 0},
            {"page": "10000000000000000000"},
            {"pageSize": 0},
            {"pageSize": 101},
            {"status": "teleported"},
        ],
    )
    def test_invalid_query_returns_400(self, auth_client, params):
        response = auth_client.get(PAGED_URL, params)
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_unauthenticated_returns_401(self, api_client):
        assert api_client.get(PAGED_URL).status_code == 401


# ===========================================================================
# Detail
# ===========================================================================


class TestOrderRetrieve:
    def test_owner_gets_envelope(self, auth_client, order):
        response = auth_client.get(f"{ORDERS_URL}{order.id}/")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Order retrieved successfully"
        assert body["errors"] is None
        assert body["object"]["id"] == str(order.id)
        assert body["object"]["totalPrice"] == "20.00"
        assert body["object"]["products"][0]["quantity"] == 2

    def test_other_user_gets_403(self, api_client, other_user, order):
        api_client.force_authenticate(user=other_user)

        response = api_client.get(f"{ORDERS_URL}{order.id}/")

        assert response.status_code == 403
        body = response.json()
        assert body["message"] == "You are not authorized to access this order"
        assert body["errors"][0]["code"] == "order_access_denied"

    @pytest.mark.parametrize("order_id", [MISSING_ID, "not-a-uuid"])
    def test_missing_gets_404(self, auth_client, order_id):
        response = auth_client.get(f"{ORDERS_URL}{order_id}/")
        assert response.status_code == 404
        assert response.json()["message"] == "Order not found"


# ===========================================================================
# Status updates
# ===========================================================================


class TestOrderStatusUpdate:
    def test_owner_updates_status(self, auth_client, order):
        response = auth_client.put(
            f"{ORDERS_URL}{order.id}/status/", {"status": "shipped"}, format="json"
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Order status updated successfully"
        assert body["object"]["status"] == "shipped"
        order.refresh_from_db()
        assert order.status == OrderStatus.SHIPPED

    def test_invalid_status_returns_400(self, auth_client, order):
        response = auth_client.put(
            f"{ORDERS_URL}{order.id}/status/", {"status": "teleported"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_status"
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_other_user_gets_403(self, api_client, other_user, order):
        api_client.force_authenticate(user=other_user)

        response = api_client.put(
            f"{ORDERS_URL}{order.id}/status/", {"status": "cancelled"}, format="json"
        )

        assert response.status_code == 403
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_missing_order_returns_404(self, auth_client):
        response = auth_client.put(
            f"{ORDERS_URL}{MISSING_ID}/status/", {"status": "cancelled"}, format="json"
        )
        assert response.status_code == 404
