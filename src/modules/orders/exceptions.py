"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  Each carries a stable ``code`` used in the
error envelope.
"""

from __future__ import annotations

from typing import Iterable


class OrderError(Exception):
    code = "order_error"


class ProductNotFound(OrderError):
    """A product referenced by an order line does not exist or was deleted."""

    code = "product_not_found"

    def __init__(self, product_id: object) -> None:
        self.product_id = str(product_id)
        super().__init__(f"Product with ID {self.product_id} not found")


class InsufficientStock(OrderError):
    """Not enough stock to fulfil an order line."""

    code = "insufficient_stock"

    def __init__(
        self,
        product_id: object,
        product_name: str,
        available: int,
        requested: int,
    ) -> None:
        self.product_id = str(product_id)
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class OrderNotFound(OrderError):
    code = "order_not_found"

    def __init__(self, order_id: object) -> None:
        self.order_id = str(order_id)
        super().__init__("Order not found")


class OrderAccessDenied(OrderError):
    """The order belongs to another user."""

    code = "order_access_denied"

    def __init__(self, order_id: object) -> None:
        self.order_id = str(order_id)
        super().__init__("You are not authorized to access this order")


class InvalidOrderStatus(OrderError):
    code = "invalid_status"

    def __init__(self, status: object, allowed: Iterable[str]) -> None:
        self.status = str(status)
        super().__init__(f"Invalid status. Must be one of: {', '.join(allowed)}")
