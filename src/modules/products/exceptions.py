"""Product domain exceptions.

Raised by the Service Layer; the API layer (Views) translates them into
HTTP responses.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""

    code = "product_not_found"

    def __init__(self, product_id: object) -> None:
        self.product_id = str(product_id)
        super().__init__(f"Product {self.product_id} not found.")
