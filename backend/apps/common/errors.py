from __future__ import annotations

from typing import Optional


class StorefrontError(Exception):
    """Base class for recoverable storefront failures surfaced to the widget."""

    code = "SERVER_ERROR"


class NotFoundError(StorefrontError):
    """Raised when a product id is absent from the catalog or from the cart."""

    code = "NOT_FOUND"

    def __init__(self, product_id: int, collection: str = "catalog"):
        self.product_id = product_id
        self.collection = collection
        super().__init__(f"Product {product_id} not found in {collection}")


class FetchFailureError(StorefrontError):
    """Raised when the remote catalog could not be retrieved or decoded."""

    code = "FETCH_FAILED"

    def __init__(self, message: str, *, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class SessionStoreUnavailableError(StorefrontError):
    """Raised when the page-session store cannot be reached or locked."""

    code = "SERVICE_UNAVAILABLE"


# Checkout on an empty cart is a validation outcome, not an exception.
EMPTY_CART = ("EMPTY_CART", "Your cart is empty", None)


__all__ = [
    "StorefrontError",
    "NotFoundError",
    "FetchFailureError",
    "SessionStoreUnavailableError",
    "EMPTY_CART",
]
