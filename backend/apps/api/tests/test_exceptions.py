from rest_framework import status
from rest_framework.exceptions import MethodNotAllowed, ParseError, ValidationError
from rest_framework.test import APIRequestFactory

from apps.api.exceptions import global_exception_handler, storefront_error_response
from apps.common.errors import (
    FetchFailureError,
    NotFoundError,
    SessionStoreUnavailableError,
    StorefrontError,
)
from apps.common.notifications import Notifier

factory = APIRequestFactory()


class DummyView:
    pass


def _context(request):
    return {"request": request, "view": DummyView()}


def test_session_store_outage_returns_service_unavailable():
    request = factory.post("/api/cart/items/")
    exc = SessionStoreUnavailableError("Page session store unavailable (write cart)")
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert payload["code"] == "SERVICE_UNAVAILABLE"
    assert payload["message"] == "Page session store is temporarily unavailable"
    assert "hint" in payload
    assert [n["level"] for n in payload["extra"]["notifications"]] == ["error"]


def test_session_store_outage_drops_pending_success_toasts():
    notifier = Notifier()
    notifier.success("Added Pen to cart")
    response = storefront_error_response(SessionStoreUnavailableError("busy"), notifier)
    notifications = response.data["error"]["extra"]["notifications"]
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert all(n["level"] != "success" for n in notifications)


def test_validation_error_preserves_details():
    request = factory.post("/api/example/", data={})
    exc = ValidationError({"field": ["This field is required."]})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["message"] == "Validation failed"
    assert payload["details"] == {"field": ["This field is required."]}


def test_parse_error_becomes_validation_error():
    request = factory.post("/api/cart/items/")
    response = global_exception_handler(ParseError("JSON parse error"), _context(request))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["error"]["code"] == "VALIDATION_ERROR"
    assert response.data["error"]["message"] == "JSON parse error"


def test_method_not_allowed():
    request = factory.patch("/api/cart/checkout/")
    response = global_exception_handler(MethodNotAllowed("PATCH"), _context(request))
    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert response.data["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_not_found_error_from_catalog():
    request = factory.post("/api/cart/items/")
    response = global_exception_handler(NotFoundError(999), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert payload["code"] == "NOT_FOUND"
    assert payload["message"] == "Product not found"
    assert payload["details"] == {"productId": 999, "collection": "catalog"}


def test_not_found_error_from_cart():
    response = storefront_error_response(NotFoundError(3, "cart"))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data["error"]["message"] == "Item not found in cart"


def test_fetch_failure_maps_to_bad_gateway_with_notifications():
    notifier = Notifier()
    notifier.error("Failed to load products")
    exc = FetchFailureError("Catalog endpoint unavailable", url="http://catalog")
    response = storefront_error_response(exc, notifier)
    payload = response.data["error"]
    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert payload["code"] == "FETCH_FAILED"
    assert payload["details"] == {"reason": "Catalog endpoint unavailable"}
    assert "hint" in payload
    assert payload["extra"]["notifications"][0]["level"] == "error"


def test_base_storefront_error_is_server_error():
    response = storefront_error_response(StorefrontError("unexpected state"))
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data["error"]["message"] == "unexpected state"


def test_unhandled_exception_returns_generic_message():
    request = factory.get("/api/example/")
    response = global_exception_handler(RuntimeError("boom"), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert payload["code"] == "SERVER_ERROR"
    assert payload["message"] == "Something went wrong"
    assert "details" not in payload
