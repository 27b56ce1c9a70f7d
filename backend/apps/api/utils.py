from collections.abc import Mapping
from typing import Any, Dict, Optional

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

from apps.common.notifications import Notifier

DEFAULT_ERROR_STATUS = status.HTTP_400_BAD_REQUEST

ERROR_STATUS_MAP = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "EMPTY_CART": status.HTTP_400_BAD_REQUEST,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "UNSUPPORTED_MEDIA_TYPE": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "FETCH_FAILED": status.HTTP_502_BAD_GATEWAY,
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _normalize_details(details: Any) -> Any:
    if isinstance(details, ValidationError):
        return as_serializer_error(details)
    if isinstance(details, Mapping):
        return dict(details)
    if isinstance(details, Exception):
        return {"type": details.__class__.__name__}
    return details


def error_response(
    code: str,
    message: str,
    details: Optional[Any] = None,
    http_status: Optional[int] = None,
    *,
    hint: Optional[str] = None,
    extra: Optional[Mapping[str, Any]] = None,
    notifier: Optional[Notifier] = None,
) -> Response:
    """
    Build the error envelope every storefront endpoint answers failures with.

    Args:
        code: Machine-readable error identifier (NOT_FOUND, EMPTY_CART, ...).
        message: Human-readable explanation of the error.
        details: Optional context such as validation errors or the product id.
        http_status: Explicit status overriding the code mapping.
        hint: Optional remediation hint for the widget.
        extra: Optional additional machine-readable fields.
        notifier: Toasts collected while handling the request; they are
            returned under ``extra.notifications``.
    """
    if not isinstance(code, str) or not code.strip():
        raise ValueError("error_response requires a non-empty string code")
    if not isinstance(message, str) or not message.strip():
        raise ValueError("error_response requires a non-empty string message")
    if extra is not None and not isinstance(extra, Mapping):
        raise TypeError("error_response extra must be a mapping if provided")

    normalized_code = code.strip().upper()
    status_code = (
        int(http_status)
        if http_status is not None
        else ERROR_STATUS_MAP.get(normalized_code, DEFAULT_ERROR_STATUS)
    )
    if not 100 <= status_code <= 599:
        raise ValueError("error_response status must be a valid HTTP status code")

    error: Dict[str, Any] = {
        "code": normalized_code,
        "message": message.strip(),
        "status": status_code,
    }
    if details is not None:
        error["details"] = _normalize_details(details)
    if hint is not None:
        error["hint"] = hint
    merged_extra: Dict[str, Any] = dict(extra or {})
    if notifier is not None and len(notifier):
        merged_extra["notifications"] = notifier.as_payload()
    if merged_extra:
        error["extra"] = merged_extra

    return Response({"error": error}, status=status_code)


def storefront_response(
    payload: Mapping[str, Any],
    notifier: Optional[Notifier] = None,
    http_status: int = status.HTTP_200_OK,
) -> Response:
    """Successful response body plus the request's notifications."""
    body: Dict[str, Any] = dict(payload)
    body["notifications"] = notifier.as_payload() if notifier is not None else []
    return Response(body, status=http_status)
