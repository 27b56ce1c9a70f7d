from typing import Any, Optional

from django.http import HttpRequest

from apps.api.utils import error_response
from apps.common import get_logger
from apps.common.session import is_valid_session_id

logger = get_logger(__name__).bind(component="api", layer="validation")

SESSION_HEADER = "X-Session-ID"
CLIENT_HEADER = "X-Client-ID"


def _read_header(request: HttpRequest, header: str) -> Optional[str]:
    headers = getattr(request, "headers", None)
    value = headers.get(header) if headers is not None else None
    if value is None:
        return None
    return str(value).strip()


def _require_identifier(request: HttpRequest, header: str, attr: str, view_name: str) -> Any:
    value = _read_header(request, header)
    if not value:
        logger.warning("Required header missing", view=view_name, header=header)
        return error_response(
            "VALIDATION_ERROR",
            f"{header} header is required",
            {"header": header},
            hint="Generate one identifier per page load and send it with every request.",
        )
    if not is_valid_session_id(value):
        logger.warning("Malformed header value", view=view_name, header=header)
        return error_response(
            "VALIDATION_ERROR",
            f"{header} must be 1-64 characters of letters, digits, '-' or '_'",
            {"header": header},
        )
    setattr(request, attr, value)
    return None


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Performs request level validation for storefront API views.
    Returns a DRF Response when validation fails; otherwise None and
    attaches the resolved identifiers to the request instance.
    """
    view_name = getattr(view_class, "__name__", "")
    logger.debug(
        "Running request context validation",
        view=view_name,
        method=getattr(request, "method", None),
    )
    if getattr(view_class, "requires_page_session", False):
        response = _require_identifier(request, SESSION_HEADER, "page_session_id", view_name)
        if response is not None:
            return response
    if getattr(view_class, "requires_client_id", False):
        response = _require_identifier(request, CLIENT_HEADER, "client_id", view_name)
        if response is not None:
            return response
    return None


def page_session_id(request) -> Optional[str]:
    value = getattr(request, "page_session_id", None)
    if value is None:
        value = _read_header(request, SESSION_HEADER)
    return value if is_valid_session_id(value) else None


def client_id(request) -> Optional[str]:
    value = getattr(request, "client_id", None)
    if value is None:
        value = _read_header(request, CLIENT_HEADER)
    return value if is_valid_session_id(value) else None
