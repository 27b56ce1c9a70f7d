from django.utils.deprecation import MiddlewareMixin
from rest_framework.renderers import JSONRenderer

from apps.api.validation import validate_request_context
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="middleware")


class RequestValidationMiddleware(MiddlewareMixin):
    """
    Rejects storefront requests that lack the page-session or client headers
    before they reach a view.
    """

    def process_view(self, request, view_func, view_args, view_kwargs):
        view_class = getattr(view_func, "view_class", None)
        if not view_class:
            return None
        view_name = getattr(view_class, "__name__", str(view_class))
        response = validate_request_context(request, view_class, view_kwargs)
        if response is None:
            return None
        # Responses returned from middleware skip DRF's finalize step.
        response.accepted_renderer = JSONRenderer()
        response.accepted_media_type = "application/json"
        response.renderer_context = {}
        response.render()
        logger.info(
            "Request blocked by validation",
            view=view_name,
            method=getattr(request, "method", None),
            status=response.status_code,
        )
        return response
