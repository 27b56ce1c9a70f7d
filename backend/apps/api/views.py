from typing import Optional, Tuple

from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.utils import error_response
from apps.api.validation import SESSION_HEADER, page_session_id


class PageSessionAPIView(APIView):
    """Base view for endpoints scoped to one widget page session."""

    permission_classes = [AllowAny]
    requires_page_session = True

    def resolve_session(self, request) -> Tuple[Optional[str], Optional[Response]]:
        session_id = page_session_id(request)
        if session_id is None:
            return None, error_response(
                "VALIDATION_ERROR",
                f"{SESSION_HEADER} header is required",
                {"header": SESSION_HEADER},
            )
        return session_id, None
