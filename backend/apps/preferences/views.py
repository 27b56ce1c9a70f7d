from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import CLIENT_HEADER_PARAMETER, ErrorResponseSerializer
from apps.api.utils import error_response
from apps.api.validation import CLIENT_HEADER, client_id
from apps.common import get_logger

from .container import build_theme_service
from .serializers import ThemeSerializer

logger = get_logger(__name__).bind(component="preferences", layer="view")


class ThemeBaseView(APIView):
    permission_classes = [AllowAny]
    requires_client_id = True
    service = build_theme_service()

    def resolve_client(self, request):
        value = client_id(request)
        if value is None:
            return None, error_response(
                "VALIDATION_ERROR",
                f"{CLIENT_HEADER} header is required",
                {"header": CLIENT_HEADER},
            )
        return value, None


@extend_schema(tags=["Preferences"])
class ThemeView(ThemeBaseView):
    log = logger.bind(view="ThemeView")

    @extend_schema(
        summary="Get theme",
        parameters=[CLIENT_HEADER_PARAMETER],
        responses={200: ThemeSerializer},
    )
    def get(self, request):
        cid, error = self.resolve_client(request)
        if error:
            return error
        return Response({"theme": self.service.get_theme(cid)})

    @extend_schema(
        summary="Set theme",
        parameters=[CLIENT_HEADER_PARAMETER],
        request=ThemeSerializer,
        responses={200: ThemeSerializer, 400: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def put(self, request):
        cid, error = self.resolve_client(request)
        if error:
            return error
        serializer = ThemeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        theme = self.service.set_theme(cid, serializer.validated_data["theme"])
        return Response({"theme": theme})


@extend_schema(tags=["Preferences"])
class ThemeToggleView(ThemeBaseView):
    log = logger.bind(view="ThemeToggleView")

    @extend_schema(
        summary="Toggle theme",
        description="Switches between light and dark and stores the result.",
        request=None,
        parameters=[CLIENT_HEADER_PARAMETER],
        responses={200: ThemeSerializer},
    )
    def post(self, request):
        cid, error = self.resolve_client(request)
        if error:
            return error
        theme = self.service.toggle_theme(cid)
        self.log.debug("Theme toggled", client_id=cid, theme=theme)
        return Response({"theme": theme})
