from drf_spectacular.utils import OpenApiParameter
from rest_framework import serializers

from apps.common.notifications import LEVELS


class NotificationSerializer(serializers.Serializer):
    level = serializers.ChoiceField(choices=LEVELS)
    message = serializers.CharField()


class ErrorExtraSerializer(serializers.Serializer):
    notifications = NotificationSerializer(many=True, required=False)


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()
    status = serializers.IntegerField()
    details = serializers.JSONField(required=False)
    hint = serializers.CharField(required=False, allow_blank=True)
    extra = ErrorExtraSerializer(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()


SESSION_HEADER_PARAMETER = OpenApiParameter(
    name="X-Session-ID",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Identifier of the widget page session (one per page load).",
)

CLIENT_HEADER_PARAMETER = OpenApiParameter(
    name="X-Client-ID",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Stable identifier of the browser, used for saved preferences.",
)
