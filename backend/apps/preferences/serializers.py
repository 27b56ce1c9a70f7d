from rest_framework import serializers

from .services import THEMES


class ThemeSerializer(serializers.Serializer):
    theme = serializers.ChoiceField(choices=THEMES)
