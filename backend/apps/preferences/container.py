from __future__ import annotations

from django.core.cache import cache

from .services import ThemeService


def build_theme_service() -> ThemeService:
    return ThemeService(store=cache)
