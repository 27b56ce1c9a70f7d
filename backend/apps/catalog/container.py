from __future__ import annotations

from django.conf import settings

from apps.common.session import build_page_session_cache

from .client import CatalogClient
from .repositories import CatalogRepository
from .services import CatalogService


def build_catalog_client() -> CatalogClient:
    return CatalogClient(
        settings.CATALOG_URL,
        timeout=getattr(settings, "CATALOG_TIMEOUT", 5.0),
    )


def build_catalog_service() -> CatalogService:
    return CatalogService(client=build_catalog_client())


def build_catalog_repository() -> CatalogRepository:
    return CatalogRepository(build_page_session_cache())
