from __future__ import annotations

from apps.common.session import build_page_session_cache

from .mappers import CartLineMapper, CartMapper
from .repositories import CartRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(cart_mapper=CartMapper(CartLineMapper()))


def build_cart_repository() -> CartRepository:
    return CartRepository(build_page_session_cache())
