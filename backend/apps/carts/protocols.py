from __future__ import annotations

from decimal import Decimal
from typing import ContextManager, Optional, Protocol, TYPE_CHECKING

from .models import Cart

if TYPE_CHECKING:
    from apps.carts.dtos import CartDTO, CheckoutDTO
    from apps.catalog.dtos import ProductDTO


class CartRepositoryProtocol(Protocol):
    def load(self, session_id: str) -> Cart:
        ...

    def save(self, session_id: str, cart: Cart) -> Cart:
        ...

    def lock(self, session_id: str) -> ContextManager[None]:
        ...


class ProductLookupProtocol(Protocol):
    def find_by_id(self, product_id: int) -> Optional["ProductDTO"]:
        ...


class CartMapperProtocol(Protocol):
    def to_dto(self, cart: Cart) -> "CartDTO":
        ...

    def to_checkout_dto(
        self, item_count: int, total: Decimal, message: str
    ) -> "CheckoutDTO":
        ...
