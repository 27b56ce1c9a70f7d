from __future__ import annotations

from typing import List, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from .dtos import ProductDTO
    from .store import CatalogStore


class CatalogClientProtocol(Protocol):
    async def fetch_products(self) -> List["ProductDTO"]:
        ...


class CatalogRepositoryProtocol(Protocol):
    def load(self, session_id: str) -> "CatalogStore":
        ...

    def save(self, session_id: str, store: "CatalogStore") -> "CatalogStore":
        ...
