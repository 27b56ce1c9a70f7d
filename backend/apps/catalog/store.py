from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from .dtos import ProductDTO


class CatalogStore:
    """
    The last-fetched product list for one page session.

    An empty store (fetch pending or failed) answers every lookup with None.
    """

    def __init__(
        self,
        products: Iterable[ProductDTO] = (),
        *,
        fetched_at: Optional[datetime] = None,
        fetch_attempted: bool = False,
    ):
        self._products: Tuple[ProductDTO, ...] = ()
        self._index: Dict[int, ProductDTO] = {}
        self.fetched_at = fetched_at
        self.fetch_attempted = fetch_attempted
        self._assign(products)

    def _assign(self, products: Iterable[ProductDTO]) -> None:
        ordered = []
        index: Dict[int, ProductDTO] = {}
        for product in products:
            if product.product_id in index:
                continue
            index[product.product_id] = product
            ordered.append(product)
        self._products = tuple(ordered)
        self._index = index

    def replace(self, products: Iterable[ProductDTO], fetched_at: datetime) -> None:
        self._assign(products)
        self.fetched_at = fetched_at
        self.fetch_attempted = True

    def mark_attempted(self) -> None:
        self.fetch_attempted = True

    def find_by_id(self, product_id: int) -> Optional[ProductDTO]:
        return self._index.get(product_id)

    def all(self) -> Tuple[ProductDTO, ...]:
        return self._products

    @property
    def is_loaded(self) -> bool:
        return self.fetched_at is not None

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._index
