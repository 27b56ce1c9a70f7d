from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from django.utils import timezone
from django.utils.translation import gettext as _

from apps.common import get_logger
from apps.common.errors import FetchFailureError, NotFoundError
from apps.common.notifications import Notifier

from .commands import SORT_NAME, SORT_PRICE_HIGH, SORT_PRICE_LOW, ProductFilterCommand
from .dtos import ProductDTO
from .protocols import CatalogClientProtocol
from .store import CatalogStore

logger = get_logger(__name__).bind(component="catalog", layer="service")


def _matches(product: ProductDTO, needle: str) -> bool:
    if needle in product.name.casefold():
        return True
    return bool(product.description) and needle in product.description.casefold()


def filter_products(
    products: Iterable[ProductDTO],
    query: str = "",
    max_price: Optional[Decimal] = None,
    sort: Optional[str] = None,
) -> List[ProductDTO]:
    """
    Search, price-cap and sort a product sequence.

    Pure: the input is never mutated and catalog order is kept unless a
    recognised sort key is given. Sorting is stable.
    """
    result = list(products)
    needle = (query or "").strip().casefold()
    if needle:
        result = [p for p in result if _matches(p, needle)]
    if max_price is not None:
        result = [p for p in result if p.price <= max_price]
    if sort == SORT_PRICE_LOW:
        result.sort(key=lambda p: p.price)
    elif sort == SORT_PRICE_HIGH:
        result.sort(key=lambda p: p.price, reverse=True)
    elif sort == SORT_NAME:
        result.sort(key=lambda p: p.name.casefold())
    return result


class CatalogService:
    def __init__(self, client: CatalogClientProtocol):
        self.client = client
        self.logger = logger.bind(service="CatalogService")

    async def refresh(self, store: CatalogStore, notifier: Notifier) -> Sequence[ProductDTO]:
        """Fetch the catalog into ``store``. On failure the store keeps its products."""
        self.logger.info("Refreshing catalog", loaded=store.is_loaded)
        store.mark_attempted()
        try:
            products = await self.client.fetch_products()
        except FetchFailureError as exc:
            self.logger.warning(
                "Catalog refresh failed; keeping previous products",
                error=str(exc),
                kept=len(store),
            )
            notifier.error(_("Failed to load products"))
            raise
        store.replace(products, fetched_at=timezone.now())
        self.logger.info("Catalog refreshed", products=len(store))
        return store.all()

    async def ensure_loaded(self, store: CatalogStore, notifier: Notifier) -> bool:
        """
        Run the page session's first fetch if it has not been attempted yet.

        Returns True when a fetch happened. A failed first fetch is not retried
        automatically; the widget asks for a refresh explicitly.
        """
        if store.fetch_attempted:
            return False
        await self.refresh(store, notifier)
        return True

    def list_products(
        self, store: CatalogStore, filters: Optional[ProductFilterCommand] = None
    ) -> List[ProductDTO]:
        cmd = filters or ProductFilterCommand()
        self.logger.debug(
            "Listing products",
            query=cmd.query,
            max_price=cmd.max_price,
            sort=cmd.sort,
            catalog_size=len(store),
        )
        if cmd.is_empty:
            return list(store.all())
        return filter_products(store.all(), cmd.query, cmd.max_price, cmd.sort)

    def get_product(self, store: CatalogStore, product_id: int) -> Optional[ProductDTO]:
        product = store.find_by_id(product_id)
        if not product:
            self.logger.info("Product not found", product_id=product_id)
        return product

    def quick_view(
        self, store: CatalogStore, product_id: int, notifier: Notifier
    ) -> ProductDTO:
        product = self.get_product(store, product_id)
        if product is None:
            notifier.error(_("Product not found"))
            raise NotFoundError(product_id, "catalog")
        return product
