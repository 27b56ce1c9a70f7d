"""HTTP client for the remote product catalog.

The catalog endpoint returns the whole product list as a JSON array in one
response. There is no pagination, no authentication and no retry: a failed
fetch is reported once and the caller keeps whatever it had before.
"""
from __future__ import annotations

from typing import Any, List, Optional

import httpx

from apps.common import get_logger
from apps.common.errors import FetchFailureError

from .dtos import ProductDTO
from .mappers import ProductMapper

logger = get_logger(__name__).bind(component="catalog", layer="client")


class CatalogClient:
    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        mapper: Optional[ProductMapper] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport
        self.mapper = mapper or ProductMapper()

    def _get_async_client(self) -> httpx.AsyncClient:
        """Get a configured async httpx client."""
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            headers={"Accept": "application/json"},
        )

    async def fetch_products(self) -> List[ProductDTO]:
        """Fetch and decode the product list.

        Raises:
            FetchFailureError: on transport errors, non-2xx responses or a
                body that is not a JSON array.
        """
        logger.debug("Fetching catalog", url=self.url)
        try:
            async with self._get_async_client() as client:
                response = await client.get(self.url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("Catalog endpoint returned an error", url=self.url, status=status)
            raise FetchFailureError(
                f"Catalog endpoint responded with HTTP {status}", url=self.url
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Catalog endpoint unavailable", url=self.url, error=str(exc))
            raise FetchFailureError("Catalog endpoint unavailable", url=self.url) from exc
        except ValueError as exc:
            logger.error("Catalog response is not valid JSON", url=self.url)
            raise FetchFailureError("Catalog response is not valid JSON", url=self.url) from exc
        return self._decode(payload)

    def _decode(self, payload: Any) -> List[ProductDTO]:
        if not isinstance(payload, list):
            logger.error(
                "Catalog response has unexpected shape",
                url=self.url,
                payload_type=type(payload).__name__,
            )
            raise FetchFailureError(
                "Catalog response must be a list of products", url=self.url
            )
        products = self.mapper.many_from_payload(payload)
        logger.info(
            "Catalog fetched",
            url=self.url,
            received=len(payload),
            accepted=len(products),
        )
        return products
