import unittest
from decimal import Decimal
from unittest.mock import patch

from rest_framework.test import APIRequestFactory

from apps.api.validation import validate_request_context
from apps.catalog.dtos import ProductDTO
from apps.catalog.mappers import ProductCardMapper
from apps.catalog.repositories import CatalogRepository
from apps.catalog.services import CatalogService
from apps.catalog.views import CatalogRefreshView, ProductListView, ProductQuickView
from apps.common.errors import FetchFailureError
from apps.common.session import PageSessionCache

SESSION = "page-1"

PRODUCTS = [
    ProductDTO(product_id=1, name="Pen", price=Decimal("10.00"), stock_quantity=5),
    ProductDTO(product_id=2, name="Book", price=Decimal("25.50"), description="Hardcover"),
    ProductDTO(product_id=3, name="Mug", price=Decimal("8.00")),
]


class DictCache:
    def __init__(self):
        self.data = {}

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value, timeout=None):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


class FakeCatalogClient:
    def __init__(self, products=None, error=None):
        self.products = list(products or [])
        self.error = error
        self.calls = 0

    async def fetch_products(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.products)


class CatalogViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()
        self.repository = CatalogRepository(PageSessionCache(DictCache(), ttl=None))
        self.client = FakeCatalogClient(PRODUCTS)
        self.patches = []
        for view_cls in (ProductListView, CatalogRefreshView, ProductQuickView):
            self.patches.extend(
                [
                    patch.object(view_cls, "repository", self.repository),
                    patch.object(view_cls, "service", CatalogService(self.client)),
                    patch.object(view_cls, "card_mapper", ProductCardMapper(symbol="₹")),
                ]
            )
        for p in self.patches:
            p.start()

    def tearDown(self):
        for p in self.patches:
            p.stop()

    def dispatch(self, request, view_cls, **kwargs):
        pre_response = validate_request_context(request, view_cls, kwargs)
        if pre_response is not None:
            return pre_response
        view = view_cls.as_view()
        return view(request, **kwargs)

    def list_products(self, params=None):
        request = self.factory.get(
            "/api/catalog/products/", params or {}, HTTP_X_SESSION_ID=SESSION
        )
        return self.dispatch(request, ProductListView)

    def test_first_request_fetches_and_caches(self):
        response = self.list_products()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 3)
        card = response.data["products"][0]
        self.assertEqual(card["productId"], 1)
        self.assertEqual(card["priceDisplay"], "₹10.00")
        self.assertEqual(card["description"], "No description available")
        self.list_products()
        self.assertEqual(self.client.calls, 1)
        self.assertTrue(self.repository.load(SESSION).is_loaded)

    def test_filters_and_sort(self):
        response = self.list_products({"maxPrice": "20", "sort": "price-low"})
        self.assertEqual([c["productId"] for c in response.data["products"]], [3, 1])

    def test_search_matches_description(self):
        response = self.list_products({"q": "hardcover"})
        self.assertEqual([c["productId"] for c in response.data["products"]], [2])

    def test_invalid_sort_is_validation_error(self):
        response = self.list_products({"sort": "rating"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(self.client.calls, 0)

    def test_negative_max_price_is_validation_error(self):
        response = self.list_products({"maxPrice": "-1"})
        self.assertEqual(response.status_code, 400)

    def test_fetch_failure_returns_bad_gateway_once(self):
        self.client.error = FetchFailureError("Catalog endpoint unavailable")
        response = self.list_products()
        self.assertEqual(response.status_code, 502)
        error = response.data["error"]
        self.assertEqual(error["code"], "FETCH_FAILED")
        self.assertEqual(error["message"], "Failed to load products")
        self.assertEqual(
            error["extra"]["notifications"],
            [{"level": "error", "message": "Failed to load products"}],
        )
        # no automatic retry; the grid stays empty until an explicit refresh
        response = self.list_products()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 0)
        self.assertEqual(self.client.calls, 1)

    def test_refresh_after_failure(self):
        self.client.error = FetchFailureError("down")
        self.list_products()
        self.client.error = None
        request = self.factory.post("/api/catalog/refresh/", HTTP_X_SESSION_ID=SESSION)
        response = self.dispatch(request, CatalogRefreshView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 3)
        self.assertEqual(self.repository.load(SESSION).find_by_id(2).name, "Book")

    def test_failed_refresh_keeps_previous_catalog(self):
        self.list_products()
        self.client.error = FetchFailureError("down")
        request = self.factory.post("/api/catalog/refresh/", HTTP_X_SESSION_ID=SESSION)
        response = self.dispatch(request, CatalogRefreshView)
        self.assertEqual(response.status_code, 502)
        self.assertEqual(len(self.repository.load(SESSION)), 3)

    def test_quick_view(self):
        request = self.factory.get("/api/catalog/products/1/", HTTP_X_SESSION_ID=SESSION)
        response = self.dispatch(request, ProductQuickView, product_id=1)
        self.assertEqual(response.status_code, 200)
        product = response.data["product"]
        self.assertEqual(product["name"], "Pen")
        self.assertEqual(product["stockQuantity"], 5)
        self.assertEqual(product["stockLabel"], "In Stock: 5")

    def test_quick_view_unknown_product(self):
        request = self.factory.get("/api/catalog/products/99/", HTTP_X_SESSION_ID=SESSION)
        response = self.dispatch(request, ProductQuickView, product_id=99)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["message"], "Product not found")

    def test_missing_session_header(self):
        request = self.factory.get("/api/catalog/products/")
        response = self.dispatch(request, ProductListView)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["details"], {"header": "X-Session-ID"})
