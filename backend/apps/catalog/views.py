from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema

from apps.api.exceptions import storefront_error_response
from apps.api.schemas import ErrorResponseSerializer, SESSION_HEADER_PARAMETER
from apps.api.utils import storefront_response
from apps.api.views import PageSessionAPIView
from apps.common import get_logger
from apps.common.errors import FetchFailureError, NotFoundError
from apps.common.notifications import Notifier

from .commands import ProductFilterCommand
from .container import build_catalog_repository, build_catalog_service
from .mappers import ProductCardMapper
from .protocols import CatalogRepositoryProtocol
from .serializers import (
    ProductCardSerializer,
    ProductFilterSerializer,
    ProductGridSerializer,
    QuickViewResponseSerializer,
    QuickViewSerializer,
)

logger = get_logger(__name__).bind(component="catalog", layer="view")


def _grid_payload(cards):
    return {
        "products": ProductCardSerializer(cards, many=True).data,
        "count": len(cards),
    }


@extend_schema(tags=["Catalog"])
class ProductListView(PageSessionAPIView):
    service = build_catalog_service()
    repository: CatalogRepositoryProtocol = build_catalog_repository()
    card_mapper = ProductCardMapper()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="Product grid",
        description=(
            "Returns the page session's catalog after search, price cap and sort. "
            "The first request of a page session fetches the catalog."
        ),
        parameters=[
            SESSION_HEADER_PARAMETER,
            OpenApiParameter("q", str, description="Case-insensitive text search"),
            OpenApiParameter("maxPrice", str, description="Upper price bound"),
            OpenApiParameter("sort", str, enum=["price-low", "price-high", "name"]),
        ],
        responses={
            200: ProductGridSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            502: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        filters = ProductFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        notifier = Notifier(self.log.bind(session_id=session_id))
        store = self.repository.load(session_id)
        try:
            fetched = async_to_sync(self.service.ensure_loaded)(store, notifier)
        except FetchFailureError as exc:
            self.repository.save(session_id, store)
            return storefront_error_response(exc, notifier)
        if fetched:
            self.repository.save(session_id, store)
        command = ProductFilterCommand.from_raw(filters.validated_data)
        products = self.service.list_products(store, command)
        self.log.debug("Product grid served", session_id=session_id, count=len(products))
        return storefront_response(
            _grid_payload(self.card_mapper.many_to_cards(products)), notifier
        )


@extend_schema(tags=["Catalog"])
class CatalogRefreshView(PageSessionAPIView):
    service = build_catalog_service()
    repository: CatalogRepositoryProtocol = build_catalog_repository()
    card_mapper = ProductCardMapper()
    log = logger.bind(view="CatalogRefreshView")

    @extend_schema(
        operation_id="catalog_refresh",
        summary="Fetch the catalog",
        description="Fetches the remote catalog now. On failure the previous products are kept.",
        request=None,
        parameters=[SESSION_HEADER_PARAMETER],
        responses={
            200: ProductGridSerializer,
            502: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        notifier = Notifier(self.log.bind(session_id=session_id))
        store = self.repository.load(session_id)
        try:
            products = async_to_sync(self.service.refresh)(store, notifier)
        except FetchFailureError as exc:
            self.repository.save(session_id, store)
            return storefront_error_response(exc, notifier)
        self.repository.save(session_id, store)
        self.log.info("Catalog refreshed via API", session_id=session_id, count=len(products))
        return storefront_response(
            _grid_payload(self.card_mapper.many_to_cards(products)), notifier
        )


@extend_schema(tags=["Catalog"])
class ProductQuickView(PageSessionAPIView):
    service = build_catalog_service()
    repository: CatalogRepositoryProtocol = build_catalog_repository()
    card_mapper = ProductCardMapper()
    log = logger.bind(view="ProductQuickView")

    @extend_schema(
        operation_id="products_quick_view",
        summary="Quick view",
        parameters=[
            SESSION_HEADER_PARAMETER,
            OpenApiParameter("product_id", int, OpenApiParameter.PATH),
        ],
        responses={
            200: QuickViewResponseSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            502: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        notifier = Notifier(self.log.bind(session_id=session_id))
        store = self.repository.load(session_id)
        try:
            if async_to_sync(self.service.ensure_loaded)(store, notifier):
                self.repository.save(session_id, store)
            product = self.service.quick_view(store, product_id, notifier)
        except FetchFailureError as exc:
            self.repository.save(session_id, store)
            return storefront_error_response(exc, notifier)
        except NotFoundError as exc:
            return storefront_error_response(exc, notifier)
        view_model = self.card_mapper.to_quick_view(product)
        return storefront_response(
            {"product": QuickViewSerializer(view_model).data}, notifier
        )
