from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema

from apps.api.exceptions import storefront_error_response
from apps.api.schemas import ErrorResponseSerializer, SESSION_HEADER_PARAMETER
from apps.api.utils import error_response, storefront_response
from apps.api.views import PageSessionAPIView
from apps.catalog.container import build_catalog_repository
from apps.catalog.protocols import CatalogRepositoryProtocol
from apps.common import get_logger
from apps.common.errors import NotFoundError
from apps.common.notifications import Notifier

from .commands import CartAddCommand, CartQuantityCommand
from .container import build_cart_repository, build_cart_service
from .protocols import CartRepositoryProtocol
from .serializers import (
    CartAddSerializer,
    CartQuantitySerializer,
    CartReadSerializer,
    CartResponseSerializer,
    CheckoutResponseSerializer,
    CheckoutSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

PRODUCT_ID_PARAMETER = OpenApiParameter("product_id", int, OpenApiParameter.PATH)

ERROR_RESPONSES = {
    400: OpenApiResponse(response=ErrorResponseSerializer),
    404: OpenApiResponse(response=ErrorResponseSerializer),
    503: OpenApiResponse(response=ErrorResponseSerializer),
}


class CartBaseView(PageSessionAPIView):
    service = build_cart_service()
    carts: CartRepositoryProtocol = build_cart_repository()

    def cart_response(self, cart, notifier, **extra):
        payload = {"cart": CartReadSerializer(self.service.render(cart)).data}
        payload.update(extra)
        return storefront_response(payload, notifier)


@extend_schema(tags=["Cart"])
class CartView(CartBaseView):
    log = logger.bind(view="CartView")

    @extend_schema(
        summary="Cart panel",
        description="Lines, badge count and total for the page session's cart.",
        parameters=[SESSION_HEADER_PARAMETER],
        responses={200: CartResponseSerializer},
    )
    def get(self, request):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        cart = self.carts.load(session_id)
        self.log.debug("Cart served", session_id=session_id, item_count=cart.item_count())
        return self.cart_response(cart, Notifier(self.log.bind(session_id=session_id)))

    @extend_schema(
        summary="Clear cart",
        parameters=[SESSION_HEADER_PARAMETER],
        responses={200: CartResponseSerializer},
    )
    def delete(self, request):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        notifier = Notifier(self.log.bind(session_id=session_id))
        with self.carts.lock(session_id):
            cart = self.carts.load(session_id)
            self.service.clear(cart, notifier)
            self.carts.save(session_id, cart)
        return self.cart_response(cart, notifier)


@extend_schema(tags=["Cart"])
class CartItemsView(CartBaseView):
    catalog: CatalogRepositoryProtocol = build_catalog_repository()
    log = logger.bind(view="CartItemsView")

    @extend_schema(
        summary="Add to cart",
        description=(
            "Adds one unit of a catalog product. A product already in the cart has "
            "its quantity incremented; otherwise a new line is appended."
        ),
        parameters=[SESSION_HEADER_PARAMETER],
        request=CartAddSerializer,
        responses={200: CartResponseSerializer, **ERROR_RESPONSES},
    )
    def post(self, request):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CartAddCommand.from_raw(serializer.validated_data)
        notifier = Notifier(self.log.bind(session_id=session_id))
        with self.carts.lock(session_id):
            cart = self.carts.load(session_id)
            store = self.catalog.load(session_id)
            try:
                self.service.add_item(cart, store, command.product_id, notifier)
            except NotFoundError as exc:
                return storefront_error_response(exc, notifier)
            self.carts.save(session_id, cart)
        return self.cart_response(cart, notifier)


@extend_schema(tags=["Cart"])
class CartItemDetailView(CartBaseView):
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Set line quantity",
        description=(
            "Overwrites the quantity of an existing line. A quantity of zero or less "
            "removes the line. Updating a product that is not in the cart is a 404."
        ),
        parameters=[SESSION_HEADER_PARAMETER, PRODUCT_ID_PARAMETER],
        request=CartQuantitySerializer,
        responses={200: CartResponseSerializer, **ERROR_RESPONSES},
    )
    def put(self, request, product_id: int):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        serializer = CartQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CartQuantityCommand.from_raw(product_id, serializer.validated_data)
        if command is None:
            return error_response("VALIDATION_ERROR", "quantity must be an integer")
        notifier = Notifier(self.log.bind(session_id=session_id))
        with self.carts.lock(session_id):
            cart = self.carts.load(session_id)
            try:
                self.service.set_quantity(cart, command.product_id, command.quantity, notifier)
            except NotFoundError as exc:
                return storefront_error_response(exc, notifier)
            self.carts.save(session_id, cart)
        return self.cart_response(cart, notifier)

    @extend_schema(
        summary="Set line quantity (partial)",
        description="Same semantics as PUT.",
        parameters=[SESSION_HEADER_PARAMETER, PRODUCT_ID_PARAMETER],
        request=CartQuantitySerializer,
        responses={200: CartResponseSerializer, **ERROR_RESPONSES},
    )
    def patch(self, request, product_id: int):
        return self.put(request, product_id)

    @extend_schema(
        summary="Remove line",
        description="Removes the line if present; removing an absent product is not an error.",
        parameters=[SESSION_HEADER_PARAMETER, PRODUCT_ID_PARAMETER],
        responses={200: CartResponseSerializer},
    )
    def delete(self, request, product_id: int):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        notifier = Notifier(self.log.bind(session_id=session_id))
        with self.carts.lock(session_id):
            cart = self.carts.load(session_id)
            if self.service.remove_item(cart, product_id, notifier) is not None:
                self.carts.save(session_id, cart)
        return self.cart_response(cart, notifier)


@extend_schema(tags=["Cart"])
class CartCheckoutView(CartBaseView):
    log = logger.bind(view="CartCheckoutView")

    @extend_schema(
        summary="Checkout",
        description=(
            "Places the order and empties the cart. Payment is not integrated. "
            "An empty cart is rejected with EMPTY_CART and left unchanged."
        ),
        request=None,
        parameters=[SESSION_HEADER_PARAMETER],
        responses={
            200: CheckoutResponseSerializer,
            400: ERROR_RESPONSES[400],
            503: ERROR_RESPONSES[503],
        },
    )
    def post(self, request):
        session_id, error = self.resolve_session(request)
        if error:
            return error
        notifier = Notifier(self.log.bind(session_id=session_id))
        with self.carts.lock(session_id):
            cart = self.carts.load(session_id)
            order, failure = self.service.checkout(cart, notifier)
            if failure:
                code, message, details = failure
                return error_response(code, message, details, notifier=notifier)
            self.carts.save(session_id, cart)
        self.log.info("Order placed via API", session_id=session_id, item_count=order.item_count)
        return self.cart_response(cart, notifier, order=CheckoutSerializer(order).data)
