from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from django.utils.translation import gettext as _

from apps.common import get_logger
from apps.common.errors import EMPTY_CART, NotFoundError
from apps.common.notifications import Notifier

from .dtos import CartDTO, CheckoutDTO
from .models import Cart, CartLine
from .protocols import CartMapperProtocol, ProductLookupProtocol

logger = get_logger(__name__).bind(component="carts", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class CartService:
    """
    Mutation contract for a page session's Cart.

    The Cart and the catalog are handed in on every call; the service keeps no
    per-session state of its own.
    """

    def __init__(self, cart_mapper: CartMapperProtocol):
        self.cart_mapper = cart_mapper
        self.logger = logger.bind(service="CartService")

    def add_item(
        self,
        cart: Cart,
        catalog: ProductLookupProtocol,
        product_id: int,
        notifier: Notifier,
    ) -> CartLine:
        product = catalog.find_by_id(product_id)
        if product is None:
            self.logger.warning("Add to cart failed: product not in catalog", product_id=product_id)
            notifier.warning(_("Product not found"))
            raise NotFoundError(product_id, "catalog")
        line = cart.add(product)
        self.logger.info(
            "Product added to cart",
            product_id=product_id,
            quantity=line.quantity,
            item_count=cart.item_count(),
        )
        notifier.success(_("Added %(name)s to cart") % {"name": product.name})
        return line

    def set_quantity(
        self,
        cart: Cart,
        product_id: int,
        quantity: int,
        notifier: Notifier,
    ) -> Optional[CartLine]:
        if quantity <= 0:
            self.logger.debug(
                "Non-positive quantity treated as removal",
                product_id=product_id,
                quantity=quantity,
            )
            self.remove_item(cart, product_id, notifier)
            return None
        line = cart.set_quantity(product_id, quantity)
        if line is None:
            self.logger.warning("Quantity update failed: line not in cart", product_id=product_id)
            notifier.warning(_("Item not found in cart"))
            raise NotFoundError(product_id, "cart")
        self.logger.info(
            "Cart quantity updated",
            product_id=product_id,
            quantity=quantity,
            item_count=cart.item_count(),
        )
        notifier.info(_("Cart updated"))
        return line

    def remove_item(
        self, cart: Cart, product_id: int, notifier: Notifier
    ) -> Optional[CartLine]:
        removed = cart.remove(product_id)
        if removed is None:
            self.logger.debug("Remove ignored: line not in cart", product_id=product_id)
            return None
        self.logger.info(
            "Product removed from cart",
            product_id=product_id,
            item_count=cart.item_count(),
        )
        notifier.info(_("Removed %(name)s from cart") % {"name": removed.name})
        return removed

    def clear(self, cart: Cart, notifier: Optional[Notifier] = None) -> None:
        lines = len(cart)
        cart.clear()
        self.logger.info("Cart cleared", lines=lines)
        if notifier is not None and lines:
            notifier.info(_("Cart cleared"))

    def total(self, cart: Cart) -> Decimal:
        return cart.total()

    def item_count(self, cart: Cart) -> int:
        return cart.item_count()

    def render(self, cart: Cart) -> CartDTO:
        return self.cart_mapper.to_dto(cart)

    def checkout(
        self, cart: Cart, notifier: Notifier
    ) -> Tuple[Optional[CheckoutDTO], Optional[ErrorTuple]]:
        """
        Place the order and reset the cart in one step.

        No payment integration exists; checkout only summarises and clears.
        An empty cart is a validation failure and leaves the cart untouched.
        """
        if cart.is_empty():
            self.logger.info("Checkout blocked: cart is empty")
            notifier.warning(_("Your cart is empty"))
            return None, EMPTY_CART
        item_count = cart.item_count()
        total = cart.total()
        message = _("Order placed successfully!")
        summary = self.cart_mapper.to_checkout_dto(item_count, total, message)
        cart.clear()
        self.logger.info("Checkout completed", item_count=item_count, total=total)
        notifier.success(message)
        return summary, None
