from decimal import Decimal
from typing import Iterable, List, Optional

from django.utils.translation import gettext as _

from apps.catalog.mappers import currency_symbol
from apps.common.money import format_money, round_money

from .dtos import CartDTO, CartLineDTO, CheckoutDTO
from .models import Cart, CartLine

LINE_IMAGE_PLACEHOLDER = "https://placehold.co/100x100?text=No+Image"


class CartLineMapper:
    def __init__(self, symbol: Optional[str] = None) -> None:
        self._symbol = symbol

    @property
    def symbol(self) -> str:
        return self._symbol if self._symbol is not None else currency_symbol()

    def to_dto(self, line: CartLine) -> CartLineDTO:
        return CartLineDTO(
            product_id=line.product_id,
            name=line.name,
            price=str(round_money(line.price)),
            price_display=format_money(line.price, self.symbol),
            quantity=line.quantity,
            line_total=str(round_money(line.subtotal)),
            line_total_display=format_money(line.subtotal, self.symbol),
            image_url=line.image_url or LINE_IMAGE_PLACEHOLDER,
            can_decrement=line.quantity > 1,
        )

    def many_to_dto(self, lines: Iterable[CartLine]) -> List[CartLineDTO]:
        return [self.to_dto(line) for line in lines]


class CartMapper:
    def __init__(self, line_mapper: Optional[CartLineMapper] = None) -> None:
        self.line_mapper = line_mapper or CartLineMapper()

    def to_dto(self, cart: Cart) -> CartDTO:
        total: Decimal = cart.total()
        return CartDTO(
            lines=self.line_mapper.many_to_dto(cart.lines()),
            item_count=cart.item_count(),
            total=str(round_money(total)),
            total_display=format_money(total, self.line_mapper.symbol),
            is_empty=cart.is_empty(),
            empty_message=_("Your cart is empty") if cart.is_empty() else "",
        )

    def to_checkout_dto(self, item_count: int, total: Decimal, message: str) -> CheckoutDTO:
        return CheckoutDTO(
            item_count=item_count,
            total=str(round_money(total)),
            total_display=format_money(total, self.line_mapper.symbol),
            message=message,
        )


_default_mapper = CartMapper()


def render_cart(cart: Cart, mapper: Optional[CartMapper] = None) -> CartDTO:
    """The one cart renderer: Cart -> cart panel view-model."""
    return (mapper or _default_mapper).to_dto(cart)
