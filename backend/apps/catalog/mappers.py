from typing import Any, Iterable, List, Optional

from django.conf import settings
from django.utils.translation import gettext as _

from apps.common import get_logger
from apps.common.money import format_money, parse_decimal, round_money

from .dtos import ProductCardDTO, ProductDTO, QuickViewDTO

logger = get_logger(__name__).bind(component="catalog", layer="mapper")

CARD_IMAGE_PLACEHOLDER = "https://placehold.co/400x320?text=No+Image"
DEFAULT_CURRENCY_SYMBOL = "₹"


def currency_symbol() -> str:
    return getattr(settings, "CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _non_negative_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (ValueError, TypeError):
        return None
    if isinstance(value, float) and number != value:
        return None
    return number if number >= 0 else None


class ProductMapper:
    """Maps the remote catalog payload (camelCase JSON) into ProductDTOs."""

    @staticmethod
    def from_payload(raw: Any) -> Optional[ProductDTO]:
        if not isinstance(raw, dict):
            return None
        product_id = _non_negative_int(raw.get("productId"))
        name = _optional_text(raw.get("name"))
        price = parse_decimal(raw.get("price"))
        stock = _non_negative_int(raw.get("stockQuantity", 0))
        if product_id is None or name is None:
            return None
        if price is None or price < 0 or stock is None:
            return None
        return ProductDTO(
            product_id=product_id,
            name=name,
            price=price,
            description=_optional_text(raw.get("description")),
            image_url=_optional_text(raw.get("imageUrl")),
            stock_quantity=stock,
        )

    @staticmethod
    def many_from_payload(payload: Iterable[Any]) -> List[ProductDTO]:
        products: List[ProductDTO] = []
        seen = set()
        for index, raw in enumerate(payload):
            dto = ProductMapper.from_payload(raw)
            if dto is None:
                logger.warning("Skipping malformed catalog entry", index=index)
                continue
            if dto.product_id in seen:
                logger.warning(
                    "Skipping duplicate catalog entry",
                    index=index,
                    product_id=dto.product_id,
                )
                continue
            seen.add(dto.product_id)
            products.append(dto)
        return products


class ProductCardMapper:
    """Builds the grid card and quick-view panel view-models."""

    def __init__(self, symbol: Optional[str] = None) -> None:
        self._symbol = symbol

    @property
    def symbol(self) -> str:
        return self._symbol if self._symbol is not None else currency_symbol()

    def to_card(self, product: ProductDTO) -> ProductCardDTO:
        return ProductCardDTO(
            product_id=product.product_id,
            name=product.name,
            price=str(round_money(product.price)),
            price_display=format_money(product.price, self.symbol),
            description=product.description or _("No description available"),
            image_url=product.image_url or CARD_IMAGE_PLACEHOLDER,
        )

    def many_to_cards(self, products: Iterable[ProductDTO]) -> List[ProductCardDTO]:
        return [self.to_card(p) for p in products]

    def to_quick_view(self, product: ProductDTO) -> QuickViewDTO:
        card = self.to_card(product)
        return QuickViewDTO(
            product_id=card.product_id,
            name=card.name,
            price=card.price,
            price_display=card.price_display,
            description=card.description,
            image_url=card.image_url,
            stock_quantity=product.stock_quantity,
            stock_label=_("In Stock: %(count)s") % {"count": product.stock_quantity},
        )
