from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, Optional, Tuple

from apps.catalog.dtos import ProductDTO


@dataclass
class CartLine:
    """Snapshot of a product's display fields taken when it was first added."""

    product_id: int
    name: str
    price: Decimal
    quantity: int = 1
    description: Optional[str] = None
    image_url: Optional[str] = None
    stock_quantity: int = 0

    @classmethod
    def from_product(cls, product: ProductDTO, quantity: int = 1) -> "CartLine":
        return cls(
            product_id=product.product_id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            description=product.description,
            image_url=product.image_url,
            stock_quantity=product.stock_quantity,
        )

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class Cart:
    """
    Session-scoped shopping cart.

    Lines keep the order in which products were first added. There is at most
    one line per product id and every stored line has quantity >= 1.
    """

    def __init__(self) -> None:
        self._lines: Dict[int, CartLine] = {}

    def get(self, product_id: int) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def add(self, product: ProductDTO) -> CartLine:
        line = self._lines.get(product.product_id)
        if line is not None:
            line.quantity += 1
            return line
        line = CartLine.from_product(product)
        self._lines[product.product_id] = line
        return line

    def set_quantity(self, product_id: int, quantity: int) -> Optional[CartLine]:
        """
        Overwrite a line's quantity. Returns the updated line, or None when the
        line is absent. A quantity <= 0 removes the line and returns it.
        """
        if quantity <= 0:
            return self.remove(product_id)
        line = self._lines.get(product_id)
        if line is None:
            return None
        line.quantity = quantity
        return line

    def remove(self, product_id: int) -> Optional[CartLine]:
        return self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(replace(line) for line in self._lines.values())

    def total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines.values()), Decimal("0"))

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self.lines())

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines
