from dataclasses import dataclass, field
from typing import List


@dataclass
class CartLineDTO:
    product_id: int
    name: str
    price: str
    price_display: str
    quantity: int
    line_total: str
    line_total_display: str
    image_url: str
    can_decrement: bool


@dataclass
class CartDTO:
    lines: List[CartLineDTO] = field(default_factory=list)
    item_count: int = 0
    total: str = "0.00"
    total_display: str = ""
    is_empty: bool = True
    empty_message: str = ""


@dataclass
class CheckoutDTO:
    item_count: int
    total: str
    total_display: str
    message: str


"""DTO dataclasses only. Rendering lives in mappers.py."""
