from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ProductDTO:
    product_id: int
    name: str
    price: Decimal
    description: Optional[str] = None
    image_url: Optional[str] = None
    stock_quantity: int = 0


@dataclass
class ProductCardDTO:
    product_id: int
    name: str
    price: str
    price_display: str
    description: str
    image_url: str


@dataclass
class QuickViewDTO:
    product_id: int
    name: str
    price: str
    price_display: str
    description: str
    image_url: str
    stock_quantity: int
    stock_label: str


"""DTO dataclasses only. Mapping and rendering logic lives in mappers.py."""
