from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from apps.common.money import parse_decimal

SORT_PRICE_LOW = "price-low"
SORT_PRICE_HIGH = "price-high"
SORT_NAME = "name"
SORT_CHOICES = (SORT_PRICE_LOW, SORT_PRICE_HIGH, SORT_NAME)


@dataclass
class ProductFilterCommand:
    query: str = ""
    max_price: Optional[Decimal] = None
    sort: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.query and self.max_price is None and self.sort is None

    @staticmethod
    def from_raw(payload: Optional[Dict[str, Any]]):
        data = dict(payload or {})
        query = str(data.get("q") or data.get("query") or "").strip()
        raw_price = data.get("maxPrice")
        if raw_price is None:
            raw_price = data.get("max_price")
        max_price = parse_decimal(raw_price) if raw_price not in (None, "") else None
        if max_price is not None and max_price < 0:
            max_price = None
        sort = data.get("sort")
        sort = sort if sort in SORT_CHOICES else None
        return ProductFilterCommand(query=query, max_price=max_price, sort=sort)
