from dataclasses import dataclass
from typing import Any, Dict, Optional


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value) if value is not None else None
    except (ValueError, TypeError):
        return None


@dataclass
class CartAddCommand:
    product_id: int

    @staticmethod
    def from_raw(raw: Dict[str, Any]):
        if not isinstance(raw, dict):
            return None
        pid = raw.get("productId")
        if pid is None:
            pid = raw.get("product_id")
        pid = _to_int(pid)
        if pid is None or pid < 0:
            return None
        return CartAddCommand(product_id=pid)


@dataclass
class CartQuantityCommand:
    product_id: int
    quantity: int

    @staticmethod
    def from_raw(product_id: int, raw: Dict[str, Any]):
        if not isinstance(raw, dict):
            raise ValueError("Payload must be a dict")
        quantity = _to_int(raw.get("quantity"))
        if quantity is None:
            return None
        return CartQuantityCommand(product_id=int(product_id), quantity=quantity)
