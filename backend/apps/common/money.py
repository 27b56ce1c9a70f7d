"""
Decimal helpers for catalog prices and cart totals.

Arithmetic stays at full precision; rounding to two places happens only when a
value is turned into something a person reads.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

MONEY_PRECISION = Decimal("0.01")

Number = Union[str, int, float, Decimal]


def to_decimal(value: Optional[Number]) -> Decimal:
    """
    Convert a JSON number or string to Decimal.

    Floats go through ``str`` so that ``10.1`` stays ``Decimal("10.1")``.
    Raises ``InvalidOperation`` for anything that is not numeric.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise InvalidOperation(f"Not a monetary value: {value!r}")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(str(value).strip())


def parse_decimal(value: Optional[Number]) -> Optional[Decimal]:
    """Lenient variant of ``to_decimal`` that returns None for bad input."""
    try:
        result = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not result.is_finite():
        return None
    return result


def round_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def format_money(value: Number, symbol: str = "") -> str:
    return f"{symbol}{round_money(value)}"
