"""
Decimal helpers for cash amounts and prices.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from .exceptions import InvalidAmountError

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def to_decimal(value: Number, field: str = "amount") -> Decimal:
    """Convert to Decimal, rejecting bools, non-numeric and non-finite values"""
    if isinstance(value, bool):
        raise InvalidAmountError(f"{field} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() keeps floats like 0.1 from dragging binary noise in
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidAmountError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise InvalidAmountError(f"{field} must be finite, got {value!r}")
    return result


def to_positive_decimal(value: Number, field: str = "amount") -> Decimal:
    """Like to_decimal, but the result must be strictly positive"""
    result = to_decimal(value, field)
    if result <= 0:
        raise InvalidAmountError(f"{field} must be positive, got {value!r}")
    return result


def round_price(price: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up"""
    return price.quantize(CENT, rounding=ROUND_HALF_UP)
