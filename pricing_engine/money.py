"""
Decimal helpers shared by every pricing stage.

Floats coming from JSON go through str() so 0.1 stays 0.1. Money is kept
to paise (2 places), weights to grams (3 places).
"""
import math
from decimal import Decimal, InvalidOperation, ROUND_CEILING, ROUND_HALF_UP

ZERO = Decimal("0")
HUNDRED = Decimal("100")
PAISE = Decimal("0.01")
GRAMS = Decimal("0.001")


def to_decimal(value, field: str = "value") -> Decimal:
    """Convert a JSON-ish number to Decimal. Raises ValueError for junk."""
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, bool) or value is None:
        raise ValueError(f"{field} must be a number")
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{field} must be a finite number")
        d = Decimal(str(value))
    else:
        try:
            d = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"{field} must be a number, got {value!r}") from None
    if not d.is_finite():
        raise ValueError(f"{field} must be a finite number")
    return d


def round2(value: Decimal) -> Decimal:
    return value.quantize(PAISE, rounding=ROUND_HALF_UP)


def round3(value: Decimal) -> Decimal:
    return value.quantize(GRAMS, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percent: Decimal) -> Decimal:
    return amount * percent / HUNDRED


def ceil_to_increment(value: Decimal, increment: Decimal) -> Decimal:
    """Smallest multiple of ``increment`` that is >= ``value``."""
    if value <= ZERO:
        return ZERO
    units = (value / increment).to_integral_value(rounding=ROUND_CEILING)
    return units * increment


def as_number(value: Decimal) -> float:
    """JSON-friendly number; Decimal is exact so float(str) is stable."""
    return float(value)
