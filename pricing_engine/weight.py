"""
Chargeable weight: the greater of actual and volumetric weight.
"""
import logging
from decimal import Decimal, InvalidOperation

from .errors import InvalidInput
from .models import WEIGHT_BASES, WeightResolution
from .money import ZERO, round3, to_decimal

log = logging.getLogger("pricing_studio.weight")

# upper bound for weight (kg) and each dimension (cm)
MAX_MEASURE = Decimal("100000")


def _positive(value, field: str) -> Decimal:
    try:
        d = to_decimal(value, field)
    except ValueError as e:
        raise InvalidInput(str(e), stage="weight", details={"field": field}) from None
    if d <= ZERO:
        raise InvalidInput(f"{field} must be greater than 0", stage="weight",
                           details={"field": field})
    if field != "dimDivisor" and d > MAX_MEASURE:
        raise InvalidInput(f"{field} must be at most {MAX_MEASURE}", stage="weight",
                           details={"field": field})
    return d


class WeightResolver:

    def resolve(self, actual_weight_kg, length, width, height, divisor, basis: str = "max") -> WeightResolution:
        actual = _positive(actual_weight_kg, "weight")
        l = _positive(length, "dimensions.length")
        w = _positive(width, "dimensions.width")
        h = _positive(height, "dimensions.height")
        div = _positive(divisor, "dimDivisor")
        if basis not in WEIGHT_BASES:
            raise InvalidInput(f"weight basis must be one of {', '.join(WEIGHT_BASES)}",
                               stage="weight", details={"field": "weightBasis"})

        actual = round3(actual)
        try:
            volumetric = round3(l * w * h / div)
        except InvalidOperation:
            raise InvalidInput("volumetric weight is out of range; check dimDivisor", stage="weight",
                               details={"field": "dimDivisor"}) from None

        if basis == "actual":
            chargeable, used = actual, "actual"
        elif basis == "volumetric":
            chargeable, used = volumetric, "volumetric"
        elif actual >= volumetric:
            # ties are billed on actual weight
            chargeable, used = actual, "actual"
        else:
            chargeable, used = volumetric, "volumetric"

        log.debug("WEIGHT actual=%s dims=%sx%sx%s divisor=%s volumetric=%s chargeable=%s basis=%s",
                  actual, l, w, h, div, volumetric, chargeable, used)
        return WeightResolution(
            actual_weight=actual,
            volumetric_weight=volumetric,
            chargeable_weight=chargeable,
            weight_basis_used=used,
            dim_divisor_used=div,
        )
