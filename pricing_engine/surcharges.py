"""
COD fee, fuel surcharge and RTO risk fee.

Rules set on a zone override the card-level ones. A rule that is absent
on both yields 0.
"""
import logging
from decimal import Decimal
from typing import Optional

from .errors import InvalidInput
from .models import PAYMENT_MODES, CodRule, RateCard, RtoRule, Surcharges
from .money import ZERO, percent_of, round2, to_decimal
from .slabs import find_zone_rule

log = logging.getLogger("pricing_studio.surcharges")

MAX_ORDER_VALUE = Decimal("1000000000")


def cod_fee(rule: Optional[CodRule], order_value: Decimal) -> Decimal:
    """Greater of the flat floor and the percentage, capped at max_charge."""
    if rule is None:
        return ZERO
    fee = max(rule.flat_fee, percent_of(order_value, rule.percent))
    if rule.max_charge is not None and rule.max_charge > ZERO:
        fee = min(fee, rule.max_charge)
    return round2(fee)


def rto_fee(rule: Optional[RtoRule], slab_charge: Decimal) -> Decimal:
    if rule is None:
        return ZERO
    if rule.kind == "flat":
        return round2(rule.amount)
    fee = percent_of(slab_charge, rule.percent)
    if rule.min_charge is not None:
        fee = max(fee, rule.min_charge)
    if rule.max_charge is not None and rule.max_charge > ZERO:
        fee = min(fee, rule.max_charge)
    return round2(fee)


class SurchargeCalculator:

    def compute(self, card: RateCard, payment_mode: str, order_value, slab_charge: Decimal,
                zone_code: Optional[str] = None) -> Surcharges:
        mode = str(payment_mode or "").strip().lower()
        if mode not in PAYMENT_MODES:
            raise InvalidInput("paymentMode must be cod or prepaid", stage="surcharge",
                               details={"field": "paymentMode", "value": payment_mode})
        try:
            value = to_decimal(order_value, "orderValue")
        except ValueError as e:
            raise InvalidInput(str(e), stage="surcharge", details={"field": "orderValue"}) from None
        if value < ZERO:
            raise InvalidInput("orderValue must be 0 or higher", stage="surcharge",
                               details={"field": "orderValue"})
        if value > MAX_ORDER_VALUE:
            raise InvalidInput(f"orderValue must be at most {MAX_ORDER_VALUE}", stage="surcharge",
                               details={"field": "orderValue"})

        cod_rule, fuel_rule, rto_rule = card.cod, card.fuel, card.rto
        if zone_code is not None:
            zone_rule = find_zone_rule(card, zone_code)
            cod_rule = zone_rule.cod or cod_rule
            fuel_rule = zone_rule.fuel or fuel_rule
            rto_rule = zone_rule.rto or rto_rule

        cod = cod_fee(cod_rule, value) if mode == "cod" else ZERO
        # fuel on freight only, never on COD or tax
        fuel = round2(percent_of(slab_charge, fuel_rule.percent)) if fuel_rule else ZERO
        rto = rto_fee(rto_rule, slab_charge)

        log.debug("SURCHARGE card=%s mode=%s order_value=%s freight=%s cod=%s fuel=%s rto=%s",
                  card.id, mode, value, slab_charge, cod, fuel, rto)
        return Surcharges(cod_charge=cod, fuel_charge=fuel, rto_charge=rto)
