"""
Weight-slab rating.

Within the schedule the first slab whose upper bound covers the chargeable
weight sets the charge; the first slab is the floor. Past the last slab
the extra weight is rounded UP to the card's increment and billed at the
zone's additional per-kg rate. Couriers bill whole increments, so the
rounding never goes down.
"""
import logging
from decimal import Decimal, InvalidOperation

from .errors import InvalidInput, ZoneNotRated
from .models import RateCard, SlabCharge, ZoneRule
from .money import ZERO, ceil_to_increment, round2, round3
from .zones import normalize_zone_key

log = logging.getLogger("pricing_studio.slabs")


def find_zone_rule(card: RateCard, zone_code: str) -> ZoneRule:
    wanted = normalize_zone_key(zone_code)
    catch_all = None
    for rule in card.zone_rules:
        key = normalize_zone_key(rule.zone_key)
        if key == wanted:
            return rule
        if key == "all" and catch_all is None:
            catch_all = rule
    if catch_all is not None:
        return catch_all
    raise ZoneNotRated(
        f"rate card {card.id} has no pricing for zone {zone_code}",
        stage="slab",
        details={"cardId": card.id, "zone": zone_code,
                 "ratedZones": [r.zone_key for r in card.zone_rules]},
    )


class SlabRater:

    def rate(self, card: RateCard, zone_code: str, chargeable_weight_kg: Decimal) -> SlabCharge:
        rule = find_zone_rule(card, zone_code)
        increment = card.calculation.rounding_unit_kg
        additional = rule.additional_per_kg

        for slab in rule.slabs:
            if chargeable_weight_kg <= slab.max_kg:
                log.debug("SLAB card=%s zone=%s rule=%s weight=%s slab<=%s charge=%s",
                          card.id, zone_code, rule.zone_key, chargeable_weight_kg,
                          slab.max_kg, slab.charge)
                return SlabCharge(
                    slab_charge=round2(slab.charge),
                    rounded_extra_weight_kg=ZERO,
                    additional_per_kg=round2(additional),
                    base_charge=round2(slab.charge),
                    weight_charge=ZERO,
                    extra_weight_kg=ZERO,
                    rounding_unit_kg=increment,
                    matched_zone_rule=rule.zone_key,
                    max_kg=slab.max_kg,
                )

        top = rule.slabs[-1]
        extra = chargeable_weight_kg - top.max_kg
        rounded_extra = ceil_to_increment(extra, increment)
        try:
            weight_charge = round2(rounded_extra * additional)
        except InvalidOperation:
            raise InvalidInput(f"chargeable weight {chargeable_weight_kg} kg is out of range for card {card.id}",
                               stage="slab", details={"field": "chargeableWeight"}) from None
        slab_charge = round2(top.charge) + weight_charge

        log.debug("SLAB card=%s zone=%s rule=%s weight=%s top<=%s extra=%s rounded=%s "
                  "per_kg=%s base=%s weight_charge=%s",
                  card.id, zone_code, rule.zone_key, chargeable_weight_kg, top.max_kg,
                  extra, rounded_extra, additional, top.charge, weight_charge)
        return SlabCharge(
            slab_charge=slab_charge,
            rounded_extra_weight_kg=round3(rounded_extra),
            additional_per_kg=round2(additional),
            base_charge=round2(top.charge),
            weight_charge=weight_charge,
            extra_weight_kg=round3(extra),
            rounding_unit_kg=increment,
            matched_zone_rule=rule.zone_key,
            max_kg=top.max_kg,
            beyond_max_slab=True,
        )
