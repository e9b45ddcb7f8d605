"""
PricingEngine: one card + one shipment -> one itemized PricingResult.

Stages run in a fixed order (card, weight, zone, slab, surcharge, tax)
and the first failure aborts the simulation. Nothing partial is returned.

    subtotal     = slab charge (freight only)
    total_amount = subtotal + cod + fuel + rto + gst.total

Cost vs sell comparison is two independent simulations joined afterwards.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Optional, Tuple

from .errors import CardStateError, InvalidInput
from .models import Margin, PricingResult, RateCard, ShipmentParams
from .money import HUNDRED, ZERO, round2
from .providers import get_provider
from .slabs import SlabRater
from .surcharges import SurchargeCalculator
from .tax import TaxSplitter
from .weight import WeightResolver
from .zones import PincodeDirectory, ZoneResolver

log = logging.getLogger("pricing_studio.engine")


def check_card(card: Optional[RateCard], params: ShipmentParams) -> RateCard:
    if card is None:
        raise CardStateError("rate card not found", stage="card",
                             details={"cardId": params.card_id, "reason": "not_found"})
    if params.card_id and str(params.card_id) != card.id:
        raise CardStateError(f"shipment asks for card {params.card_id} but got {card.id}",
                             stage="card", details={"cardId": card.id})
    if not card.is_active:
        raise CardStateError(f"rate card {card.id} is {card.status}, not active",
                             stage="card", details={"cardId": card.id, "status": card.status})
    return card


class PricingEngine:

    def __init__(self, directory: Optional[PincodeDirectory] = None, lanes=None):
        self.directory = directory or PincodeDirectory()
        self.weights = WeightResolver()
        self.zones = ZoneResolver(self.directory, lanes)
        self.slabs = SlabRater()
        self.surcharges = SurchargeCalculator()
        self.tax = TaxSplitter()

    def _states(self, params: ShipmentParams) -> Tuple[str, str]:
        origin = params.origin_state or self.directory.state_of(params.from_pincode)
        dest = params.dest_state or self.directory.state_of(params.to_pincode)
        if not origin or not dest:
            missing = params.from_pincode if not origin else params.to_pincode
            raise InvalidInput(f"cannot resolve GST state for pincode {missing}",
                               stage="tax", details={"pincode": missing})
        return origin, dest

    def simulate(self, card: RateCard, params: ShipmentParams) -> PricingResult:
        card = check_card(card, params)
        provider_name = params.provider or card.provider
        provider = get_provider(provider_name)
        divisor = card.calculation.dim_divisor or provider.DIM_DIVISOR

        dims = params.dimensions
        if dims is None:
            raise InvalidInput("dimensions must include length, width and height",
                               stage="weight", details={"field": "dimensions"})
        weight = self.weights.resolve(params.weight, dims.length, dims.width, dims.height,
                                      divisor, card.calculation.weight_basis)
        zone = self.zones.resolve(params.from_pincode, params.to_pincode,
                                  provider_name, params.zone)
        slab = self.slabs.rate(card, zone.resolved_zone, weight.chargeable_weight)
        extras = self.surcharges.compute(card, params.payment_mode, params.order_value,
                                         slab.slab_charge, zone.resolved_zone)
        origin_state, dest_state = self._states(params)
        subtotal = slab.slab_charge
        gst = self.tax.split(subtotal, origin_state, dest_state, card.tax_rate_percent)

        total = subtotal + extras.cod_charge + extras.fuel_charge + extras.rto_charge + gst.total

        log.debug(("PRICE card=%s(%s) %s->%s zone=%s weight=%s slab=%s cod=%s fuel=%s "
                   "rto=%s gst=%s total=%s"),
                  card.id, card.card_type, params.from_pincode, params.to_pincode,
                  zone.resolved_zone, weight.chargeable_weight, subtotal, extras.cod_charge,
                  extras.fuel_charge, extras.rto_charge, gst.total, total)

        return PricingResult(
            card_id=card.id,
            card_type=card.card_type,
            total_amount=total,
            subtotal=subtotal,
            cod_charge=extras.cod_charge,
            fuel_charge=extras.fuel_charge,
            rto_charge=extras.rto_charge,
            gst_breakdown=gst,
            chargeable_weight=weight.chargeable_weight,
            slab=slab,
            weight=weight,
            zone=zone,
        )

    def compare(self, cost_card: RateCard, sell_card: RateCard,
                params: ShipmentParams) -> Tuple[PricingResult, PricingResult, Margin]:
        """Price one shipment on a cost and a sell card in parallel."""
        for card, expected in ((cost_card, "cost"), (sell_card, "sell")):
            if card is not None and card.card_type != expected:
                raise CardStateError(f"rate card {card.id} is a {card.card_type} card, expected {expected}",
                                     stage="card", details={"cardId": card.id})
        # each run checks its own card, so drop the single-card selector
        shared = replace(params, card_id=None)
        with ThreadPoolExecutor(max_workers=2) as pool:
            cost_future = pool.submit(self.simulate, cost_card, shared)
            sell_future = pool.submit(self.simulate, sell_card, shared)
            cost = cost_future.result()
            sell = sell_future.result()
        return cost, sell, margin(cost, sell)


def margin(cost: PricingResult, sell: PricingResult) -> Margin:
    amount = sell.total_amount - cost.total_amount
    if sell.total_amount == ZERO:
        return Margin(amount=amount, percent=None)
    return Margin(amount=amount, percent=round2(amount / sell.total_amount * HUNDRED))
