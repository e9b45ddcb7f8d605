"""
Value objects for rate cards, shipments and pricing results.

Everything here is a frozen dataclass: a simulation reads a card and a
shipment and builds a fresh result, nothing is mutated in between.

Rate cards arrive as JSON documents using the same camelCase keys the
dashboard uses::

    {
      "id": "dlv-surface-sell", "cardType": "sell", "serviceId": "dlv-surface",
      "status": "active", "provider": "delhivery", "taxRatePercent": 18,
      "calculation": {"dimDivisor": 5000, "weightBasis": "max", "roundingUnitKg": 0.5},
      "cod": {"flatFee": 35, "percent": 2},
      "fuel": {"percent": 12},
      "rto": {"type": "percentage", "percent": 60},
      "zoneRules": [
        {"zone": "zoneA", "slabs": [{"maxKg": 0.5, "charge": 38}], "additionalPerKg": 32}
      ]
    }
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidInput
from .money import ZERO, as_number, to_decimal

CARD_TYPES = ("cost", "sell")
CARD_STATUSES = ("draft", "active", "archived")
WEIGHT_BASES = ("max", "actual", "volumetric")
PAYMENT_MODES = ("cod", "prepaid")
RTO_KINDS = ("flat", "percentage")

DEFAULT_TAX_RATE = Decimal("18")
DEFAULT_ROUNDING_UNIT_KG = Decimal("0.5")


# =============================================================================
# RATE CARD
# =============================================================================

@dataclass(frozen=True)
class WeightSlab:
    max_kg: Decimal
    charge: Decimal


@dataclass(frozen=True)
class CodRule:
    flat_fee: Decimal = ZERO
    percent: Decimal = ZERO
    max_charge: Optional[Decimal] = None


@dataclass(frozen=True)
class FuelRule:
    percent: Decimal = ZERO


@dataclass(frozen=True)
class RtoRule:
    kind: str = "flat"
    amount: Decimal = ZERO
    percent: Decimal = ZERO
    min_charge: Optional[Decimal] = None
    max_charge: Optional[Decimal] = None


@dataclass(frozen=True)
class ZoneRule:
    """Slab schedule for one zone. The first slab is the floor."""
    zone_key: str
    slabs: Tuple[WeightSlab, ...]
    additional_per_kg: Decimal = ZERO
    cod: Optional[CodRule] = None
    fuel: Optional[FuelRule] = None
    rto: Optional[RtoRule] = None

    @property
    def base_weight_kg(self) -> Decimal:
        return self.slabs[0].max_kg

    @property
    def base_charge(self) -> Decimal:
        return self.slabs[0].charge


@dataclass(frozen=True)
class Calculation:
    dim_divisor: Optional[Decimal] = None
    weight_basis: str = "max"
    rounding_unit_kg: Decimal = DEFAULT_ROUNDING_UNIT_KG


@dataclass(frozen=True)
class RateCard:
    id: str
    card_type: str
    service_id: str
    status: str
    zone_rules: Tuple[ZoneRule, ...]
    provider: str = ""
    name: str = ""
    calculation: Calculation = field(default_factory=Calculation)
    cod: Optional[CodRule] = None
    fuel: Optional[FuelRule] = None
    rto: Optional[RtoRule] = None
    tax_rate_percent: Decimal = DEFAULT_TAX_RATE

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cardType": self.card_type,
            "serviceId": self.service_id,
            "status": self.status,
            "provider": self.provider,
            "zones": [r.zone_key for r in self.zone_rules],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RateCard":
        return parse_rate_card(data)


def _card_error(card_id, message):
    return InvalidInput(f"rate card {card_id or '?'}: {message}", stage="card",
                        details={"cardId": card_id})


def _num(raw, card_id, name, default=None, positive=False, non_negative=True):
    if raw is None:
        return default
    try:
        value = to_decimal(raw, name)
    except ValueError as e:
        raise _card_error(card_id, str(e)) from None
    if positive and value <= ZERO:
        raise _card_error(card_id, f"{name} must be greater than 0")
    if non_negative and value < ZERO:
        raise _card_error(card_id, f"{name} must be 0 or higher")
    return value


def _cod_rule(raw, card_id) -> Optional[CodRule]:
    if not raw:
        return None
    return CodRule(
        flat_fee=_num(raw.get("flatFee"), card_id, "cod.flatFee", ZERO),
        percent=_num(raw.get("percent"), card_id, "cod.percent", ZERO),
        max_charge=_num(raw.get("maxCharge"), card_id, "cod.maxCharge"),
    )


def _fuel_rule(raw, card_id) -> Optional[FuelRule]:
    if not raw:
        return None
    return FuelRule(percent=_num(raw.get("percent"), card_id, "fuel.percent", ZERO))


def _rto_rule(raw, card_id) -> Optional[RtoRule]:
    if not raw:
        return None
    kind = str(raw.get("type") or "flat").strip().lower()
    if kind not in RTO_KINDS:
        raise _card_error(card_id, f"rto.type must be one of {', '.join(RTO_KINDS)}")
    return RtoRule(
        kind=kind,
        amount=_num(raw.get("amount"), card_id, "rto.amount", ZERO),
        percent=_num(raw.get("percent"), card_id, "rto.percent", ZERO),
        min_charge=_num(raw.get("minCharge"), card_id, "rto.minCharge"),
        max_charge=_num(raw.get("maxCharge"), card_id, "rto.maxCharge"),
    )


def _zone_rule(raw, card_id) -> ZoneRule:
    zone_key = str(raw.get("zone") or raw.get("zoneKey") or "").strip()
    if not zone_key:
        raise _card_error(card_id, "every zone rule needs a zone")
    slabs = []
    for s in raw.get("slabs") or []:
        slabs.append(WeightSlab(
            max_kg=_num(s.get("maxKg"), card_id, f"{zone_key}.slabs.maxKg", positive=True),
            charge=_num(s.get("charge"), card_id, f"{zone_key}.slabs.charge", ZERO),
        ))
    if not slabs:
        # single-tier shorthand: baseWeightKg / baseCharge
        if raw.get("baseWeightKg") is None:
            raise _card_error(card_id, f"zone {zone_key} has no slabs")
        slabs.append(WeightSlab(
            max_kg=_num(raw.get("baseWeightKg"), card_id, f"{zone_key}.baseWeightKg", positive=True),
            charge=_num(raw.get("baseCharge"), card_id, f"{zone_key}.baseCharge", ZERO),
        ))
    slabs.sort(key=lambda s: s.max_kg)
    if len({s.max_kg for s in slabs}) != len(slabs):
        raise _card_error(card_id, f"zone {zone_key} has duplicate slab upper bounds")
    return ZoneRule(
        zone_key=zone_key,
        slabs=tuple(slabs),
        additional_per_kg=_num(raw.get("additionalPerKg"), card_id,
                               f"{zone_key}.additionalPerKg", ZERO),
        cod=_cod_rule(raw.get("cod"), card_id),
        fuel=_fuel_rule(raw.get("fuel"), card_id),
        rto=_rto_rule(raw.get("rto"), card_id),
    )


def parse_rate_card(data: Dict[str, Any]) -> RateCard:
    if not isinstance(data, dict):
        raise _card_error(None, "card must be an object")
    card_id = str(data.get("id") or "").strip()
    if not card_id:
        raise _card_error(None, "id is required")
    card_type = str(data.get("cardType") or "").strip().lower()
    if card_type not in CARD_TYPES:
        raise _card_error(card_id, "cardType must be cost or sell")
    status = str(data.get("status") or "draft").strip().lower()
    if status not in CARD_STATUSES:
        raise _card_error(card_id, f"status must be one of {', '.join(CARD_STATUSES)}")

    calc_raw = data.get("calculation") or {}
    basis = str(calc_raw.get("weightBasis") or "max").strip().lower()
    if basis not in WEIGHT_BASES:
        raise _card_error(card_id, f"weightBasis must be one of {', '.join(WEIGHT_BASES)}")
    calculation = Calculation(
        dim_divisor=_num(calc_raw.get("dimDivisor"), card_id, "dimDivisor", positive=True),
        weight_basis=basis,
        rounding_unit_kg=_num(calc_raw.get("roundingUnitKg"), card_id, "roundingUnitKg",
                              DEFAULT_ROUNDING_UNIT_KG, positive=True),
    )

    rules = tuple(_zone_rule(r, card_id) for r in data.get("zoneRules") or [])
    if not rules:
        raise _card_error(card_id, "zoneRules must contain at least one zone rule")

    return RateCard(
        id=card_id,
        card_type=card_type,
        service_id=str(data.get("serviceId") or "").strip(),
        status=status,
        zone_rules=rules,
        provider=str(data.get("provider") or "").strip(),
        name=str(data.get("name") or "").strip(),
        calculation=calculation,
        cod=_cod_rule(data.get("cod"), card_id),
        fuel=_fuel_rule(data.get("fuel"), card_id),
        rto=_rto_rule(data.get("rto"), card_id),
        tax_rate_percent=_num(data.get("taxRatePercent"), card_id, "taxRatePercent",
                              DEFAULT_TAX_RATE),
    )


# =============================================================================
# SHIPMENT
# =============================================================================

@dataclass(frozen=True)
class PincodeRecord:
    pincode: str
    city: str
    state: str


@dataclass(frozen=True)
class Dimensions:
    length: Any
    width: Any
    height: Any


@dataclass(frozen=True)
class ShipmentParams:
    """One simulation request. Numbers are validated by the stage that uses them."""
    weight: Any
    dimensions: Dimensions
    from_pincode: str
    to_pincode: str
    payment_mode: str
    order_value: Any
    provider: str = ""
    zone: Optional[str] = None
    card_id: Optional[str] = None
    origin_state: Optional[str] = None
    dest_state: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShipmentParams":
        if not isinstance(data, dict):
            raise InvalidInput("request body must be an object", stage="input")
        dims = data.get("dimensions")
        if not isinstance(dims, dict):
            raise InvalidInput("dimensions must include length, width and height",
                               stage="weight", details={"field": "dimensions"})
        return cls(
            weight=data.get("weight"),
            dimensions=Dimensions(dims.get("length"), dims.get("width"), dims.get("height")),
            from_pincode=str(data.get("fromPincode") or "").strip(),
            to_pincode=str(data.get("toPincode") or "").strip(),
            payment_mode=str(data.get("paymentMode") or "").strip().lower(),
            order_value=data.get("orderValue", 0),
            provider=str(data.get("provider") or "").strip(),
            zone=data.get("zone"),
            card_id=str(data.get("cardId") or "").strip() or None,
            origin_state=data.get("originState"),
            dest_state=data.get("destState"),
        )


# =============================================================================
# RESULT
# =============================================================================

@dataclass(frozen=True)
class GstBreakdown:
    total: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    from_state_code: str = ""
    to_state_code: str = ""
    taxable_amount: Decimal = ZERO
    rate_percent: Decimal = ZERO

    @property
    def intra_state(self) -> bool:
        return bool(self.from_state_code) and self.from_state_code == self.to_state_code

    def to_dict(self):
        return {
            "total": as_number(self.total),
            "cgst": as_number(self.cgst),
            "sgst": as_number(self.sgst),
            "igst": as_number(self.igst),
        }


@dataclass(frozen=True)
class WeightResolution:
    actual_weight: Decimal
    volumetric_weight: Decimal
    chargeable_weight: Decimal
    weight_basis_used: str
    dim_divisor_used: Decimal


@dataclass(frozen=True)
class ZoneResolution:
    resolved_zone: str
    source: str


@dataclass(frozen=True)
class SlabCharge:
    slab_charge: Decimal
    rounded_extra_weight_kg: Decimal
    additional_per_kg: Decimal
    base_charge: Decimal = ZERO
    weight_charge: Decimal = ZERO
    extra_weight_kg: Decimal = ZERO
    rounding_unit_kg: Decimal = ZERO
    matched_zone_rule: str = ""
    max_kg: Decimal = ZERO
    beyond_max_slab: bool = False


@dataclass(frozen=True)
class Surcharges:
    cod_charge: Decimal = ZERO
    fuel_charge: Decimal = ZERO
    rto_charge: Decimal = ZERO


@dataclass(frozen=True)
class PricingResult:
    card_id: str
    card_type: str
    total_amount: Decimal
    subtotal: Decimal
    cod_charge: Decimal
    fuel_charge: Decimal
    rto_charge: Decimal
    gst_breakdown: GstBreakdown
    chargeable_weight: Decimal
    slab: SlabCharge
    weight: WeightResolution
    zone: ZoneResolution

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cardId": self.card_id,
            "cardType": self.card_type,
            "totalAmount": as_number(self.total_amount),
            "chargeableWeight": as_number(self.chargeable_weight),
            "subtotal": as_number(self.subtotal),
            "codCharge": as_number(self.cod_charge),
            "fuelCharge": as_number(self.fuel_charge),
            "rtoCharge": as_number(self.rto_charge),
            "gstBreakdown": self.gst_breakdown.to_dict(),
            "breakdown": {
                "slab": {
                    "slabCharge": as_number(self.slab.slab_charge),
                    "roundedExtraWeightKg": as_number(self.slab.rounded_extra_weight_kg),
                    "additionalPerKg": as_number(self.slab.additional_per_kg),
                    "baseCharge": as_number(self.slab.base_charge),
                    "weightCharge": as_number(self.slab.weight_charge),
                    "extraWeightKg": as_number(self.slab.extra_weight_kg),
                    "roundingUnitKg": as_number(self.slab.rounding_unit_kg),
                    "maxKg": as_number(self.slab.max_kg),
                    "beyondMaxSlab": self.slab.beyond_max_slab,
                },
                "weight": {
                    "actualWeight": as_number(self.weight.actual_weight),
                    "volumetricWeight": as_number(self.weight.volumetric_weight),
                    "weightBasisUsed": self.weight.weight_basis_used,
                    "dimDivisorUsed": as_number(self.weight.dim_divisor_used),
                },
                "gst": {
                    "fromStateCode": self.gst_breakdown.from_state_code,
                    "toStateCode": self.gst_breakdown.to_state_code,
                    "intraState": self.gst_breakdown.intra_state,
                    "taxableAmount": as_number(self.gst_breakdown.taxable_amount),
                    "ratePercent": as_number(self.gst_breakdown.rate_percent),
                },
                "zone": {
                    "resolvedZone": self.zone.resolved_zone,
                    "source": self.zone.source,
                    "matchedZoneRule": self.slab.matched_zone_rule,
                },
            },
        }


@dataclass(frozen=True)
class Margin:
    amount: Decimal
    percent: Optional[Decimal]

    def to_dict(self):
        return {
            "marginAmount": as_number(self.amount),
            "marginPercent": None if self.percent is None else as_number(self.percent),
        }
