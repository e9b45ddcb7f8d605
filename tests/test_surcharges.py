"""
Unit Tests for COD, fuel and RTO surcharges.
"""

from decimal import Decimal

import pytest

from conftest import make_card
from pricing_engine import RateCard
from pricing_engine.errors import InvalidInput
from pricing_engine.models import CodRule, RtoRule
from pricing_engine.surcharges import SurchargeCalculator, cod_fee, rto_fee

FREIGHT = Decimal("40.00")


@pytest.fixture
def calc():
    return SurchargeCalculator()


@pytest.fixture
def cod_card():
    return RateCard.from_dict(make_card(cod={"flatFee": 30, "percent": 2, "maxCharge": 500}))


# =============================================================================
# COD
# =============================================================================

class TestCodFee:

    def test_prepaid_pays_no_cod(self, calc, cod_card):
        s = calc.compute(cod_card, "prepaid", 5000, FREIGHT, "zoneD")
        assert s.cod_charge == 0

    @pytest.mark.parametrize("order_value,expected", [
        (0, "30.00"),        # flat floor
        (1000, "30.00"),     # 2% = 20 < 30
        (1500, "30.00"),     # 2% = 30, tie
        (5000, "100.00"),    # 2% wins
        (1234.56, "30.00"),
        (100000, "500.00"),  # capped
    ])
    def test_greater_of_flat_and_percent(self, calc, cod_card, order_value, expected):
        s = calc.compute(cod_card, "cod", order_value, FREIGHT, "zoneD")
        assert s.cod_charge == Decimal(expected)

    def test_mode_case_insensitive(self, calc, cod_card):
        assert calc.compute(cod_card, "COD", 5000, FREIGHT, "zoneD").cod_charge == Decimal("100.00")

    def test_no_rule(self, calc, card):
        assert calc.compute(card, "cod", 5000, FREIGHT, "zoneD").cod_charge == 0

    def test_zero_cap_means_uncapped(self):
        rule = CodRule(flat_fee=Decimal("0"), percent=Decimal("2"), max_charge=Decimal("0"))
        assert cod_fee(rule, Decimal("100000")) == Decimal("2000.00")

    def test_percent_rounded_to_paise(self):
        rule = CodRule(flat_fee=Decimal("0"), percent=Decimal("1.5"))
        assert cod_fee(rule, Decimal("999.99")) == Decimal("15.00")


# =============================================================================
# FUEL
# =============================================================================

class TestFuelSurcharge:

    def test_percent_of_freight(self, calc, card):
        assert calc.compute(card, "prepaid", 500, FREIGHT, "zoneD").fuel_charge == Decimal("4.00")

    def test_not_charged_on_cod(self, calc, cod_card):
        s = calc.compute(cod_card, "cod", 5000, FREIGHT, "zoneD")
        assert s.fuel_charge == Decimal("4.00")

    def test_no_rule(self, calc):
        card = RateCard.from_dict(make_card(fuel=None))
        assert calc.compute(card, "prepaid", 500, FREIGHT, "zoneD").fuel_charge == 0

    def test_rounded_half_up(self, calc, card):
        """10% of 40.05 = 4.005 -> 4.01."""
        assert calc.compute(card, "prepaid", 500, Decimal("40.05"), "zoneD").fuel_charge == Decimal("4.01")


# =============================================================================
# RTO
# =============================================================================

class TestRtoFee:

    def test_absent(self):
        assert rto_fee(None, FREIGHT) == 0

    def test_flat(self):
        assert rto_fee(RtoRule(kind="flat", amount=Decimal("25")), FREIGHT) == Decimal("25.00")

    @pytest.mark.parametrize("freight,expected", [
        ("40", "20.00"),    # 50% = 20
        ("20", "20.00"),    # 50% = 10, min 20
        ("100", "50.00"),
        ("400", "150.00"),  # 50% = 200, max 150
    ])
    def test_percentage_with_bounds(self, freight, expected):
        rule = RtoRule(kind="percentage", percent=Decimal("50"),
                       min_charge=Decimal("20"), max_charge=Decimal("150"))
        assert rto_fee(rule, Decimal(freight)) == Decimal(expected)

    def test_charged_for_prepaid_too(self, calc):
        card = RateCard.from_dict(make_card(rto={"type": "percentage", "percent": 50}))
        assert calc.compute(card, "prepaid", 500, FREIGHT, "zoneD").rto_charge == Decimal("20.00")


# =============================================================================
# ZONE OVERRIDES
# =============================================================================

class TestZoneOverrides:

    def test_zone_rto_rule(self, calc, card):
        """zoneE carries a flat Rs 25 RTO fee, zoneD has none."""
        assert calc.compute(card, "prepaid", 500, FREIGHT, "zoneE").rto_charge == Decimal("25.00")
        assert calc.compute(card, "prepaid", 500, FREIGHT, "zoneD").rto_charge == 0

    def test_zone_fuel_beats_card_fuel(self, calc):
        card = RateCard.from_dict(make_card(zoneRules=[
            {"zone": "zoneD", "slabs": [{"maxKg": 0.5, "charge": 40}], "fuel": {"percent": 5}},
            {"zone": "zoneA", "slabs": [{"maxKg": 0.5, "charge": 40}]},
        ]))
        assert calc.compute(card, "prepaid", 500, FREIGHT, "zoneD").fuel_charge == Decimal("2.00")
        assert calc.compute(card, "prepaid", 500, FREIGHT, "zoneA").fuel_charge == Decimal("4.00")

    def test_zone_cod_beats_card_cod(self, calc):
        card = RateCard.from_dict(make_card(
            cod={"flatFee": 30, "percent": 2},
            zoneRules=[{"zone": "zoneE", "slabs": [{"maxKg": 0.5, "charge": 52}],
                        "cod": {"flatFee": 60, "percent": 3}}],
        ))
        assert calc.compute(card, "cod", 1000, FREIGHT, "zoneE").cod_charge == Decimal("60.00")

    def test_card_level_without_zone(self, calc, cod_card):
        assert calc.compute(cod_card, "cod", 5000, FREIGHT).cod_charge == Decimal("100.00")


# =============================================================================
# INVALID INPUT
# =============================================================================

class TestInvalidSurchargeInput:

    @pytest.mark.parametrize("mode", ["upi", "", None, "card"])
    def test_unknown_payment_mode(self, calc, card, mode):
        with pytest.raises(InvalidInput) as exc:
            calc.compute(card, mode, 500, FREIGHT, "zoneD")
        assert exc.value.stage == "surcharge"
        assert exc.value.details["field"] == "paymentMode"

    @pytest.mark.parametrize("value", [-1, "abc", None, float("inf")])
    def test_bad_order_value(self, calc, card, value):
        with pytest.raises(InvalidInput) as exc:
            calc.compute(card, "cod", value, FREIGHT, "zoneD")
        assert exc.value.stage == "surcharge"
        assert exc.value.details["field"] == "orderValue"

    def test_order_value_too_large(self, calc, card):
        with pytest.raises(InvalidInput) as exc:
            calc.compute(card, "cod", 1e30, FREIGHT, "zoneD")
        assert exc.value.stage == "surcharge"
        assert exc.value.details["field"] == "orderValue"
