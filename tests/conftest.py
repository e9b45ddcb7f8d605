"""
Shared fixtures for the pricing engine tests.
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from pricing_engine import PricingEngine, RateCard, ShipmentParams
from pricing_engine.models import PincodeRecord
from pricing_engine.zones import PincodeDirectory


# =============================================================================
# MASTER DATA
# =============================================================================

PINCODES = [
    ("560001", "Bengaluru", "Karnataka"),
    ("560002", "Bengaluru", "Karnataka"),
    ("570001", "Mysuru", "Karnataka"),
    ("400001", "Mumbai", "Maharashtra"),
    ("411001", "Pune", "Maharashtra"),
    ("110001", "New Delhi", "Delhi"),
    ("302001", "Jaipur", "Rajasthan"),
    ("682001", "Kochi", "Kerala"),
    ("781001", "Guwahati", "Assam"),
    ("403001", "Panaji", "Goa"),
]


@pytest.fixture
def directory():
    return PincodeDirectory({pin: PincodeRecord(pin, city, state) for pin, city, state in PINCODES})


@pytest.fixture
def engine(directory):
    return PricingEngine(directory)


# =============================================================================
# RATE CARDS
# =============================================================================

def make_card(**overrides) -> dict:
    """Cost card: zoneD base tier 0.5 kg / Rs 40, Rs 30 per extra kg, 10% fuel, 18% GST."""
    card = {
        "id": "cost-std",
        "cardType": "cost",
        "serviceId": "surface-std",
        "status": "active",
        "provider": "delhivery",
        "taxRatePercent": 18,
        "calculation": {"dimDivisor": 5000, "weightBasis": "max", "roundingUnitKg": 0.5},
        "fuel": {"percent": 10},
        "zoneRules": [
            {"zone": "zoneD", "slabs": [{"maxKg": 0.5, "charge": 40}], "additionalPerKg": 30},
            {"zone": "zoneA", "slabs": [{"maxKg": 0.5, "charge": 38}, {"maxKg": 1, "charge": 60}],
             "additionalPerKg": 34},
            {"zone": "zoneC", "slabs": [{"maxKg": 0.5, "charge": 36}], "additionalPerKg": 32},
            {"zone": "zoneE", "slabs": [{"maxKg": 0.5, "charge": 52}], "additionalPerKg": 46,
             "rto": {"type": "flat", "amount": 25}},
        ],
    }
    card.update(overrides)
    return card


def make_sell_card(**overrides) -> dict:
    """Sell card: zoneD base tier 0.5 kg / Rs 50, 22% fuel -> Rs 70.00 for a 0.5 kg intra-state parcel."""
    card = {
        "id": "sell-std",
        "cardType": "sell",
        "serviceId": "surface-std",
        "status": "active",
        "provider": "delhivery",
        "taxRatePercent": 18,
        "calculation": {"dimDivisor": 5000, "roundingUnitKg": 0.5},
        "fuel": {"percent": 22},
        "zoneRules": [
            {"zone": "zoneD", "slabs": [{"maxKg": 0.5, "charge": 50}], "additionalPerKg": 40},
        ],
    }
    card.update(overrides)
    return card


@pytest.fixture
def card():
    return RateCard.from_dict(make_card())


@pytest.fixture
def sell_card():
    return RateCard.from_dict(make_sell_card())


# =============================================================================
# SHIPMENTS
# =============================================================================

def make_params(**overrides) -> dict:
    """0.5 kg, 10x10x10 cm, prepaid, Bengaluru -> Bengaluru, zoneD forced."""
    body = {
        "weight": 0.5,
        "dimensions": {"length": 10, "width": 10, "height": 10},
        "zone": "zoneD",
        "paymentMode": "prepaid",
        "orderValue": 500,
        "provider": "delhivery",
        "fromPincode": "560001",
        "toPincode": "560002",
        "cardId": "cost-std",
    }
    body.update(overrides)
    return body


@pytest.fixture
def params():
    return ShipmentParams.from_dict(make_params())
