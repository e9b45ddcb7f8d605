"""
Rate-card pricing & simulation engine.

    from pricing_engine import PricingEngine, RateCard, ShipmentParams
    result = PricingEngine(directory).simulate(card, ShipmentParams.from_dict(body))
"""
from .catalog import RateCardBook
from .engine import PricingEngine, check_card, margin
from .errors import CardStateError, InvalidInput, PricingError, ZoneNotRated, ZoneUnresolved
from .models import Margin, PricingResult, RateCard, ShipmentParams, parse_rate_card
from .zones import PincodeDirectory

__all__ = [
    "PricingEngine",
    "RateCardBook",
    "PincodeDirectory",
    "RateCard",
    "ShipmentParams",
    "PricingResult",
    "Margin",
    "parse_rate_card",
    "check_card",
    "margin",
    "PricingError",
    "InvalidInput",
    "ZoneUnresolved",
    "ZoneNotRated",
    "CardStateError",
]
