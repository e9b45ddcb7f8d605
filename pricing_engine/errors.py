"""
Error taxonomy for rate-card simulations.

Every error names the stage that raised it (card, weight, zone, slab,
surcharge, tax) so a caller can point the user at the offending input.
"""
from typing import Any, Dict, Optional

STAGES = ("input", "card", "weight", "zone", "slab", "surcharge", "tax")


class PricingError(Exception):
    code = "PRICING_ERROR"

    def __init__(self, message: str, stage: str, details: Optional[Dict[str, Any]] = None):
        if stage not in STAGES:
            raise ValueError(f"unknown pricing stage {stage!r}")
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.details = dict(details or {})

    def to_dict(self) -> Dict[str, Any]:
        out = {"code": self.code, "stage": self.stage, "message": self.message}
        if self.details:
            out["details"] = self.details
        return out

    def __repr__(self):
        return f"{type(self).__name__}(stage={self.stage!r}, message={self.message!r})"


class InvalidInput(PricingError):
    """Malformed or out-of-range shipment field; the user can fix it."""
    code = "INVALID_INPUT"


class ZoneUnresolved(PricingError):
    """No zone for the pincode pair. Retry with an explicit zone."""
    code = "ZONE_UNRESOLVED"


class ZoneNotRated(PricingError):
    """The card has no pricing for the resolved zone."""
    code = "ZONE_NOT_RATED"


class CardStateError(PricingError):
    """Card missing, not active, or not the one the shipment asked for."""
    code = "CARD_STATE"
