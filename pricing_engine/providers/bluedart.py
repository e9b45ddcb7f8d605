# pricing_engine/providers/bluedart.py
from .base import DEFAULT_PINCODE_LENGTH, DEFAULT_SPECIAL_STATES, derive_zone

DIM_DIVISOR = 5000
PINCODE_LENGTH = DEFAULT_PINCODE_LENGTH

# ----------------------------------------------------------------------
# Bluedart contract: metro lanes are the six original metros only,
# Goa is billed with the special regions.
# ----------------------------------------------------------------------
METRO_CITIES = frozenset({
    "NEW DELHI", "DELHI", "MUMBAI", "KOLKATA", "CHENNAI",
    "BENGALURU", "BANGALORE", "HYDERABAD",
})

SPECIAL_STATES = DEFAULT_SPECIAL_STATES | {"GOA"}


def zone_for(origin, dest):
    return derive_zone(origin, dest, metros=METRO_CITIES, special_states=SPECIAL_STATES)
