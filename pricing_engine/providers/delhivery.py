# pricing_engine/providers/delhivery.py
from .base import DEFAULT_METRO_CITIES, DEFAULT_PINCODE_LENGTH, derive_zone

DIM_DIVISOR = 5000
PINCODE_LENGTH = DEFAULT_PINCODE_LENGTH

# contract metro list adds Kochi and Chandigarh
METRO_CITIES = DEFAULT_METRO_CITIES | {"KOCHI", "CHANDIGARH"}


def zone_for(origin, dest):
    return derive_zone(origin, dest, metros=METRO_CITIES)
