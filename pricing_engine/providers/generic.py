from .base import DEFAULT_DIM_DIVISOR, DEFAULT_PINCODE_LENGTH, derive_zone

DIM_DIVISOR = DEFAULT_DIM_DIVISOR
PINCODE_LENGTH = DEFAULT_PINCODE_LENGTH


def zone_for(origin, dest):
    return derive_zone(origin, dest)
