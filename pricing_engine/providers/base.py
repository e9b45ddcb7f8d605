"""
Zone derivation shared by the carrier plugins.

Indian surface carriers bill on five zones:
    zoneA - same city
    zoneB - same state (regional)
    zoneC - metro to metro
    zoneD - rest of India
    zoneE - either end in a special-region state (North East, J&K, islands)
"""
from typing import Iterable, Optional

from ..models import PincodeRecord

DEFAULT_DIM_DIVISOR = 5000  # cm3 per kg
DEFAULT_PINCODE_LENGTH = 6

DEFAULT_METRO_CITIES = frozenset({
    "NEW DELHI", "DELHI", "MUMBAI", "KOLKATA", "CHENNAI",
    "BENGALURU", "BANGALORE", "HYDERABAD", "AHMEDABAD", "PUNE",
})

DEFAULT_SPECIAL_STATES = frozenset({
    "JAMMU AND KASHMIR", "LADAKH", "HIMACHAL PRADESH",
    "ARUNACHAL PRADESH", "ASSAM", "MANIPUR", "MEGHALAYA",
    "MIZORAM", "NAGALAND", "SIKKIM", "TRIPURA",
    "ANDAMAN AND NICOBAR ISLANDS", "LAKSHADWEEP",
})


def _norm(text: str) -> str:
    return " ".join(str(text or "").upper().replace("&", " AND ").split())


def derive_zone(
    origin: PincodeRecord,
    dest: PincodeRecord,
    metros: Iterable[str] = DEFAULT_METRO_CITIES,
    special_states: Iterable[str] = DEFAULT_SPECIAL_STATES,
) -> Optional[str]:
    o_city, d_city = _norm(origin.city), _norm(dest.city)
    o_state, d_state = _norm(origin.state), _norm(dest.state)
    if not o_state or not d_state:
        return None
    if o_city and o_city == d_city and o_state == d_state:
        return "zoneA"
    if o_state == d_state:
        return "zoneB"
    special = {_norm(s) for s in special_states}
    if o_state in special or d_state in special:
        return "zoneE"
    metro = {_norm(m) for m in metros}
    if o_city in metro and d_city in metro:
        return "zoneC"
    return "zoneD"
