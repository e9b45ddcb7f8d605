"""
Zone resolution for a pincode pair.

Order of precedence:
    1. explicit zone from the caller (operator override)      source="explicit"
    2. provider lane table (origin pincode, dest pincode)     source="lane"
    3. provider rule over the pincode directory (city/state)  source="pincode_lookup"
"""
import logging
import re
from typing import Dict, Mapping, Optional, Tuple

from .errors import InvalidInput, ZoneUnresolved
from .models import PincodeRecord, ZoneResolution
from .providers import canonical_key, get_provider

log = logging.getLogger("pricing_studio.zones")

_ZONE_PATTERNS = (
    re.compile(r"^zone[_\- ]?([a-z0-9]+)$"),
    re.compile(r"^(?:route|lane)[_\- ]([a-z0-9]+)$"),
)


def normalize_zone_key(zone) -> str:
    """'A', 'zone_a', 'ZONE-A', 'route_a' -> 'zonea'. 'all' stays 'all'."""
    raw = str(zone or "").strip().lower()
    if not raw or raw == "all":
        return raw
    if re.fullmatch(r"[a-z]", raw):
        return f"zone{raw}"
    for pat in _ZONE_PATTERNS:
        m = pat.match(raw)
        if m:
            return f"zone{m.group(1)}"
    return raw


def pincode_pattern(length: int):
    return re.compile(r"^[1-9][0-9]{%d}$" % (length - 1))


class PincodeDirectory:
    """Read-only pincode -> (city, state) master data."""

    def __init__(self, records: Optional[Mapping[str, PincodeRecord]] = None):
        self._records: Dict[str, PincodeRecord] = dict(records or {})

    def __len__(self):
        return len(self._records)

    def __contains__(self, pincode):
        return str(pincode) in self._records

    def get(self, pincode) -> Optional[PincodeRecord]:
        return self._records.get(str(pincode).strip())

    def state_of(self, pincode) -> Optional[str]:
        rec = self.get(pincode)
        return rec.state if rec else None

    @classmethod
    def from_rows(cls, rows):
        recs = {}
        for r in rows:
            pin = str(r.get("pincode") or "").strip()
            if pin:
                recs[pin] = PincodeRecord(pin, str(r.get("city") or "").strip(),
                                          str(r.get("state") or "").strip())
        return cls(recs)


class ZoneResolver:

    def __init__(self, directory: Optional[PincodeDirectory] = None,
                 lanes: Optional[Mapping[str, Mapping[Tuple[str, str], str]]] = None):
        self.directory = directory or PincodeDirectory()
        # provider key -> {(from, to): zone}
        self.lanes = {canonical_key(k): dict(v) for k, v in (lanes or {}).items()}

    def validate_pincode(self, pincode, field: str, provider) -> str:
        pin = str(pincode or "").strip()
        length = getattr(provider, "PINCODE_LENGTH", 6)
        if not pincode_pattern(length).match(pin):
            raise InvalidInput(f"{field} must be a valid {length}-digit pincode",
                               stage="zone", details={"field": field, "value": pin})
        return pin

    def resolve(self, from_pincode, to_pincode, provider: str, explicit_zone=None) -> ZoneResolution:
        plugin = get_provider(provider)
        origin_pin = self.validate_pincode(from_pincode, "fromPincode", plugin)
        dest_pin = self.validate_pincode(to_pincode, "toPincode", plugin)

        explicit = str(explicit_zone).strip() if explicit_zone is not None else ""
        if explicit:
            log.debug("ZONE %s->%s provider=%s explicit=%s", origin_pin, dest_pin, provider, explicit)
            return ZoneResolution(resolved_zone=explicit, source="explicit")

        lane_zone = self.lanes.get(canonical_key(provider), {}).get((origin_pin, dest_pin))
        if lane_zone:
            log.debug("ZONE %s->%s provider=%s lane=%s", origin_pin, dest_pin, provider, lane_zone)
            return ZoneResolution(resolved_zone=lane_zone, source="lane")

        origin = self.directory.get(origin_pin)
        dest = self.directory.get(dest_pin)
        missing = [p for p, rec in ((origin_pin, origin), (dest_pin, dest)) if rec is None]
        if missing:
            raise ZoneUnresolved(
                f"pincode {', '.join(missing)} not in the zone map for {provider or 'generic'}; "
                f"supply a zone to price this shipment",
                stage="zone", details={"fromPincode": origin_pin, "toPincode": dest_pin},
            )
        zone = plugin.zone_for(origin, dest)
        if not zone:
            raise ZoneUnresolved(
                f"no zone for lane {origin_pin}->{dest_pin}; supply a zone to price this shipment",
                stage="zone", details={"fromPincode": origin_pin, "toPincode": dest_pin},
            )
        log.debug("ZONE %s(%s/%s)->%s(%s/%s) provider=%s derived=%s",
                  origin_pin, origin.city, origin.state, dest_pin, dest.city, dest.state,
                  provider, zone)
        return ZoneResolution(resolved_zone=zone, source="pincode_lookup")
