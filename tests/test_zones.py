"""
Unit Tests for zone resolution and the carrier plugins.
"""

import pytest

from pricing_engine.errors import InvalidInput, ZoneUnresolved
from pricing_engine.providers import get_provider
from pricing_engine.zones import ZoneResolver, normalize_zone_key


@pytest.fixture
def resolver(directory):
    return ZoneResolver(directory, lanes={"bluedart": {("560001", "570001"): "zoneA"}})


# =============================================================================
# ZONE KEYS
# =============================================================================

class TestNormalizeZoneKey:

    @pytest.mark.parametrize("raw,expected", [
        ("A", "zonea"),
        ("zoneA", "zonea"),
        ("zone_a", "zonea"),
        ("ZONE-A", "zonea"),
        ("route_b", "zoneb"),
        ("lane_c", "zonec"),
        ("zoneD", "zoned"),
        ("all", "all"),
        ("ALL", "all"),
        ("metro", "metro"),
        ("", ""),
        (None, ""),
    ])
    def test_variants(self, raw, expected):
        assert normalize_zone_key(raw) == expected


# =============================================================================
# EXPLICIT AND LANE
# =============================================================================

class TestExplicitZone:

    def test_used_verbatim(self, resolver):
        z = resolver.resolve("560001", "302001", "delhivery", "Zone-X")
        assert z.resolved_zone == "Zone-X"
        assert z.source == "explicit"

    def test_overrides_unknown_pincodes(self, resolver):
        """New pincodes missing from the zone map can still be priced."""
        z = resolver.resolve("999999", "888888", "delhivery", "zoneD")
        assert z.resolved_zone == "zoneD"
        assert z.source == "explicit"

    def test_blank_falls_back_to_lookup(self, resolver):
        z = resolver.resolve("560001", "560002", "delhivery", "   ")
        assert z.source == "pincode_lookup"
        assert z.resolved_zone == "zoneA"

    def test_pincodes_still_validated(self, resolver):
        with pytest.raises(InvalidInput) as exc:
            resolver.resolve("5600", "560002", "delhivery", "zoneD")
        assert exc.value.stage == "zone"


class TestLaneTable:

    def test_lane_for_provider(self, resolver):
        z = resolver.resolve("560001", "570001", "bluedart")
        assert z.resolved_zone == "zoneA"
        assert z.source == "lane"

    def test_lane_provider_alias(self, resolver):
        z = resolver.resolve("560001", "570001", "Blue Dart")
        assert z.source == "lane"

    def test_other_provider_derives(self, resolver):
        z = resolver.resolve("560001", "570001", "delhivery")
        assert z.resolved_zone == "zoneB"
        assert z.source == "pincode_lookup"


# =============================================================================
# DERIVED ZONES
# =============================================================================

class TestDerivedZone:

    @pytest.mark.parametrize("origin,dest,expected", [
        ("560001", "560002", "zoneA"),  # same city
        ("560001", "570001", "zoneB"),  # same state
        ("400001", "411001", "zoneB"),  # same state beats metro
        ("560001", "400001", "zoneC"),  # metro to metro
        ("560001", "302001", "zoneD"),  # rest of India
        ("560001", "781001", "zoneE"),  # North East
        ("781001", "560001", "zoneE"),
    ])
    def test_generic_rules(self, resolver, origin, dest, expected):
        assert resolver.resolve(origin, dest, "some-new-carrier").resolved_zone == expected

    def test_delhivery_metro_list(self, resolver):
        """Kochi is a metro lane on the Delhivery contract, not on the generic one."""
        assert resolver.resolve("560001", "682001", "delhivery").resolved_zone == "zoneC"
        assert resolver.resolve("560001", "682001", "generic").resolved_zone == "zoneD"

    def test_bluedart_metro_list(self, resolver):
        assert resolver.resolve("110001", "411001", "bluedart").resolved_zone == "zoneD"
        assert resolver.resolve("110001", "411001", "generic").resolved_zone == "zoneC"

    def test_bluedart_special_region(self, resolver):
        assert resolver.resolve("560001", "403001", "bluedart").resolved_zone == "zoneE"
        assert resolver.resolve("560001", "403001", "generic").resolved_zone == "zoneD"


class TestUnresolved:

    def test_unknown_destination(self, resolver):
        with pytest.raises(ZoneUnresolved) as exc:
            resolver.resolve("560001", "999999", "delhivery")
        assert exc.value.stage == "zone"
        assert "999999" in exc.value.message

    def test_empty_directory(self):
        with pytest.raises(ZoneUnresolved):
            ZoneResolver().resolve("560001", "560002", "delhivery")


class TestPincodeFormat:

    @pytest.mark.parametrize("pin", ["56000", "5600011", "056001", "abcdef", "", None, "56 001"])
    def test_malformed(self, resolver, pin):
        with pytest.raises(InvalidInput) as exc:
            resolver.resolve(pin, "560002", "delhivery")
        assert exc.value.stage == "zone"
        assert exc.value.details["field"] == "fromPincode"


class TestProviderRegistry:

    def test_known(self):
        assert get_provider("Delhivery").__name__.endswith(".delhivery")
        assert get_provider("blue-dart").__name__.endswith(".bluedart")

    @pytest.mark.parametrize("name", ["", None, "shadowfax", "base", "..", "a.b"])
    def test_fallback_generic(self, name):
        module = get_provider(name)
        assert module.__name__.endswith(".generic")
        assert module.DIM_DIVISOR == 5000
