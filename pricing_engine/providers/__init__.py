"""
Carrier plugins.

Each provider module exposes ``DIM_DIVISOR``, ``PINCODE_LENGTH`` and a
``zone_for(origin, dest)`` function that maps two PincodeRecords to a
billing zone code (or None when it cannot tell). Unknown carriers fall
back to ``generic``.
"""
from importlib import import_module

_registry = {}

ALIASES = {
    "blue_dart": "bluedart",
    "delhivery_surface": "delhivery",
    "delhivery_air": "delhivery",
}


def provider_key(name: str) -> str:
    return (name or "").lower().strip().replace(" ", "_").replace("-", "_")


def canonical_key(name: str) -> str:
    key = provider_key(name)
    return ALIASES.get(key, key)


def get_provider(name: str):
    key = provider_key(name)
    if key in _registry:
        return _registry[key]
    candidates = [key]
    if key in ALIASES:
        candidates.append(ALIASES[key])
    for modname in candidates:
        if not modname.isidentifier() or modname in ("base", "generic"):
            continue
        try:
            module = import_module(f".{modname}", __name__)
            _registry[key] = module
            return module
        except ModuleNotFoundError:
            continue
    module = import_module(".generic", __name__)
    _registry[key] = module
    return module
