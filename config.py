"""
Pricing Studio settings.

Everything has a default rooted at the app directory and can be
overridden from the environment:
  export PRICING_RATECARDS_PATH=/srv/pricing/ratecards.json
  export PRICING_LOG_LEVEL=INFO
"""
import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))


def _bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _int(name: str, default: int) -> int:
    v = os.getenv(name)
    try:
        return int(v) if v not in (None, "") else default
    except ValueError:
        return default


def load_settings() -> dict:
    data_dir = os.getenv("PRICING_DATA_DIR", os.path.join(APP_DIR, "data"))
    return {
        "DATA_DIR": data_dir,
        "RATECARDS_PATH": os.getenv("PRICING_RATECARDS_PATH", os.path.join(data_dir, "ratecards.json")),
        "PINCODES_PATH": os.getenv("PRICING_PINCODES_PATH", os.path.join(data_dir, "pincodes.csv")),
        "LANES_DIR": os.getenv("PRICING_LANES_DIR", os.path.join(data_dir, "lanes")),
        "LOG_LEVEL": os.getenv("PRICING_LOG_LEVEL", "DEBUG").upper(),
        "HOST": os.getenv("PRICING_HOST", "0.0.0.0"),
        "PORT": _int("PRICING_PORT", 5050),
        "DEBUG": _bool("PRICING_DEBUG", False),
    }
