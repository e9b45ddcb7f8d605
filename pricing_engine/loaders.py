"""
Master-data loaders: pincode directory, provider lane tables, rate cards.

Pincode sheets come from carriers in many shapes (.xlsx or .csv, 'Pin Code'
vs 'pincode', pincodes read back as floats). normalize_columns irons that
out before anything is indexed.
"""
import json
import logging
import os
from typing import Dict, List, Tuple

import pandas as pd

from .models import RateCard, parse_rate_card
from .zones import PincodeDirectory

log = logging.getLogger("pricing_studio.loaders")

ALLOWED_EXTS = {"xlsx", "xls", "csv"}

COLUMN_ALIASES = {
    "pin": "pincode", "pin code": "pincode", "postal": "pincode", "zip": "pincode",
    "from pincode": "from_pincode", "origin pincode": "from_pincode", "frompincode": "from_pincode",
    "to pincode": "to_pincode", "destination pincode": "to_pincode", "topincode": "to_pincode",
    "zone name": "zone", "zonename": "zone", "zone code": "zone",
    "statename": "state", "state name": "state",
    "location": "city", "district": "city", "area": "city", "city name": "city",
}


def read_table(path: str) -> pd.DataFrame:
    ext = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    if ext not in ALLOWED_EXTS:
        raise ValueError(f"unsupported file type for {path}; expected one of {sorted(ALLOWED_EXTS)}")
    if ext == "csv":
        return pd.read_csv(path, dtype=str)
    return pd.read_excel(path, dtype=str)


def _clean_pincode(series: pd.Series) -> pd.Series:
    return series.fillna("").astype(str).str.replace(r"\.0$", "", regex=True).str.strip()


def normalize_columns(df: pd.DataFrame, required=("pincode",)) -> pd.DataFrame:
    """Normalize common column header variations to standard names."""
    df = df.rename(columns={c: str(c).strip().lower() for c in df.columns})
    for old, new in COLUMN_ALIASES.items():
        if old in df.columns and new not in df.columns:
            df = df.rename(columns={old: new})
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"missing columns: {', '.join(missing)}")
    for col in ("pincode", "from_pincode", "to_pincode"):
        if col in df.columns:
            df[col] = _clean_pincode(df[col])
    for col in ("city", "state", "zone"):
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str).str.strip()
    return df


def load_pincode_directory(path: str) -> PincodeDirectory:
    df = normalize_columns(read_table(path), required=("pincode", "state"))
    if "city" not in df.columns:
        df["city"] = ""
    df = df[df["pincode"].str.len() > 0].drop_duplicates(subset="pincode", keep="first")
    directory = PincodeDirectory.from_rows(df[["pincode", "city", "state"]].to_dict(orient="records"))
    log.info("Loaded pincode directory from %s: %d pincodes", os.path.basename(path), len(directory))
    return directory


def load_zone_lanes(path: str) -> Dict[Tuple[str, str], str]:
    df = normalize_columns(read_table(path), required=("from_pincode", "to_pincode", "zone"))
    df = df[(df["zone"] != "") & (df["from_pincode"] != "") & (df["to_pincode"] != "")]
    lanes = {(r.from_pincode, r.to_pincode): r.zone for r in df.itertuples(index=False)}
    log.info("Loaded %d lanes from %s", len(lanes), os.path.basename(path))
    return lanes


def load_lanes_dir(directory: str) -> Dict[str, Dict[Tuple[str, str], str]]:
    """One lane file per provider: <provider>.csv / <provider>.xlsx."""
    out = {}
    if not directory or not os.path.isdir(directory):
        return out
    for fname in sorted(os.listdir(directory)):
        stem, _, ext = fname.rpartition(".")
        if ext.lower() not in ALLOWED_EXTS or not stem:
            continue
        out[stem] = load_zone_lanes(os.path.join(directory, fname))
    return out


def load_rate_cards(path: str) -> List[RateCard]:
    with open(path, "r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if isinstance(raw, dict):
        raw = raw.get("rateCards") or raw.get("cards") or []
    cards = [parse_rate_card(item) for item in raw]
    log.info("Loaded %d rate cards from %s: %s", len(cards), os.path.basename(path),
             ", ".join(f"{c.id}({c.card_type}/{c.status})" for c in cards))
    return cards
