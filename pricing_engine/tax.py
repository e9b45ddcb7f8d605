"""
GST split.

Intra-state supply is taxed as CGST + SGST at half the rate each;
inter-state supply as IGST at the full rate. The place-of-supply decision
cannot default: an unknown state is an error, not a guess.
"""
import logging
from decimal import Decimal

from .errors import InvalidInput
from .models import GstBreakdown
from .money import ZERO, HUNDRED, round2, to_decimal

log = logging.getLogger("pricing_studio.tax")

# GST state codes
STATE_CODES = {
    "JAMMU AND KASHMIR": "01",
    "HIMACHAL PRADESH": "02",
    "PUNJAB": "03",
    "CHANDIGARH": "04",
    "UTTARAKHAND": "05",
    "HARYANA": "06",
    "DELHI": "07",
    "RAJASTHAN": "08",
    "UTTAR PRADESH": "09",
    "BIHAR": "10",
    "SIKKIM": "11",
    "ARUNACHAL PRADESH": "12",
    "NAGALAND": "13",
    "MANIPUR": "14",
    "MIZORAM": "15",
    "TRIPURA": "16",
    "MEGHALAYA": "17",
    "ASSAM": "18",
    "WEST BENGAL": "19",
    "JHARKHAND": "20",
    "ODISHA": "21",
    "CHHATTISGARH": "22",
    "MADHYA PRADESH": "23",
    "GUJARAT": "24",
    "DADRA AND NAGAR HAVELI AND DAMAN AND DIU": "26",
    "MAHARASHTRA": "27",
    "KARNATAKA": "29",
    "GOA": "30",
    "LAKSHADWEEP": "31",
    "KERALA": "32",
    "TAMIL NADU": "33",
    "PUDUCHERRY": "34",
    "ANDAMAN AND NICOBAR ISLANDS": "35",
    "TELANGANA": "36",
    "ANDHRA PRADESH": "37",
    "LADAKH": "38",
}

STATE_ALIASES = {
    "NEW DELHI": "DELHI",
    "NCT OF DELHI": "DELHI",
    "ORISSA": "ODISHA",
    "PONDICHERRY": "PUDUCHERRY",
    "DAMAN AND DIU": "DADRA AND NAGAR HAVELI AND DAMAN AND DIU",
    "DADRA AND NAGAR HAVELI": "DADRA AND NAGAR HAVELI AND DAMAN AND DIU",
    "J AND K": "JAMMU AND KASHMIR",
}

_VALID_CODES = set(STATE_CODES.values())


def state_code(state, field: str = "state") -> str:
    """State name or two-digit GST code -> GST code."""
    raw = " ".join(str(state or "").upper().replace("&", " AND ").split())
    if not raw:
        raise InvalidInput(f"{field} is required for tax treatment", stage="tax",
                           details={"field": field})
    if raw.isdigit():
        code = raw.zfill(2)
        if code in _VALID_CODES:
            return code
    else:
        name = STATE_ALIASES.get(raw, raw)
        if name in STATE_CODES:
            return STATE_CODES[name]
    raise InvalidInput(f"unsupported state for GST: {state}", stage="tax",
                       details={"field": field, "value": str(state)})


class TaxSplitter:

    def split(self, subtotal, origin_state, dest_state, card_tax_rate_percent) -> GstBreakdown:
        origin = state_code(origin_state, "originState")
        dest = state_code(dest_state, "destState")
        try:
            base = to_decimal(subtotal, "subtotal")
            rate = to_decimal(card_tax_rate_percent, "taxRatePercent")
        except ValueError as e:
            raise InvalidInput(str(e), stage="tax") from None
        if rate < ZERO:
            raise InvalidInput("taxRatePercent must be 0 or higher", stage="tax",
                               details={"field": "taxRatePercent"})

        audit = dict(from_state_code=origin, to_state_code=dest, taxable_amount=base, rate_percent=rate)
        if origin == dest:
            half = round2(base * rate / (HUNDRED * 2))
            gst = GstBreakdown(total=half + half, cgst=half, sgst=half, igst=ZERO, **audit)
        else:
            igst = round2(base * rate / HUNDRED)
            gst = GstBreakdown(total=igst, cgst=ZERO, sgst=ZERO, igst=igst, **audit)

        log.debug("TAX subtotal=%s rate=%s%% origin=%s dest=%s intra=%s cgst=%s sgst=%s igst=%s",
                  base, rate, origin, dest, origin == dest, gst.cgst, gst.sgst, gst.igst)
        return gst
