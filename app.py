from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
import os, logging

from config import load_settings
from pricing_engine import (
    PricingEngine, PricingError, CardStateError, InvalidInput, RateCardBook, ShipmentParams,
)
from pricing_engine.loaders import load_lanes_dir, load_pincode_directory, load_rate_cards
from pricing_engine.zones import PincodeDirectory

app = Flask(__name__)
app.config.update(load_settings())

# ---------- Logging ----------
logging.basicConfig(level=getattr(logging, app.config["LOG_LEVEL"], logging.DEBUG),
                    format="%(asctime)s [%(levelname)s] %(message)s")
log = logging.getLogger("pricing_studio")

# In-memory snapshots, read-only once loaded
catalog = {"book": None, "engine": None}

ERROR_STATUS = {
    "INVALID_INPUT": 422,
    "ZONE_UNRESOLVED": 422,
    "ZONE_NOT_RATED": 422,
    "CARD_STATE": 409,
}


def bootstrap(ratecards_path=None, pincodes_path=None, lanes_dir=None):
    """Load rate cards, pincode directory and lane tables into memory."""
    ratecards_path = ratecards_path or app.config["RATECARDS_PATH"]
    pincodes_path = pincodes_path or app.config["PINCODES_PATH"]
    lanes_dir = lanes_dir or app.config["LANES_DIR"]

    cards = load_rate_cards(ratecards_path) if os.path.exists(ratecards_path) else []
    if not cards:
        log.error("CATALOG EMPTY: no rate cards found at %s", ratecards_path)
    if os.path.exists(pincodes_path):
        directory = load_pincode_directory(pincodes_path)
    else:
        log.warning("Pincode directory not found: %s (only explicit zones will price)", pincodes_path)
        directory = PincodeDirectory()
    lanes = load_lanes_dir(lanes_dir)

    install(RateCardBook(cards), PricingEngine(directory, lanes))
    for c in cards:
        log.debug("Card %-24s type=%-4s service=%-16s status=%-8s provider=%s zones=%s",
                  c.id, c.card_type, c.service_id, c.status, c.provider or "-",
                  ",".join(r.zone_key for r in c.zone_rules))


def install(book: RateCardBook, engine: PricingEngine):
    catalog["book"] = book
    catalog["engine"] = engine


def _book() -> RateCardBook:
    if catalog["book"] is None:
        bootstrap()
    return catalog["book"]


def _engine() -> PricingEngine:
    if catalog["engine"] is None:
        bootstrap()
    return catalog["engine"]


def _payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput("request body must be a JSON object", stage="input")
    return data


# ---------- Errors ----------
@app.errorhandler(PricingError)
def handle_pricing_error(e: PricingError):
    status = ERROR_STATUS.get(e.code, 400)
    if isinstance(e, CardStateError) and e.details.get("reason") == "not_found":
        status = 404
    log.warning("Simulation rejected at %s stage: %s %s", e.stage, e.code, e.message)
    return jsonify({"success": False, "error": e.to_dict()}), status


@app.errorhandler(Exception)
def handle_unexpected(e):
    if isinstance(e, HTTPException):
        return e
    log.exception("Unhandled error on %s: %s", request.path, e)
    return jsonify({"success": False, "error": {"code": "INTERNAL", "message": "internal error"}}), 500


# ---------- Rate cards (read-only) ----------
@app.route('/api/ratecards', methods=['GET'])
def api_list_ratecards():
    service_id = request.args.get("serviceId")
    return jsonify([c.summary() for c in _book().list(service_id)])


@app.route('/api/ratecards/<card_id>', methods=['GET'])
def api_get_ratecard(card_id):
    return jsonify(_book().require(card_id).summary())


# ---------- Simulation ----------
@app.route('/api/simulate', methods=['POST'])
def api_simulate():
    data = _payload()
    card_id = str(data.get("cardId") or "").strip()
    if not card_id:
        raise InvalidInput("cardId is required", stage="card", details={"field": "cardId"})
    card = _book().require(card_id)
    params = ShipmentParams.from_dict(data)
    result = _engine().simulate(card, params)
    log.info("SIMULATE card=%s %s->%s zone=%s weight=%s total=%s",
             card.id, params.from_pincode, params.to_pincode,
             result.zone.resolved_zone, result.chargeable_weight, result.total_amount)
    return jsonify({"success": True, "result": result.to_dict()})


@app.route('/api/compare', methods=['POST'])
def api_compare():
    data = _payload()
    book = _book()
    service_id = str(data.get("serviceId") or "").strip()
    if data.get("costCardId") or data.get("sellCardId"):
        cost_card = book.require(data.get("costCardId"))
        sell_card = book.require(data.get("sellCardId"))
    elif service_id:
        cost_card = book.active_for(service_id, "cost")
        sell_card = book.active_for(service_id, "sell")
    else:
        raise InvalidInput("costCardId and sellCardId, or serviceId, are required", stage="card")

    params = ShipmentParams.from_dict(data)
    cost, sell, margin = _engine().compare(cost_card, sell_card, params)
    log.info("COMPARE cost=%s sell=%s %s->%s cost_total=%s sell_total=%s margin=%s (%s%%)",
             cost_card.id, sell_card.id, params.from_pincode, params.to_pincode,
             cost.total_amount, sell.total_amount, margin.amount, margin.percent)
    return jsonify({
        "success": True,
        "cost": cost.to_dict(),
        "sell": sell.to_dict(),
        "margin": margin.to_dict(),
    })


if __name__ == "__main__":
    bootstrap()
    log.info("Pricing Studio simulation API http://localhost:%s", app.config["PORT"])
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])
