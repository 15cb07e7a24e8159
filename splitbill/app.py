from __future__ import annotations

import logging
from typing import Any, Dict, List

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import config
from .errors import SplitBillError
from .ledger import Ledger, to_amount
from .models import Item, Participant, SettlementResult
from .observability import setup_logging
from .settlement import compute_settlement

logger = logging.getLogger(__name__)


def create_app(ledger: Ledger | None = None) -> Flask:
    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.SECRET_KEY
    app.extensions["ledger"] = ledger if ledger is not None else Ledger()

    CORS(app, resources={r"/api/*": {"origins": config.CORS_ORIGINS}})

    register_error_handlers(app)
    register_routes(app)
    return app


def get_ledger() -> Ledger:
    return current_app.extensions["ledger"]


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(SplitBillError)
    def handle_splitbill_error(exc: SplitBillError):
        logger.info(
            "%s on %s", exc.message, request.path, extra={"error_code": exc.code, "path": request.path}
        )
        return jsonify(exc.to_response()), exc.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        code = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": code}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        logger.error("Unhandled exception on %s", request.path, exc_info=True, extra={"path": request.path})
        return jsonify({"error": "internal_error"}), 500


def register_routes(app: Flask) -> None:
    @app.get("/api")
    def health_check():
        return jsonify({"status": "healthy"})

    @app.get("/api/people")
    def list_people():
        people = get_ledger().snapshot()
        return jsonify([_person_summary(idx, person) for idx, person in enumerate(people)])

    @app.post("/api/people")
    def add_person():
        payload = _json_object()
        index, person = get_ledger().add_person(payload.get("name") or "")
        return jsonify(_person_profile(index, person)), 201

    @app.get("/api/people/<int:person_index>")
    def get_person(person_index: int):
        person = get_ledger().get_person(person_index)
        return jsonify(_person_profile(person_index, person))

    @app.delete("/api/people/<int:person_index>")
    def delete_person(person_index: int):
        get_ledger().delete_person(person_index)
        return jsonify({"status": "deleted"})

    @app.post("/api/people/<int:person_index>/items")
    def add_item(person_index: int):
        payload = _json_object()
        if "value" not in payload:
            return jsonify({"error": "missing_fields"}), 400

        item = get_ledger().add_item(person_index, payload.get("name") or "", payload["value"])
        return jsonify(item.to_dict()), 201

    @app.delete("/api/people/<int:person_index>/items/<int:item_index>")
    def remove_item(person_index: int, item_index: int):
        get_ledger().remove_item(person_index, item_index)
        return jsonify({"status": "deleted"})

    @app.post("/api/people/<int:person_index>/payments")
    def add_payment(person_index: int):
        payload = _json_object()
        if "amount" not in payload:
            return jsonify({"error": "missing_fields"}), 400

        amount = get_ledger().add_payment(person_index, payload["amount"])
        return jsonify({"amount": amount}), 201

    @app.delete("/api/people/<int:person_index>/payments/<int:payment_index>")
    def remove_payment(person_index: int, payment_index: int):
        get_ledger().remove_payment(person_index, payment_index)
        return jsonify({"status": "deleted"})

    @app.get("/api/debts")
    def get_debts():
        return _debts_response(get_ledger().settle())

    @app.post("/api/settle")
    def settle_snapshot():
        payload = request.get_json(silent=True)
        if not isinstance(payload, list):
            return jsonify({"error": "invalid_ledger"}), 400

        try:
            participants = [_parse_participant(entry) for entry in payload]
        except (KeyError, TypeError, AttributeError):
            return jsonify({"error": "invalid_ledger"}), 400

        return _debts_response(compute_settlement(participants))


def _json_object() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _parse_participant(entry: Dict[str, Any]) -> Participant:
    name = str(entry["name"]).strip()
    items = tuple(
        Item(name=str(item.get("name") or ""), value=to_amount(item["value"]))
        for item in entry.get("items") or ()
    )
    payments = tuple(to_amount(amount) for amount in entry.get("payments") or ())
    return Participant(name=name, items=items, payments=payments)


def _debts_response(result: SettlementResult):
    if not result.ok:
        return jsonify({"error": result.error, "code": "totals_mismatch"}), 409

    debts: List[Dict[str, Any]] = []
    for transfer in result.transfers:
        debts.append(
            {
                "from": transfer.from_name,
                "to": transfer.to_name,
                "amount": round(transfer.amount, 2),
                "description": f"{transfer.from_name} owes {transfer.to_name} {_money(transfer.amount)}",
            }
        )
    return jsonify({"debts": debts})


def _money(amount: float) -> str:
    return f"{config.CURRENCY_SYMBOL}{abs(amount):.2f}"


def _person_summary(index: int, person: Participant) -> Dict[str, Any]:
    balance = person.balance
    if balance < 0:
        summary = f"Owes {_money(balance)}"
    else:
        summary = f"Is owed {_money(balance)}"
    return {
        "index": index,
        "name": person.name,
        "spent": round(person.spent, 2),
        "paid": round(person.paid, 2),
        "balance": round(balance, 2),
        "summary": summary,
    }


def _person_profile(index: int, person: Participant) -> Dict[str, Any]:
    profile = _person_summary(index, person)
    profile["items"] = [item.to_dict() for item in person.items]
    profile["payments"] = list(person.payments)
    return profile


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
