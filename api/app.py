"""Flask REST API exposing the shared ledger services."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from ledger_core.accounts import Accounts
from ledger_core.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from ledger_core.rational import format_rational
from ledger_core.serialization import serialize_accounts
from ledger_core.services import LedgerService
from ledger_core.storage import JSONStorage


def create_app(data_dir: Optional[Path] = None) -> Flask:
    app = Flask(__name__)

    env_name = os.getenv("SHARED_LEDGER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("SHARED_LEDGER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    storage = JSONStorage(Path(data_dir or os.getenv("SHARED_LEDGER_DATA_DIR", "data")))
    ledgers = LedgerService(storage)

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _document(accounts: Accounts) -> Dict[str, Any]:
        return serialize_accounts(accounts).to_dict()

    def _decimals() -> int:
        raw = request.args.get("decimals", "2")
        if not raw.isdecimal():
            raise ValidationError("decimals must be a non-negative integer")
        return int(raw)

    @app.get("/ledgers")
    def list_ledgers():
        return _success({"items": ledgers.titles()})

    @app.get("/ledgers/<title>")
    def get_ledger(title: str):
        if not ledgers.exists(title):
            raise RecordNotFoundError(f"Ledger {title} not found")
        return _success(_document(ledgers.get(title)))

    @app.put("/ledgers/<title>")
    def replace_ledger(title: str):
        accounts = ledgers.replace(title, _json_body())
        return _success(_document(accounts))

    @app.delete("/ledgers/<title>")
    def delete_ledger(title: str):
        ledgers.delete(title)
        return _success({}, 204)

    @app.post("/ledgers/<title>/users")
    def create_user(title: str):
        payload = _json_body()
        accounts = ledgers.add_user(title, payload.get("name"))
        return _success(_document(accounts), 201)

    @app.delete("/ledgers/<title>/users/<name>")
    def delete_user(title: str, name: str):
        ledgers.remove_user(title, name)
        return _success({}, 204)

    @app.post("/ledgers/<title>/purchases")
    def create_purchase(title: str):
        payload = _json_body()
        accounts, index = ledgers.add_purchase(
            title,
            payload.get("descr"),
            payload.get("who"),
            payload.get("amount"),
            payload.get("benef_to_shares"),
        )
        document = _document(accounts)
        return _success({"index": index, "purchase": document["purchases"][index]}, 201)

    @app.put("/ledgers/<title>/purchases/<int:index>")
    def update_purchase(title: str, index: int):
        accounts = ledgers.update_purchase(title, index, _json_body())
        document = _document(accounts)
        return _success({"index": index, "purchase": document["purchases"][index]})

    @app.delete("/ledgers/<title>/purchases/<int:index>")
    def delete_purchase(title: str, index: int):
        ledgers.remove_purchase(title, index)
        return _success({}, 204)

    @app.get("/ledgers/<title>/balances")
    def balances(title: str):
        decimals = _decimals()
        if not ledgers.exists(title):
            raise RecordNotFoundError(f"Ledger {title} not found")
        accounts = ledgers.get(title)
        return _success({
            "balances": {
                user: format_rational(balance, decimals)
                for user, balance in accounts.balances().items()
            },
            "ignored": accounts.ignored_purchases(),
        })

    return app
