from __future__ import annotations

import dataclasses
import logging
import traceback
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

from .datetime_utils import parse_iso_date
from ..core.exceptions import DomainError, ValidationError

log = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class ApiJSONProvider(DefaultJSONProvider):
    """JSON provider emitting ISO dates, HH:MM times and plain enum values."""

    sort_keys = False

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, date):
            return o.isoformat()
        if isinstance(o, time):
            return o.strftime("%H:%M")
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, Decimal):
            return float(o)
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return dataclasses.asdict(o)
        return DefaultJSONProvider.default(o)


def parse_body(schema: Type[SchemaT]) -> SchemaT:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Body harus berupa objek JSON.")
    return schema.model_validate(payload)


def query_int(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Parameter {name} harus berupa angka.")


def query_str(name: str) -> Optional[str]:
    raw = request.args.get(name)
    return raw.strip() if raw and raw.strip() else None


def query_date(name: str) -> Optional[date]:
    raw = query_str(name)
    if raw is None:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"Parameter {name} harus berformat YYYY-MM-DD.")


def register_error_handlers(app: Flask) -> None:
    app.json = ApiJSONProvider(app)

    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        body: dict = {"error": err.message}
        if err.code:
            body["code"] = err.code
        if err.details is not None:
            body["details"] = err.details
        return jsonify(body), err.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(err: SchemaValidationError):
        details = {}
        for item in err.errors():
            field = ".".join(str(p) for p in item.get("loc", ())) or "body"
            details[field] = item.get("msg")
        return jsonify({"error": "Data yang dikirim tidak valid.", "details": details}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"error": err.description or err.name}), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.path)
        body: dict = {"error": "Terjadi kesalahan pada server."}
        if app.config.get("DEBUG", False):
            body["details"] = str(err)
            body["trace"] = traceback.format_exc()
        return jsonify(body), 500
