"""Flask application exposing the clinical records handlers over HTTP.

Every application instance owns one ``ClinicRecords`` composition root, kept
in ``app.extensions`` so tests can build isolated apps side by side.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

import handlers
from records import ClinicError, ClinicRecords

logger = logging.getLogger(__name__)

EXTENSION_KEY = "clinic_records"
ACTOR_HEADER = "X-Actor"


def _records() -> ClinicRecords:
    return current_app.extensions[EXTENSION_KEY]


def _actor() -> Optional[str]:
    return request.headers.get(ACTOR_HEADER)


def _json_body() -> Any:
    return request.get_json(silent=True)


def _collection(items: List[Dict[str, Any]]) -> Response:
    return jsonify({"items": items, "count": len(items)})


def error_response(code: str, message: str, status: int) -> Tuple[Response, int]:
    return jsonify({"error": {"code": code, "message": message}}), status


def register_routes(app: Flask) -> None:
    @app.route("/healthz", methods=["GET"])
    def health() -> Response:
        records = _records()
        return jsonify(
            {
                "status": "ok",
                "patients": records.patients.count(),
                "appointments": records.appointments.count(),
                "audit_events": len(records.audit),
            }
        )

    @app.route("/patients", methods=["POST"])
    def create_patient() -> Tuple[Response, int]:
        patient = handlers.create_patient(_json_body(), records=_records(), actor=_actor())
        return jsonify(patient), 201

    @app.route("/patients", methods=["GET"])
    def search_patients() -> Response:
        matches = handlers.search_patients(
            request.args.get("q"),
            request.args.get("status"),
            records=_records(),
        )
        return _collection(matches)

    @app.route("/patients/<patient_id>", methods=["GET"])
    def get_patient(patient_id: str) -> Response:
        return jsonify(handlers.get_patient(patient_id, records=_records()))

    @app.route("/patients/<patient_id>/status", methods=["PATCH"])
    def update_patient_status(patient_id: str) -> Response:
        body = _json_body()
        status = body.get("status") if isinstance(body, dict) else None
        patient = handlers.update_patient_status(patient_id, status, records=_records(), actor=_actor())
        return jsonify(patient)

    @app.route("/patients/<patient_id>", methods=["DELETE"])
    def delete_patient(patient_id: str) -> Tuple[str, int]:
        handlers.delete_patient(patient_id, records=_records(), actor=_actor())
        return "", 204

    @app.route("/patients/<patient_id>/appointments", methods=["GET"])
    def list_patient_appointments(patient_id: str) -> Response:
        return _collection(handlers.list_patient_appointments(patient_id, records=_records()))

    @app.route("/appointments", methods=["POST"])
    def create_appointment() -> Tuple[Response, int]:
        appointment = handlers.create_appointment(_json_body(), records=_records(), actor=_actor())
        return jsonify(appointment), 201

    @app.route("/appointments/<appointment_id>", methods=["GET"])
    def get_appointment(appointment_id: str) -> Response:
        return jsonify(handlers.get_appointment(appointment_id, records=_records()))

    @app.route("/appointments/<appointment_id>/status", methods=["PATCH"])
    def update_appointment_status(appointment_id: str) -> Response:
        body = _json_body()
        status = body.get("status") if isinstance(body, dict) else None
        appointment = handlers.update_appointment_status(
            appointment_id, status, records=_records(), actor=_actor()
        )
        return jsonify(appointment)

    @app.route("/audit", methods=["GET"])
    def audit() -> Response:
        return _collection(handlers.latest_audit_events(request.args.get("limit"), records=_records()))


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ClinicError)
    def handle_clinic_error(exc: ClinicError) -> Tuple[Response, int]:
        if exc.status >= 500:
            logger.error("Request failed: %s", exc.message)
        else:
            logger.warning("Request rejected (%s): %s", exc.code, exc.message)
        return error_response(exc.code, exc.message, exc.status)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException) -> Tuple[Response, int]:
        code = (exc.name or "error").upper().replace(" ", "_")
        return error_response(code, exc.description or "", exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception) -> Tuple[Response, int]:
        logger.exception("Unhandled error while serving %s %s", request.method, request.path)
        return error_response("INTERNAL_ERROR", "Internal server error", 500)


def create_app(records: Optional[ClinicRecords] = None) -> Flask:
    """Build a Flask app serving *records*, or a fresh empty set of stores."""

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = records or ClinicRecords()
    register_routes(app)
    register_error_handlers(app)
    return app
