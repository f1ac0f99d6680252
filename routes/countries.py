"""JSON API routes for the country catalogue."""

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from domain.models.country import TABLE_HEADER
from middleware.errors import RecordNotFoundError, ValidationError
from services.country_service import (
    create_from_form,
    delete,
    get_by_code,
    list_all,
    statistics,
    update_from_form,
)


countries_bp = Blueprint("countries", __name__)


def _not_found(code: str) -> RecordNotFoundError:
    return RecordNotFoundError("No country found.", details={"code": code.upper()})


def _json_object() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(["Request body must be a JSON object"])
    return data


@countries_bp.get("/api/countries/")
def api_list_countries():
    countries = list_all()
    if request.args.get("format") == "table":
        lines = [TABLE_HEADER] + [country.render() for country in countries]
        return Response("\n".join(lines) + "\n", mimetype="text/plain")
    return jsonify([c.model_dump() for c in countries])


@countries_bp.get("/api/countries/statistics")
def api_country_statistics():
    return jsonify(statistics().to_dict())


@countries_bp.get("/api/countries/<code>")
def api_get_country(code: str):
    country = get_by_code(code)
    if not country:
        raise _not_found(code)
    return jsonify(country.model_dump())


@countries_bp.post("/api/countries/")
def api_create_country():
    data = _json_object()
    country = create_from_form(data)
    return jsonify(country.model_dump()), 201


@countries_bp.put("/api/countries/<code>")
def api_update_country(code: str):
    data = _json_object()
    country = update_from_form(code, data)
    if not country:
        raise _not_found(code)
    return jsonify(country.model_dump())


@countries_bp.delete("/api/countries/<code>")
def api_delete_country(code: str):
    delete(code)
    return "", 204
