# src/crime_api/api/swagger.py

"""
OpenAPI document served at /swagger.json and rendered by Swagger UI at /swagger.
"""

from flask import Blueprint, jsonify
from flask_swagger_ui import get_swaggerui_blueprint

from crime_api.schemas import CASE_NUMBER_SCHEMA, NEW_INCIDENT_SCHEMA

SWAGGER_URL = '/swagger'
API_URL = '/swagger.json'

SWAGGER_CONFIG = {
    'app_name': "St. Paul Crime API",
    'deepLinking': True,
    'defaultModelsExpandDepth': -1,
}


def _id_list(name, description):
    return {
        "name": name,
        "in": "query",
        "required": False,
        "description": description,
        "schema": {"type": "string"},
    }


def _text(description):
    return {"description": description, "content": {"text/plain": {"schema": {"type": "string"}}}}


OPENAPI_SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "St. Paul Crime API", "version": "1.0.0"},
    "paths": {
        "/health": {
            "get": {
                "summary": "Health check",
                "responses": {"200": {"description": "OK"}, "503": {"description": "Database unreachable"}}
            }
        },
        "/codes": {
            "get": {
                "summary": "Crime codes",
                "tags": ["Reference data"],
                "parameters": [_id_list("code", "Comma-separated codes, e.g. 110,700")],
                "responses": {
                    "200": {
                        "description": "Array of {code, type}, ordered by code",
                        "content": {"application/json": {"example": [{"code": 110, "type": "Murder, Non Negligent Manslaughter"}]}}
                    },
                    "400": _text("Invalid code value"),
                    "500": _text("Error retrieving codes"),
                }
            }
        },
        "/neighborhoods": {
            "get": {
                "summary": "Neighborhoods",
                "tags": ["Reference data"],
                "parameters": [_id_list("id", "Comma-separated neighborhood numbers, e.g. 1,7")],
                "responses": {
                    "200": {
                        "description": "Array of {id, name}, ordered by id",
                        "content": {"application/json": {"example": [{"id": 1, "name": "Conway/Battlecreek/Highwood"}]}}
                    },
                    "400": _text("Invalid id value"),
                    "500": _text("Error retrieving neighborhoods"),
                }
            }
        },
        "/incidents": {
            "get": {
                "summary": "Crime incidents, newest first",
                "tags": ["Incidents"],
                "parameters": [
                    _id_list("start_date", "Earliest incident date, YYYY-MM-DD"),
                    _id_list("end_date", "Latest incident date, YYYY-MM-DD"),
                    _id_list("code", "Comma-separated crime codes"),
                    _id_list("grid", "Comma-separated police grid numbers"),
                    _id_list("neighborhood", "Comma-separated neighborhood numbers"),
                    {"name": "limit", "in": "query", "required": False,
                     "description": "Maximum number of rows (default 1000)", "schema": {"type": "integer"}},
                ],
                "responses": {
                    "200": {
                        "description": "Array of incidents",
                        "content": {"application/json": {"example": [{
                            "case_number": "22000001",
                            "date": "2022-05-31",
                            "time": "23:50:00",
                            "code": 600,
                            "incident": "Theft",
                            "police_grid": 87,
                            "neighborhood_number": 7,
                            "block": "98X UNIVERSITY AV W"
                        }]}}
                    },
                    "400": _text("Invalid filter or limit value"),
                    "500": _text("Error retrieving incidents"),
                }
            }
        },
        "/new-incident": {
            "put": {
                "summary": "Add an incident",
                "tags": ["Incidents"],
                "requestBody": {"required": True, "content": {"application/json": {"schema": NEW_INCIDENT_SCHEMA}}},
                "responses": {
                    "200": _text("Incident added successfully"),
                    "400": _text("Invalid incident"),
                    "500": _text("Case number already exists, or the insert failed"),
                }
            }
        },
        "/remove-incident": {
            "delete": {
                "summary": "Remove an incident by case number",
                "tags": ["Incidents"],
                "requestBody": {"required": True, "content": {"application/json": {"schema": CASE_NUMBER_SCHEMA}}},
                "responses": {
                    "200": _text("Incident deleted successfully"),
                    "400": _text("Invalid case number"),
                    "500": _text("Case number does not exist, or the delete failed"),
                }
            }
        },
    }
}


def create_swagger_blueprints():
    """The /swagger.json document and the Swagger UI that renders it."""
    spec_bp = Blueprint("openapi", __name__)

    @spec_bp.route(API_URL, methods=["GET"])
    def swagger_spec():
        """Open API document for the crime API endpoints."""
        return jsonify(OPENAPI_SPEC)

    ui_bp = get_swaggerui_blueprint(SWAGGER_URL, API_URL, config=SWAGGER_CONFIG)
    return spec_bp, ui_bp
