# src/crime_api/api/incidents.py

import logging

from flask import Blueprint, request
from jsonschema import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from crime_api.errors import IncidentExistsError, IncidentNotFoundError, InvalidParameterError
from crime_api.processors.incidents import get_incidents
from crime_api.processors.lifecycle import add_incident, remove_incident
from crime_api.schemas import describe_error, parse_case_number, parse_new_incident
from .responses import json_rows, plain_text

logger = logging.getLogger(__name__)


def _json_body():
    """Request body as a dict, or None when it is missing or not a JSON object."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return None
    return body


def create_incidents_blueprint(gateway, default_limit=1000, max_limit=50000):
    """
    Factory that creates the incidents blueprint with access to the Gateway.

    Endpoints:
        GET    /incidents         filtered incidents, newest first
        PUT    /new-incident      add one incident (JSON body)
        DELETE /remove-incident   remove an incident by case_number (JSON body)

    Query parameters of GET /incidents (all optional, combined with AND):
        start_date, end_date: YYYY-MM-DD, inclusive bounds on the incident date
        code, grid, neighborhood: comma-separated integers
        limit: max rows, default 1000
    """
    bp = Blueprint("incidents", __name__)

    @bp.route("/incidents", methods=["GET"])
    def incidents():
        logger.info(f"GET /incidents {request.args.to_dict()}")
        try:
            rows = get_incidents(gateway, request.args, default_limit, max_limit)
        except InvalidParameterError as e:
            return plain_text(str(e), 400)
        except SQLAlchemyError as e:
            logger.error(f"Incidents query failed: {e}")
            return plain_text("Error retrieving incidents", 500)
        return json_rows(rows)

    @bp.route("/new-incident", methods=["PUT"])
    def new_incident():
        body = _json_body()
        logger.info(f"PUT /new-incident {body}")
        if body is None:
            return plain_text("Error: request body must be a JSON object", 400)

        try:
            incident = parse_new_incident(body)
        except ValidationError as e:
            return plain_text("Error: invalid incident\n" + describe_error(e), 400)

        try:
            add_incident(gateway, incident)
        except IncidentExistsError:
            return plain_text(
                "Error: could not insert incident because case number already exists in the database",
                500,
            )
        except SQLAlchemyError as e:
            logger.error(f"Insert of case {incident['case_number']} failed: {e}")
            return plain_text("Error: could not insert incident", 500)

        return plain_text("Incident added successfully")

    @bp.route("/remove-incident", methods=["DELETE"])
    def delete_incident():
        body = _json_body()
        logger.info(f"DELETE /remove-incident {body}")
        if body is None:
            return plain_text("Error: request body must be a JSON object", 400)

        try:
            case_number = parse_case_number(body)
        except ValidationError as e:
            return plain_text("Error: invalid case number\n" + describe_error(e), 400)

        try:
            remove_incident(gateway, case_number)
        except IncidentNotFoundError:
            return plain_text(
                "Error: could not delete incident because case number does not exist in the database",
                500,
            )
        except SQLAlchemyError as e:
            logger.error(f"Delete of case {case_number} failed: {e}")
            return plain_text("Error: could not delete incident", 500)

        return plain_text("Incident deleted successfully")

    return bp
