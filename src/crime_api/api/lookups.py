# src/crime_api/api/lookups.py

import logging

from flask import Blueprint, request
from sqlalchemy.exc import SQLAlchemyError

from crime_api.errors import InvalidParameterError
from crime_api.processors.lookups import get_codes, get_neighborhoods
from .responses import json_rows, plain_text

logger = logging.getLogger(__name__)


def create_lookups_blueprint(gateway):
    """
    Factory that creates the reference-table blueprint with access to the
    Gateway for DB queries.

    Endpoints:
        GET /codes?code=110,700
        GET /neighborhoods?id=1,7
    """
    bp = Blueprint("lookups", __name__)

    @bp.route("/codes", methods=["GET"])
    def codes():
        """Crime codes, optionally limited to a comma-separated list of codes."""
        logger.info(f"GET /codes {request.args.to_dict()}")
        try:
            rows = get_codes(gateway, request.args)
        except InvalidParameterError as e:
            return plain_text(str(e), 400)
        except SQLAlchemyError as e:
            logger.error(f"Codes query failed: {e}")
            return plain_text("Error retrieving codes", 500)
        return json_rows(rows)

    @bp.route("/neighborhoods", methods=["GET"])
    def neighborhoods():
        """Neighborhoods, optionally limited to a comma-separated list of ids."""
        logger.info(f"GET /neighborhoods {request.args.to_dict()}")
        try:
            rows = get_neighborhoods(gateway, request.args)
        except InvalidParameterError as e:
            return plain_text(str(e), 400)
        except SQLAlchemyError as e:
            logger.error(f"Neighborhoods query failed: {e}")
            return plain_text("Error retrieving neighborhoods", 500)
        return json_rows(rows)

    return bp
