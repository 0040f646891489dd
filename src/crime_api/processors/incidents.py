# src/crime_api/processors/incidents.py

"""
Incident query processor: five optional filters plus a row limit over the
Incidents table, newest first.
"""

import logging

from crime_api.errors import InvalidParameterError
from crime_api.processors.filters import (
    AT_LEAST,
    AT_MOST,
    FilterDimension,
    compile_filters,
    parse_int,
    parse_iso_date,
)

logger = logging.getLogger(__name__)

# Checked in this order; the WHERE clause follows it
INCIDENT_FILTERS = [
    FilterDimension("start_date", "date(date_time)", parse_iso_date, AT_LEAST),
    FilterDimension("end_date", "date(date_time)", parse_iso_date, AT_MOST),
    FilterDimension("code", "code"),
    FilterDimension("grid", "police_grid"),
    FilterDimension("neighborhood", "neighborhood_number"),
]

INCIDENT_COLUMNS = """
    case_number,
    date(date_time) AS date,
    time(date_time) AS time,
    code,
    incident,
    police_grid,
    neighborhood_number,
    block
"""


def parse_limit(raw, default: int, maximum: int) -> int:
    """
    The limit query parameter as an int in 1..maximum; default when absent.
    """
    if raw is None:
        return default
    try:
        limit = parse_int(raw)
    except ValueError:
        raise InvalidParameterError("limit", raw)
    if limit < 1 or limit > maximum:
        raise InvalidParameterError("limit", raw, f"must be between 1 and {maximum}")
    return limit


def build_incident_query(args, default_limit: int = 1000, max_limit: int = 50000):
    """
    SQL text and bind parameters for GET /incidents.

    The limit is bound like every other value, under the name "limit",
    after the filter parameters.

    Raises:
        InvalidParameterError: a filter token or the limit did not parse.
    """
    compiled = compile_filters(args, INCIDENT_FILTERS)
    limit = parse_limit(args.get("limit"), default_limit, max_limit)

    sql = (
        f"SELECT {INCIDENT_COLUMNS} FROM Incidents {compiled.clause} "
        "ORDER BY date_time DESC LIMIT :limit"
    )
    params = dict(compiled.params)
    params["limit"] = limit
    return sql, params


def get_incidents(gateway, args, default_limit: int = 1000, max_limit: int = 50000):
    """
    Incidents matching every filter present in args, newest first.

    Args:
        gateway: Gateway for the crime database
        args: query parameters (start_date, end_date, code, grid, neighborhood, limit)

    Returns:
        List of dicts with case_number, date, time, code, incident,
        police_grid, neighborhood_number and block.
    """
    sql, params = build_incident_query(args, default_limit, max_limit)
    logger.debug(f"Incident query: {sql} {params}")
    return gateway.select(sql, params)
