# src/crime_api/processors/lookups.py

"""
Lookup processors for the two reference tables, Codes and Neighborhoods.
Each takes one optional id list and returns the rows ordered by primary key.
"""

from crime_api.processors.filters import FilterDimension, compile_filters

CODE_FILTERS = [FilterDimension("code", "code")]
NEIGHBORHOOD_FILTERS = [FilterDimension("id", "neighborhood_number")]


def get_codes(gateway, args):
    """
    Crime codes as [{"code": int, "type": str}], ordered by code.

    Args:
        gateway: Gateway for the crime database
        args: query parameters; only "code" (comma-separated integers) is used
    """
    compiled = compile_filters(args, CODE_FILTERS)
    sql = f"SELECT code, incident_type AS type FROM Codes {compiled.clause} ORDER BY code"
    return gateway.select(sql, compiled.params)


def get_neighborhoods(gateway, args):
    """
    Neighborhoods as [{"id": int, "name": str}], ordered by id.

    Args:
        gateway: Gateway for the crime database
        args: query parameters; only "id" (comma-separated integers) is used
    """
    compiled = compile_filters(args, NEIGHBORHOOD_FILTERS)
    sql = (
        "SELECT neighborhood_number AS id, neighborhood_name AS name "
        f"FROM Neighborhoods {compiled.clause} ORDER BY neighborhood_number"
    )
    return gateway.select(sql, compiled.params)
