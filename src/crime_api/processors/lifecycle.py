# src/crime_api/processors/lifecycle.py

"""
Incident lifecycle: adding a new incident and removing one by case number.

Both operations check the case number first and then write. The check and
the write share one Gateway.transaction(), so a second request for the same
case number cannot slip in between them.
"""

import logging

from sqlalchemy.exc import IntegrityError

from crime_api.errors import IncidentExistsError, IncidentNotFoundError

logger = logging.getLogger(__name__)

FIND_CASE_SQL = "SELECT case_number FROM Incidents WHERE case_number = :case_number"

INSERT_INCIDENT_SQL = """
    INSERT INTO Incidents
        (case_number, date_time, code, incident, police_grid, neighborhood_number, block)
    VALUES
        (:case_number, :date_time, :code, :incident, :police_grid, :neighborhood_number, :block)
"""

DELETE_INCIDENT_SQL = "DELETE FROM Incidents WHERE case_number = :case_number"


def add_incident(gateway, incident):
    """
    Insert a new incident unless its case number is already stored.

    Args:
        gateway: Gateway for the crime database
        incident: the seven Incidents columns, as returned by parse_new_incident()

    Raises:
        IncidentExistsError: the case number is taken (also when the store's
            own uniqueness constraint rejects the insert).
        SQLAlchemyError: any other store failure.
    """
    case_number = incident["case_number"]
    try:
        with gateway.transaction() as tx:
            if tx.select(FIND_CASE_SQL, {"case_number": case_number}):
                raise IncidentExistsError(case_number)
            tx.run(INSERT_INCIDENT_SQL, incident)
    except IntegrityError as e:
        logger.warning(f"Insert of case {case_number} hit a constraint: {e}")
        raise IncidentExistsError(case_number) from e

    logger.info(f"Added incident {case_number}")


def remove_incident(gateway, case_number: str) -> int:
    """
    Delete every row with this case number.

    Returns:
        Number of rows deleted (at least 1).

    Raises:
        IncidentNotFoundError: no row has this case number.
        SQLAlchemyError: store failure.
    """
    with gateway.transaction() as tx:
        if not tx.select(FIND_CASE_SQL, {"case_number": case_number}):
            raise IncidentNotFoundError(case_number)
        deleted = tx.run(DELETE_INCIDENT_SQL, {"case_number": case_number})

    logger.info(f"Removed incident {case_number} ({deleted} row(s))")
    return deleted
