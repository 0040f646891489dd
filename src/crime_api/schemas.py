"""
schemas.py
----------
JSON schemas for the bodies of PUT /new-incident and DELETE /remove-incident.
The same dicts are published in the Open API document.
"""

from jsonschema import FormatChecker, validate

from crime_api.processors.filters import INT_MAX, INT_MIN

# Non-blank after trimming
_TEXT_ID = {"type": "string", "minLength": 1, "pattern": "\\S"}

# Fits SQLite INTEGER
_INTEGER = {"type": "integer", "minimum": INT_MIN, "maximum": INT_MAX}

NEW_INCIDENT_SCHEMA = {
    "type": "object",
    "required": ["case_number", "date", "time", "code", "incident",
                 "police_grid", "neighborhood_number", "block"],
    "properties": {
        "case_number": dict(_TEXT_ID, example="22000001"),
        "date": {"type": "string", "format": "date", "pattern": "^\\d{4}-\\d{2}-\\d{2}$", "example": "2022-05-31"},
        "time": {"type": "string", "pattern": "^([01]\\d|2[0-3]):[0-5]\\d(:[0-5]\\d)?$", "example": "23:50:00"},
        "code": dict(_INTEGER, example=600),
        "incident": {"type": "string", "example": "Theft"},
        "police_grid": dict(_INTEGER, example=87),
        "neighborhood_number": dict(_INTEGER, example=7),
        "block": {"type": "string", "example": "98X UNIVERSITY AV W"},
    },
}

CASE_NUMBER_SCHEMA = {
    "type": "object",
    "required": ["case_number"],
    "properties": {"case_number": dict(_TEXT_ID, example="22000001")},
}


def describe_error(error) -> str:
    """'code: 'six hundred' is not of type 'integer'' style message for a ValidationError."""
    field = ".".join(str(part) for part in error.absolute_path) or "body"
    return f"{field}: {error.message}"


def parse_new_incident(body) -> dict:
    """
    Validate a PUT /new-incident body and turn it into the seven Incidents
    columns, with date and time joined as date_time (2022-05-31T23:50:00).

    Raises:
        jsonschema.ValidationError: the body does not match NEW_INCIDENT_SCHEMA.
    """
    validate(instance=body, schema=NEW_INCIDENT_SCHEMA, format_checker=FormatChecker())

    time = body["time"]
    if len(time) == 5:
        time += ":00"

    return {
        "case_number": body["case_number"].strip(),
        "date_time": body["date"] + "T" + time,
        # JSON Schema counts 600.0 as an integer; bind it as 600
        "code": int(body["code"]),
        "incident": body["incident"].strip(),
        "police_grid": int(body["police_grid"]),
        "neighborhood_number": int(body["neighborhood_number"]),
        "block": body["block"].strip(),
    }


def parse_case_number(body) -> str:
    """Validate a DELETE /remove-incident body and return its case number."""
    validate(instance=body, schema=CASE_NUMBER_SCHEMA)
    return body["case_number"].strip()
