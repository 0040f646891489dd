"""
config.py
---------
Runtime settings for the crime API, read from environment variables.
A .env file in the working directory is loaded first, if there is one.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# SQLite file holding the Incidents, Codes and Neighborhoods tables
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///db/stpaul_crime.sqlite3")

HOST = os.getenv("CRIME_API_HOST", "0.0.0.0")
PORT = int(os.getenv("CRIME_API_PORT", "8000"))

# Row cap for GET /incidents when no limit is given, and the largest accepted limit
DEFAULT_INCIDENT_LIMIT = int(os.getenv("DEFAULT_INCIDENT_LIMIT", "1000"))
MAX_INCIDENT_LIMIT = int(os.getenv("MAX_INCIDENT_LIMIT", "50000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SQL_ECHO = os.getenv("SQL_ECHO", "False").lower() == "true"
DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"


def as_dict():
    """Settings in the shape create_app() expects, so tests can override single keys."""
    return {
        "DATABASE_URL": DATABASE_URL,
        "DEFAULT_INCIDENT_LIMIT": DEFAULT_INCIDENT_LIMIT,
        "MAX_INCIDENT_LIMIT": MAX_INCIDENT_LIMIT,
        "SQL_ECHO": SQL_ECHO,
    }
