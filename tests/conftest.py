# tests/conftest.py

"""
Shared fixtures: a fresh SQLite crime database per test, seeded with a few
codes, neighborhoods and incidents, plus the Flask app and test client on top.
"""

import pytest
from sqlalchemy import text

from crime_api.app import create_app
from crime_api.db.models import create_tables
from crime_api.db.session import make_engine

CODES = [
    (100, "Homicide"),
    (110, "Murder, Non Negligent Manslaughter"),
    (300, "Robbery"),
    (600, "Theft"),
    (700, "Auto Theft"),
]

NEIGHBORHOODS = [
    (1, "Conway/Battlecreek/Highwood"),
    (2, "Greater East Side"),
    (3, "West Side"),
    (7, "Thomas/Dale(Frogtown)"),
    (8, "Summit/University"),
]

# Newest first: 22000006, 22000005, ... 22000001
INCIDENTS = [
    ("22000001", "2022-05-01T10:00:00", 100, "Homicide", 87, 7, "98X UNIVERSITY AV W"),
    ("22000002", "2022-05-02T11:30:00", 600, "Theft", 87, 7, "10X DALE ST N"),
    ("22000003", "2022-05-03T09:15:00", 100, "Homicide", 12, 1, "15X RUTH ST"),
    ("22000004", "2022-05-04T22:05:00", 300, "Robbery", 66, 8, "SNELLING AV & UNIVERSITY"),
    ("22000005", "2022-05-05T08:00:00", 700, "Auto Theft", 87, 7, "4XX CHARLES AV"),
    ("22000006", "2022-05-06T17:45:00", 100, "Homicide", 99, 3, "2XX WABASHA ST S"),
]


def seed(engine):
    """Insert the reference rows and incidents above with raw SQL."""
    with engine.begin() as conn:
        conn.execute(
            text("INSERT INTO Codes (code, incident_type) VALUES (:code, :type)"),
            [{"code": c, "type": t} for c, t in CODES],
        )
        conn.execute(
            text("INSERT INTO Neighborhoods (neighborhood_number, neighborhood_name) VALUES (:id, :name)"),
            [{"id": i, "name": n} for i, n in NEIGHBORHOODS],
        )
        conn.execute(
            text("""
                INSERT INTO Incidents
                    (case_number, date_time, code, incident, police_grid, neighborhood_number, block)
                VALUES (:case_number, :date_time, :code, :incident, :grid, :neighborhood, :block)
            """),
            [
                {"case_number": cn, "date_time": dt, "code": code, "incident": inc,
                 "grid": grid, "neighborhood": nb, "block": block}
                for cn, dt, code, inc, grid, nb, block in INCIDENTS
            ],
        )


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'stpaul_crime.sqlite3'}"


@pytest.fixture
def engine(database_url):
    engine = make_engine(database_url)
    create_tables(engine)
    seed(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def app(engine, database_url):
    app = create_app({"DATABASE_URL": database_url}, engine=engine)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client fixture."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def gateway(app):
    return app.extensions["gateway"]


@pytest.fixture
def count_incidents(engine):
    """Row count of Incidents, optionally for one case number."""
    def count(case_number=None):
        sql = "SELECT COUNT(*) FROM Incidents"
        params = {}
        if case_number is not None:
            sql += " WHERE case_number = :case_number"
            params["case_number"] = case_number
        with engine.connect() as conn:
            return conn.execute(text(sql), params).scalar_one()
    return count
