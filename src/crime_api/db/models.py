"""
models.py
----------
SQLAlchemy ORM models for the three tables of the St. Paul crime database.

The production database file ships with these tables already filled; the
service never creates or alters them. The models exist so an empty store
(tests, local development) can be laid out the same way with create_tables().
"""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Code(Base):
    """Crime code reference table (seed data)."""
    __tablename__ = "Codes"

    code = Column(Integer, primary_key=True)
    incident_type = Column(Text)


class Neighborhood(Base):
    """District council neighborhoods (seed data)."""
    __tablename__ = "Neighborhoods"

    neighborhood_number = Column(Integer, primary_key=True)
    neighborhood_name = Column(Text)


class Incident(Base):
    """
    One reported crime incident.

    Columns:
        case_number          - unique case number, also the primary key
        date_time            - text timestamp like 2022-05-31T23:50:00
        code                 - references Codes.code (not enforced)
        incident             - free text description
        police_grid          - police grid number
        neighborhood_number  - references Neighborhoods.neighborhood_number (not enforced)
        block                - address fragment, e.g. "98X UNIVERSITY AV W"
    """
    __tablename__ = "Incidents"

    case_number = Column(String(32), primary_key=True)
    date_time = Column(String(32))
    code = Column(Integer)
    incident = Column(Text)
    police_grid = Column(Integer)
    neighborhood_number = Column(Integer)
    block = Column(Text)


def create_tables(engine):
    """Create all tables if not present."""
    Base.metadata.create_all(engine)
