"""
session.py
-----------
Creates the database engine for SQLAlchemy.
The app builds one engine at startup and hands it to the Gateway;
nothing in the package keeps a module-level connection.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Build the engine for the crime database, like:
        sqlite:///db/stpaul_crime.sqlite3

    The SQLite file is opened read-write and must already exist with its tables.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Flask serves requests on worker threads; the pool hands connections across them
        connect_args["check_same_thread"] = False

    engine = create_engine(database_url, echo=echo, pool_pre_ping=True, connect_args=connect_args)

    if engine.dialect.name == "sqlite":
        _use_explicit_sqlite_transactions(engine)

    return engine


def _use_explicit_sqlite_transactions(engine: Engine):
    """
    pysqlite defers BEGIN until the first write, so a SELECT-then-INSERT
    would read outside the transaction. Emit BEGIN ourselves so the
    lifecycle's existence check and its write share one transaction.
    """
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")
