"""
gateway.py
----------
Data access gateway: the only place SQL text meets the database.

Two operations, both parameterized:
    select(sql, params) -> list of row dicts
    run(sql, params)    -> number of affected rows

transaction() hands out the same pair bound to a single connection, for
read-then-write sequences that must not interleave with another writer.
"""

import logging
import threading
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def _select(conn: Connection, sql: str, params=None):
    result = conn.execute(text(sql), params or {})
    return [dict(row._mapping) for row in result]


def _run(conn: Connection, sql: str, params=None) -> int:
    result = conn.execute(text(sql), params or {})
    return result.rowcount


class Transaction:
    """select/run bound to one open connection inside Gateway.transaction()."""

    def __init__(self, conn: Connection):
        self._conn = conn

    def select(self, sql: str, params=None):
        return _select(self._conn, sql, params)

    def run(self, sql: str, params=None) -> int:
        return _run(self._conn, sql, params)


class Gateway:
    """
    Owns the engine for one database. Built once by create_app() and passed
    to every blueprint factory.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        # Serializes check-then-act writes within this process
        self._write_lock = threading.Lock()

    def select(self, sql: str, params=None):
        """Run a read query and return its rows as dicts."""
        try:
            with self.engine.connect() as conn:
                return _select(conn, sql, params)
        except SQLAlchemyError as e:
            logger.error(f"Select failed: {e}")
            raise

    def run(self, sql: str, params=None) -> int:
        """Run an INSERT/DELETE in its own transaction and return the affected row count."""
        try:
            with self.engine.begin() as conn:
                return _run(conn, sql, params)
        except SQLAlchemyError as e:
            logger.error(f"Write failed: {e}")
            raise

    @contextmanager
    def transaction(self):
        """
        Usage:
            with gateway.transaction() as tx:
                rows = tx.select(...)
                tx.run(...)

        Commits when the block exits cleanly, rolls back if it raises.
        """
        with self._write_lock:
            with self.engine.begin() as conn:
                yield Transaction(conn)

    def ping(self) -> bool:
        """True when the database answers SELECT 1."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def dispose(self):
        self.engine.dispose()
