"""Connection wrapper with manual transaction control.

DatabaseHelper holds one psycopg2 connection and at most one open statement
cursor. Each execute call closes the previous cursor before opening a new
one. Driver errors propagate unchanged.

Usage::

    with DatabaseHelper() as db:
        db.execute_update("UPDATE accounts SET active = %s WHERE id = %s", (False, 7))
        db.commit()
        rows = db.execute_query("SELECT id, active FROM accounts")
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from psycopg2.extras import RealDictCursor, execute_batch

from .config import get_database_url
from .connection import get_connection

logger = logging.getLogger(__name__)

Params = Optional[Union[Sequence[Any], Mapping[str, Any]]]


class DatabaseHelperError(Exception):
    """Base error for misuse of the wrapper (not raised for driver errors)."""


class NotConnectedError(DatabaseHelperError):
    """Raised when an operation needs a connection and none is open."""


class DatabaseHelper:
    def __init__(self, auto_connect: bool = True, auto_commit: bool = False,
                 url: Optional[str] = None):
        self.url = get_database_url(url)
        self.auto_commit = auto_commit
        self._conn = None
        self._cursor = None
        if auto_connect:
            self.connect()

    @property
    def connection(self):
        """The underlying psycopg2 connection, or None before connect()."""
        return self._conn

    def connect(self):
        """Open the connection and apply the autocommit mode."""
        if self._conn is not None:
            self.close()
        self._conn = get_connection(self.url)
        self._conn.autocommit = self.auto_commit
        logger.debug("Connected (autocommit=%s)", self.auto_commit)

    def execute_query(self, sql: str, params: Params = None) -> list:
        """Run a SELECT and return every row as a dict."""
        cur = self._execute(sql, params)
        return cur.fetchall()

    def fetch_one(self, sql: str, params: Params = None) -> Optional[dict]:
        """Run a SELECT and return the first row, or None."""
        cur = self._execute(sql, params)
        return cur.fetchone()

    def execute_update(self, sql: str, params: Params = None) -> int:
        """Run CREATE/INSERT/UPDATE/DELETE and return the affected row count."""
        cur = self._execute(sql, params)
        return cur.rowcount

    def execute_many(self, sql: str,
                     params_seq: Iterable[Union[Sequence[Any], Mapping[str, Any]]]) -> int:
        """Run one statement for each parameter set. Returns the number of sets."""
        rows = list(params_seq)
        if not rows:
            return 0
        cur = self._new_cursor()
        logger.info("SQL (batch of %d): %s", len(rows), sql)
        logger.debug("Params: %r", rows)
        execute_batch(cur, sql, rows)
        return len(rows)

    def commit(self):
        self._require_connection().commit()

    def rollback(self):
        self._require_connection().rollback()

    def close(self):
        """Close the open statement and the connection. Safe to call twice."""
        self._close_cursor()
        if self._conn is not None:
            conn, self._conn = self._conn, None
            conn.close()

    def __enter__(self):
        if self._conn is None:
            self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _execute(self, sql, params):
        cur = self._new_cursor()
        logger.info("SQL: %s", sql)
        if params is None:
            cur.execute(sql)
        else:
            logger.debug("Params: %r", params)
            cur.execute(sql, params)
        return cur

    def _new_cursor(self):
        conn = self._require_connection()
        self._close_cursor()
        self._cursor = conn.cursor(cursor_factory=RealDictCursor)
        return self._cursor

    def _close_cursor(self):
        if self._cursor is not None:
            cur, self._cursor = self._cursor, None
            cur.close()

    def _require_connection(self):
        if self._conn is None:
            raise NotConnectedError("Not connected; call connect() first")
        return self._conn
