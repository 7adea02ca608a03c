"""
Database connection and query utilities.

Provides a simple interface for executing queries with psycopg,
returning results as dictionaries.

Every helper opens its own short-lived connection unless it runs inside
transaction(), in which case all helpers on the same thread share one
connection and commit or roll back together.

For testing, use set_connection_override() to inject a connection
that will be used instead of creating new ones. This enables
transaction rollback between tests.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.rows import dict_row

from crudkeys.config import config

logger = logging.getLogger(__name__)

# =============================================================================
# Connection Override (for testing)
# =============================================================================

_connection_override: psycopg.Connection | None = None


def set_connection_override(conn: psycopg.Connection) -> None:
    """
    Set a connection to use instead of creating new ones.

    Used by test fixtures to ensure all database operations run
    within a single transaction that can be rolled back.

    Args:
        conn: The connection to use for all subsequent operations
    """
    global _connection_override
    _connection_override = conn


def clear_connection_override() -> None:
    """Clear the connection override, restoring normal behavior."""
    global _connection_override
    _connection_override = None


# =============================================================================
# Connection Management
# =============================================================================

# Connection bound by transaction(), one per thread
_local = threading.local()


def _bound_connection() -> psycopg.Connection | None:
    return getattr(_local, "conn", None)


@contextmanager
def get_connection():
    """
    Context manager for database connections.

    In normal operation:
        - Opens a new connection
        - Commits on successful exit
        - Rolls back on exception
        - Closes connection when done

    Inside transaction():
        - Returns the connection bound to the current thread
        - Does NOT commit, rollback, or close

    With override set (testing):
        - Returns the override connection
        - Does NOT commit, rollback, or close
        - Caller (test fixture) manages the transaction

    Usage:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT ...")
    """
    if _connection_override is not None:
        yield _connection_override
        return

    bound = _bound_connection()
    if bound is not None:
        yield bound
        return

    conn = psycopg.connect(config.database_url)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def transaction():
    """
    Run every query issued on this thread in a single transaction.

    Commits when the block exits normally and rolls back when it raises.
    Nested calls join the outer transaction. With a connection override
    set, the override's own transaction is used and left to the caller.

    Usage:
        with db.transaction():
            db.lock_collection("employees")
            db.execute("INSERT ...")
    """
    if _connection_override is not None or _bound_connection() is not None:
        with get_connection() as conn:
            yield conn
        return

    conn = psycopg.connect(config.database_url)
    _local.conn = conn
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        _local.conn = None
        conn.close()


@contextmanager
def get_cursor():
    """
    Context manager for a cursor with dict rows.

    Convenience wrapper when you just need a cursor.

    Usage:
        with get_cursor() as cur:
            cur.execute("SELECT * FROM employees")
            rows = cur.fetchall()  # List of dicts
    """
    with get_connection() as conn:
        with conn.cursor(row_factory=dict_row) as cur:
            yield cur


# =============================================================================
# Query Helpers
# =============================================================================


def execute(query, params: tuple = None) -> int:
    """
    Execute a query without returning results.

    Use for INSERT, UPDATE, DELETE when you don't need the affected rows.

    Args:
        query: SQL query with %s placeholders
        params: Tuple of parameter values

    Returns:
        Number of rows affected
    """
    with get_cursor() as cur:
        cur.execute(query, params)
        return cur.rowcount


def fetch_one(query, params: tuple = None) -> dict[str, Any] | None:
    """
    Execute a query and return a single row as dict.

    Args:
        query: SQL query with %s placeholders
        params: Tuple of parameter values

    Returns:
        Dict of column names to values, or None if no row found
    """
    with get_connection() as conn:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(query, params)
            return cur.fetchone()


def fetch_all(query, params: tuple = None) -> list[dict[str, Any]]:
    """
    Execute a query and return all rows as list of dicts.

    Args:
        query: SQL query with %s placeholders
        params: Tuple of parameter values

    Returns:
        List of dicts, empty list if no rows found
    """
    with get_connection() as conn:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(query, params)
            return cur.fetchall()


# =============================================================================
# Batch Operations
# =============================================================================


def execute_many(query, params_list: list[tuple]) -> int:
    """
    Execute a query multiple times with different parameters.

    More efficient than calling execute() in a loop for bulk inserts.

    Args:
        query: SQL query with %s placeholders
        params_list: List of parameter tuples

    Returns:
        Number of rows affected
    """
    if not params_list:
        return 0
    with get_cursor() as cur:
        cur.executemany(query, params_list)
        return cur.rowcount


# =============================================================================
# Locking
# =============================================================================


def lock_collection(collection: str) -> None:
    """
    Take a transaction-scoped advisory lock for a collection.

    The lock is released when the surrounding transaction commits or
    rolls back, so it must be called inside transaction(). Used to make
    key generation and the following insert atomic with respect to other
    writers of the same collection.

    Args:
        collection: Table name the lock is keyed on
    """
    logger.debug("Locking collection %s", collection)
    execute("SELECT pg_advisory_xact_lock(hashtext(%s))", (collection,))
