"""
db/connection.py
----------------
Manages the PostgreSQL connection pool shared by all repositories.
Uses psycopg2's SimpleConnectionPool so each repository call borrows a
connection and hands it back when done.
"""

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


def init_pool(min_conn: int = 1, max_conn: int = 5, dsn: str = DATABASE_URL) -> None:
    """
    Open the connection pool. Calling it again is a no-op.

    Args:
        min_conn: Connections opened up front.
        max_conn: Upper bound on simultaneous connections.
        dsn: PostgreSQL connection string (defaults to config.DATABASE_URL).

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, dsn)
        logger.info("Database connection pool initialized successfully.")
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise


def get_connection():
    """
    Borrow a connection from the pool.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """Hand a borrowed connection back to the pool."""
    if _pool is not None:
        _pool.putconn(conn)


def close_pool() -> None:
    """Close every pooled connection."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database connection pool closed.")
