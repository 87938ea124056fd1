"""
PostgreSQL connection helpers

All repositories open a connection per call through this module and close
it when done.

Author: TM3
Updated: 2025-11-20
"""
import psycopg2
from psycopg2.extras import RealDictCursor
from .config import settings


class DatabaseNotConfiguredError(RuntimeError):
    """Raised when a repository is used without DATABASE_URL"""


def get_db_connection():
    """
    Get a direct psycopg2 database connection (returns tuples)

    Returns:
        psycopg2 connection object

    Raises:
        DatabaseNotConfiguredError if DATABASE_URL is not configured
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise DatabaseNotConfiguredError("DATABASE_URL not configured")

    return psycopg2.connect(database_url)


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM orders")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise DatabaseNotConfiguredError("DATABASE_URL not configured")

    return psycopg2.connect(database_url, cursor_factory=RealDictCursor)


def check_connection() -> bool:
    """Run SELECT 1 against the database, used by the health endpoint"""
    conn = get_db_connection()
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT 1")
        return cursor.fetchone()[0] == 1
    finally:
        cursor.close()
        conn.close()
