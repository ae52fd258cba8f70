"""
repositories/settings_repo.py
------------------------------
Key/value storage for application settings (e.g. the default exchange rate).
Values are stored as text; callers parse them.
"""

from typing import Optional

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)


class SettingsRepository:
    """Repository for the settings table."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value for `key`, or None if it was never saved."""
        sql = "SELECT value FROM settings WHERE key = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (key,))
                row = cur.fetchone()
                return row[0] if row else None
        finally:
            release_connection(conn)

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite a setting."""
        sql = """
            INSERT INTO settings (key, value, updated_at)
            VALUES (%s, %s, NOW())
            ON CONFLICT (key)
            DO UPDATE SET value = EXCLUDED.value, updated_at = NOW();
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (key, value))
            conn.commit()
            logger.info(f"Saved setting '{key}' = {value}")
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to save setting '{key}': {e}")
            raise
        finally:
            release_connection(conn)


class InMemorySettingsStore:
    """Process-local settings store. Used when no database is configured."""

    def __init__(self, initial: Optional[dict] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
