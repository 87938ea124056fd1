"""
Option Repository - key/value settings storage

FinanceSettings reads its options through the OptionStore interface.
OptionRepository stores them in the finance_options table (JSONB values);
InMemoryOptionStore keeps them in a dict (local runs and tests).

Author: TM3
Date: 2025-11-20
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from psycopg2.extras import Json
from revenue_deferral.core.database import get_db_connection_dict


class OptionStore(ABC):
    """Flat key/value option storage"""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or default when the option is absent"""

    @abstractmethod
    def update(self, key: str, value: Any) -> bool:
        """Store a value, returns True on success"""


class InMemoryOptionStore(OptionStore):

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        self.options: Dict[str, Any] = dict(options or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def update(self, key: str, value: Any) -> bool:
        self.options[key] = value
        return True


class OptionRepository(OptionStore):
    """Repository for the finance_options table"""

    def get(self, key: str, default: Any = None) -> Any:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT option_value
                FROM finance_options
                WHERE option_name = %s
            """, (key,))

            row = cursor.fetchone()
            if not row:
                return default

            return row['option_value']

        finally:
            cursor.close()
            conn.close()

    def update(self, key: str, value: Any) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO finance_options (option_name, option_value)
                VALUES (%s, %s)
                ON CONFLICT (option_name)
                DO UPDATE SET option_value = EXCLUDED.option_value
            """, (key, Json(value)))

            conn.commit()
            return True

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
