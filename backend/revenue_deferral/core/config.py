"""
Centralized application configuration

Author: TM3
Date: 2025-10-17
Updated: 2025-11-20 (finance dates: logging and membership category settings)
"""
import json
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application configuration"""

    # API Settings
    API_TITLE: str = "Revenue Deferral API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Revenue deferral dates for order line items"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False

    # Database (repositories raise at connection time if missing)
    DATABASE_URL: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False
    FINANCE_DEBUG: bool = False

    # Finance dates
    # Either comma-separated ("membership,club") or a JSON array
    MEMBERSHIP_CATEGORIES: Optional[str] = "membership"
    DISPLAY_DATE_FORMAT: str = "%B %d, %Y"
    # Membership subsystem date calculator, "package.module:function".
    # Unset: membership subsystem unavailable, lifecycle hooks skip membership dates
    MEMBERSHIP_DATE_CALCULATOR: Optional[str] = None

    # CORS - Can be string (comma-separated) or JSON array
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        return _parse_list(self.ALLOWED_ORIGINS) or ["http://localhost:3000"]

    def get_membership_categories(self) -> List[str]:
        """Parse MEMBERSHIP_CATEGORIES into a list of category slugs"""
        return _parse_list(self.MEMBERSHIP_CATEGORIES) or ["membership"]

    class Config:
        env_file = ".env"
        case_sensitive = True


def _parse_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []

    # Try JSON parse first (for array format)
    try:
        values = json.loads(raw)
        if isinstance(values, list):
            return [str(value).strip() for value in values if str(value).strip()]
    except (json.JSONDecodeError, ValueError):
        pass

    # Fall back to comma-separated string
    return [value.strip() for value in raw.split(",") if value.strip()]


settings = Settings()
