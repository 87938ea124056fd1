"""
Date Formatter - validation and conversion of finance dates

- Storage format: YYYY-MM-DD (2024-01-15)
- Upstream format: ISO 8601 from the membership subsystem
  (2024-01-15T00:00:00+00:00)
- Display format: DISPLAY_DATE_FORMAT setting

None of these methods raise for malformed input: invalid values come back
as an empty string and the caller decides what to log.

Author: TM3
Date: 2025-11-20
"""
import re
from datetime import datetime, timezone
from typing import Any, Optional

from revenue_deferral.core.config import settings

STORAGE_FORMAT = '%Y-%m-%d'

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')


class DateFormatter:
    """Date validation, formatting and conversion between formats"""

    STORAGE_FORMAT = STORAGE_FORMAT

    def __init__(self, display_format: Optional[str] = None):
        self.display_format = display_format or settings.DISPLAY_DATE_FORMAT

    def validate(self, date: Any, fmt: str = STORAGE_FORMAT) -> bool:
        """
        Validate a date string against a format

        The value must survive a parse/format round trip unchanged, so
        2024-02-30 and 2024-1-5 are both rejected.
        """
        if not date or not isinstance(date, str):
            return False

        try:
            parsed = datetime.strptime(date, fmt)
        except ValueError:
            return False

        return parsed.strftime(fmt) == date

    def validate_date_range(self, start_date: str, end_date: str) -> bool:
        """True if both dates are valid and end >= start"""
        if not self.validate(start_date) or not self.validate(end_date):
            return False

        return end_date >= start_date

    def format_for_display(self, date: str) -> str:
        """Format a storage date for customers, empty string if invalid"""
        if not self.validate(date):
            return ''

        return datetime.strptime(date, STORAGE_FORMAT).strftime(self.display_format)

    def to_storage_format(self, date: Any, fmt: str = '') -> str:
        """
        Convert a date to storage format

        Args:
            date: Date string in storage, given or ISO 8601 format
            fmt: Optional strptime format of the input

        Returns:
            Date in YYYY-MM-DD, or empty string if it cannot be parsed
        """
        if not date or not isinstance(date, str):
            return ''

        if self.validate(date, STORAGE_FORMAT):
            return date

        if fmt:
            try:
                return datetime.strptime(date, fmt).strftime(STORAGE_FORMAT)
            except ValueError:
                pass

        # ISO 8601 fallback, aware values are normalised to UTC
        try:
            parsed = datetime.fromisoformat(date.replace('Z', '+00:00'))
        except ValueError:
            return ''

        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)

        return parsed.strftime(STORAGE_FORMAT)

    def sanitize_date_input(self, date: Any) -> str:
        """Clean up a user-submitted date, empty string if invalid"""
        if not date or not isinstance(date, str):
            return ''

        date = _CONTROL_CHARS.sub('', date).strip()

        return self.to_storage_format(date)

    def get_current_date(self) -> str:
        """Today (UTC) in storage format"""
        return datetime.now(timezone.utc).strftime(STORAGE_FORMAT)

    def from_iso_8601(self, iso_date: Any) -> str:
        """
        Convert an ISO 8601 timestamp to storage format

        Only the date portion (first 10 characters) is kept; the time and
        offset are dropped without conversion.

        Returns:
            Date in YYYY-MM-DD, or empty string if invalid
        """
        if not iso_date or not isinstance(iso_date, str):
            return ''

        date_part = iso_date[:10]

        if self.validate(date_part, STORAGE_FORMAT):
            return date_part

        return ''
