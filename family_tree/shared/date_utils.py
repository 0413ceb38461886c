"""
Date conversion between stored ISO dates and GEDCOM DATE values
"""

import re
from datetime import date, datetime


class GEDCOMDateParser:
    """Handles the date shapes exchanged through GEDCOM files"""

    MONTHS = {
        'JAN': 1, 'FEB': 2, 'MAR': 3, 'APR': 4, 'MAY': 5, 'JUN': 6,
        'JUL': 7, 'AUG': 8, 'SEP': 9, 'OCT': 10, 'NOV': 11, 'DEC': 12
    }

    COMPACT_PATTERN = re.compile(r'^(\d{4})(\d{2})(\d{2})$')
    ISO_PATTERN = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$')
    DAY_MONTH_YEAR_PATTERN = re.compile(r'^(\d{1,2})\s+([A-Za-z]{3})\s+(\d{4})$')

    @classmethod
    def parse(cls, value) -> date | None:
        """Parse a date value; returns None when it is not a full calendar date"""
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        text = str(value).strip()
        if not text:
            return None

        try:
            match = cls.COMPACT_PATTERN.match(text)
            if match:
                return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

            match = cls.ISO_PATTERN.match(text)
            if match:
                return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

            match = cls.DAY_MONTH_YEAR_PATTERN.match(text)
            if match:
                month = cls.MONTHS.get(match.group(2).upper())
                if month:
                    return date(int(match.group(3)), month, int(match.group(1)))
        except ValueError:
            # Out-of-range day or month
            return None

        return None

    @classmethod
    def to_gedcom(cls, value) -> str:
        """Format as YYYYMMDD, or empty string when unparsable"""
        parsed = cls.parse(value)
        if not parsed:
            return ''
        return f"{parsed.year:04d}{parsed.month:02d}{parsed.day:02d}"

    @classmethod
    def to_iso(cls, value) -> str | None:
        """Format as YYYY-MM-DD, or None when unparsable"""
        parsed = cls.parse(value)
        return parsed.isoformat() if parsed else None
