"""
Utility functions for daily match generation
"""

import re
from datetime import date, datetime, timezone
from typing import Optional, Union


def parse_age(value) -> Optional[int]:
    """
    Parse age from various formats

    Args:
        value: Age like 34, '34', '34.0', None

    Returns:
        Integer age, or None when missing or unparseable
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        age = int(float(str(value).strip()))
    except (ValueError, TypeError):
        return None
    return age if age >= 0 else None


def today_utc() -> date:
    """Current calendar date in UTC, the unit of match idempotency"""
    return datetime.now(timezone.utc).date()


def parse_match_date(value: Union[str, date, datetime, None]) -> date:
    """
    Parse a match date

    Args:
        value: 'YYYY-MM-DD' string, date, datetime, or None for today (UTC)

    Returns:
        Calendar date

    Raises:
        ValueError: if the string is not an ISO date
    """
    if value is None:
        return today_utc()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """
    Pull the JWT out of an Authorization header

    Args:
        header: Header value like 'Bearer eyJ...'

    Returns:
        Token string, or None if the header is missing or malformed
    """
    if not header:
        return None
    match = re.match(r'^\s*Bearer\s+(\S+)\s*$', header, re.IGNORECASE)
    return match.group(1) if match else None
