"""
Daily match utilities
"""

from .helpers import (
    parse_age,
    parse_match_date,
    today_utc,
    extract_bearer_token
)

__all__ = [
    'parse_age',
    'parse_match_date',
    'today_utc',
    'extract_bearer_token'
]
