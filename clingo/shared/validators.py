"""Shared validation utilities"""

import re
import uuid
from typing import Optional

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# Largest value an INTEGER column holds on every supported backend (Postgres int4)
MAX_INTEGER_ID = 2**31 - 1


def validate_uuid(value) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(str(value))
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """
    Validate a wall-clock time in 24h HH:MM format.

    Raises:
        ValueError: If the value is not HH:MM
    """
    if value is None:
        return value
    value = value.strip()
    if not TIME_OF_DAY_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format (24h)")
    return value


def parse_numeric_id(value) -> Optional[int]:
    """
    Accept an integer id or its string form ("12", " 12 ").
    Returns None for anything else, including booleans and ids outside
    the range of an INTEGER primary key.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and 0 < value <= MAX_INTEGER_ID:
        return value
    return None
