"""
Date and time utility functions.
"""

import time
from datetime import datetime


def get_current_timestamp() -> datetime:
    """Get current UTC timestamp (naive, as stored by MongoDB)."""
    return datetime.utcnow()


def current_millis() -> int:
    """Unix time in milliseconds."""
    return int(time.time() * 1000)


def is_valid_date(date_str: str, format_str: str = "%Y-%m-%d") -> bool:
    """Check if date string is valid."""
    try:
        datetime.strptime(date_str, format_str)
        return True
    except ValueError:
        return False
