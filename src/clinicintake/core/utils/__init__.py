"""
Utility functions shared across Clinic-Intake layers.
"""

from .datetime_utils import current_millis, get_current_timestamp, is_valid_date
from .string_utils import generate_id, normalize_whitespace, validate_email

__all__ = [
    "current_millis",
    "get_current_timestamp",
    "is_valid_date",
    "generate_id",
    "normalize_whitespace",
    "validate_email",
]
