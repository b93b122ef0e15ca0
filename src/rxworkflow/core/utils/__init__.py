"""
Utility functions for the RxWorkflow library.

This module provides common utility functions used throughout
the library for time arithmetic and identifier handling.
"""

from .datetime_utils import (
    add_days,
    add_months,
    as_date,
    days_between,
    ensure_aware,
    minutes_between,
    parse_us_date,
    resolve_now,
    utc_now,
)
from .string_utils import (
    digits_only,
    generate_prefixed_id,
    humanize_field_name,
    mask_id_number,
)

__all__ = [
    # Datetime utilities
    "utc_now",
    "ensure_aware",
    "resolve_now",
    "add_months",
    "add_days",
    "minutes_between",
    "days_between",
    "as_date",
    "parse_us_date",
    # String utilities
    "digits_only",
    "generate_prefixed_id",
    "humanize_field_name",
    "mask_id_number",
]
