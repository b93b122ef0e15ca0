"""
String utility functions for the RxWorkflow library.
"""

import re
import secrets
import string
import time

_BASE36 = string.digits + string.ascii_uppercase


def digits_only(value: str) -> str:
    """Strip every non-digit character."""
    if not value:
        return ""
    return re.sub(r"\D", "", value)


def to_base36(number: int) -> str:
    """Encode a non-negative integer in upper-case base 36."""
    if number == 0:
        return "0"
    chars = []
    while number:
        number, remainder = divmod(number, 36)
        chars.append(_BASE36[remainder])
    return "".join(reversed(chars))


def generate_prefixed_id(prefix: str, random_length: int = 6) -> str:
    """Generate an identifier like ``PU-LZ3K9Q1A-4F7B2C``.

    Timestamp in milliseconds plus a random suffix, both base 36.
    """
    timestamp = to_base36(int(time.time() * 1000))
    random_part = "".join(secrets.choice(_BASE36) for _ in range(random_length))
    return f"{prefix}-{timestamp}-{random_part}"


def humanize_field_name(field: str) -> str:
    """Turn a checklist key into a label.

    ``patient_dob_correct`` becomes ``Patient Dob``; verification suffixes
    (correct, reviewed, verified, cleared) are dropped.
    """
    words = [word for word in field.split("_") if word]
    suffixes = {"correct", "reviewed", "verified", "cleared"}
    if len(words) > 1 and words[-1] in suffixes:
        words = words[:-1]
    return " ".join(word.capitalize() for word in words)


def mask_id_number(id_number: str) -> str:
    """Mask an ID number for display, keeping the last four characters."""
    if len(id_number) <= 4:
        return id_number
    return "*" * (len(id_number) - 4) + id_number[-4:]
