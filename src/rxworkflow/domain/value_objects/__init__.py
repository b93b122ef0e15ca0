"""
Value objects package for domain layer.
"""

from .ndc import Ndc, format_ndc, normalize_ndc

__all__ = [
    "Ndc",
    "normalize_ndc",
    "format_ndc",
]
