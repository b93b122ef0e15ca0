"""
National Drug Code value object.
Canonical form: 11 digits, 5-4-2 (labeler-product-package).
"""

import re
from dataclasses import dataclass

from ...core.utils.string_utils import digits_only
from ..errors import InvalidNdcError

_DASHED_NDC = re.compile(r"^(\d{4,5})-(\d{3,4})-(\d{1,2})$")


def normalize_ndc(value: str) -> str:
    """Normalize an NDC to its 11-digit form.

    Dash-delimited codes are padded per segment (4-4-2, 5-3-2 and 5-4-1 all
    become 5-4-2). Undelimited codes are stripped to digits and left-padded;
    they must carry between 1 and 11 digits.
    """
    cleaned = value.strip()
    dashed = _DASHED_NDC.match(cleaned)
    if dashed:
        labeler, product, package = dashed.groups()
        return labeler.zfill(5) + product.zfill(4) + package.zfill(2)
    digits = digits_only(cleaned)
    if not digits or len(digits) > 11:
        raise InvalidNdcError(value)
    return digits.zfill(11)


def format_ndc(value: str) -> str:
    """Render an NDC as ``LLLLL-PPPP-KK``."""
    ndc = normalize_ndc(value)
    return f"{ndc[:5]}-{ndc[5:9]}-{ndc[9:11]}"


@dataclass(frozen=True)
class Ndc:
    """Immutable 11-digit NDC."""

    value: str

    def __post_init__(self) -> None:
        """Validate NDC format."""
        if not isinstance(self.value, str) or not re.fullmatch(r"\d{11}", self.value):
            raise InvalidNdcError(str(self.value))

    @classmethod
    def parse(cls, raw: str) -> "Ndc":
        """Normalize then validate any supported NDC spelling."""
        return cls(normalize_ndc(raw))

    @property
    def labeler(self) -> str:
        return self.value[:5]

    @property
    def product(self) -> str:
        return self.value[5:9]

    @property
    def package(self) -> str:
        return self.value[9:11]

    def formatted(self) -> str:
        return format_ndc(self.value)

    def __str__(self) -> str:
        return self.value
