"""
NDC barcode parsing and scanned-versus-expected product matching.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ...domain.enums.verification import BarcodeFormat, NdcMatchType
from ...domain.value_objects.ndc import Ndc, normalize_ndc

_UPC_A = re.compile(r"^\d{12}$")
_NDC_DIGITS = re.compile(r"^\d{10,11}$")
_NDC_DASHED = re.compile(r"^\d{4,5}-\d{3,4}-\d{1,2}$")

GS1_GTIN_PREFIX = "01"


@dataclass(frozen=True)
class BarcodeParseResult:
    success: bool
    raw_data: str
    ndc: Optional[str] = None
    format: Optional[BarcodeFormat] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class NdcVerificationResult:
    matches: bool
    scanned_ndc: str
    expected_ndc: str
    match_type: NdcMatchType
    error: Optional[str] = None
    warning: Optional[str] = None


def parse_ndc_from_barcode(raw: str) -> BarcodeParseResult:
    """Extract an 11-digit NDC from scanner input.

    Shapes are tried in order: UPC-A (number-system digit and check digit
    stripped), bare 10/11-digit NDC, dashed NDC, GS1 ``01`` + GTIN-14 (indicator
    and ``03`` prefix stripped, check digit dropped). The raw input is kept on
    every result.
    """
    cleaned = (raw or "").strip()

    if _UPC_A.match(cleaned):
        return BarcodeParseResult(
            success=True, raw_data=raw, ndc=normalize_ndc(cleaned[1:11]), format=BarcodeFormat.UPC_A
        )

    if _NDC_DIGITS.match(cleaned):
        return BarcodeParseResult(
            success=True, raw_data=raw, ndc=normalize_ndc(cleaned), format=BarcodeFormat.NDC
        )

    if _NDC_DASHED.match(cleaned):
        return BarcodeParseResult(
            success=True, raw_data=raw, ndc=normalize_ndc(cleaned), format=BarcodeFormat.NDC_FORMATTED
        )

    if cleaned.startswith(GS1_GTIN_PREFIX) and len(cleaned) >= 16:
        gtin = cleaned[2:16]
        embedded = gtin[3:13]
        if embedded.isdigit():
            return BarcodeParseResult(
                success=True, raw_data=raw, ndc=normalize_ndc(embedded), format=BarcodeFormat.GS1_GTIN
            )

    return BarcodeParseResult(success=False, raw_data=raw, error="Unable to parse barcode data")


def verify_ndc_match(
    scanned: str, expected: str, allow_package_variant: bool = False
) -> NdcVerificationResult:
    """Compare two NDCs from most to least specific.

    exact > package_variant (same labeler and product) > labeler_only > none.
    A package variant only counts as a match when explicitly allowed.
    """
    scanned_ndc = Ndc.parse(scanned)
    expected_ndc = Ndc.parse(expected)

    def result(matches: bool, match_type: NdcMatchType, **extra) -> NdcVerificationResult:
        return NdcVerificationResult(
            matches=matches,
            scanned_ndc=scanned_ndc.value,
            expected_ndc=expected_ndc.value,
            match_type=match_type,
            **extra,
        )

    if scanned_ndc == expected_ndc:
        return result(True, NdcMatchType.EXACT)

    if scanned_ndc.labeler != expected_ndc.labeler:
        return result(False, NdcMatchType.NONE, error="Different manufacturers")

    if scanned_ndc.product != expected_ndc.product:
        return result(False, NdcMatchType.LABELER_ONLY, error="Same manufacturer, different product")

    if allow_package_variant:
        return result(
            True, NdcMatchType.PACKAGE_VARIANT, warning="Different package size - verify correct product"
        )
    return result(False, NdcMatchType.PACKAGE_VARIANT, error="Package size mismatch")
