from __future__ import annotations

import re
from typing import Optional

from dateutil import parser

DEFAULT_CENTURY_PIVOT = 50
GENDER_CODES = {
    "M": "E",  # Erkek
    "F": "K",  # Kadın
}


def yymmdd_to_date(raw: Optional[str], pivot: int = DEFAULT_CENTURY_PIVOT) -> str:
    """Convert an MRZ YYMMDD fragment to DD/MM/YYYY, or "" when it cannot be read."""
    if not raw or len(raw) != 6:
        return ""
    digits = re.sub(r"\D", "", raw)
    if len(digits) != 6:
        return ""
    yy = int(digits[0:2])
    month = int(digits[2:4])
    day = int(digits[4:6])
    # No month-length or leap-year check.
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return ""
    century = 1900 if yy > pivot else 2000
    return f"{digits[4:6]}/{digits[2:4]}/{century + yy}"


def map_gender(code: Optional[str]) -> str:
    if not code:
        return ""
    return GENDER_CODES.get(code, code)


def format_mrz_name(value: Optional[str]) -> str:
    if not value:
        return ""
    spaced = value.replace("<", " ")
    cleaned = re.sub(r"[^A-Z ]", "", spaced)
    return re.sub(r"\s+", " ", cleaned).strip()


def strip_filler(value: Optional[str]) -> str:
    if not value:
        return ""
    return value.replace("<", "").strip()


def to_iso_date(value: Optional[str]) -> Optional[str]:
    """DD/MM/YYYY -> YYYY-MM-DD for date columns."""
    if not value or not re.fullmatch(r"\d{2}/\d{2}/\d{4}", value.strip()):
        return None
    try:
        parsed = parser.parse(value.strip(), dayfirst=True)
    except (ValueError, OverflowError):
        return None
    return parsed.date().isoformat()
