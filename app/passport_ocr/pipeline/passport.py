from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config import MRZConfig
from ..schemas import MRZChecks, PassportRecord
from .mrz_correct import correct_line2, correct_name_region, split_name_region
from .mrz_lines import extract_mrz_candidates, normalize_line1, normalize_line2
from .normalize import format_mrz_name, map_gender, strip_filler, yymmdd_to_date

LOGGER = logging.getLogger(__name__)


@dataclass
class MRZResult:
    record: PassportRecord
    lines: List[str]
    checks: MRZChecks


@dataclass(frozen=True)
class TD3Fields:
    surname: str
    given_names: str
    passport_number: str
    passport_cd: str
    nationality: str
    dob_raw: str
    dob_cd: str
    sex: str
    expiry_raw: str
    expiry_cd: str
    personal_number: str
    personal_cd: str
    composite_cd: str


def _compute_check_digit(value: str) -> str:
    weights = [7, 3, 1]
    total = 0
    for i, char in enumerate(value):
        if char.isdigit():
            v = int(char)
        elif char == "<":
            v = 0
        elif "A" <= char <= "Z":
            v = ord(char) - 55
        else:
            v = 0
        total += v * weights[i % 3]
    return str(total % 10)


def _valid_check_digit(value: str, check_digit: str) -> bool:
    if not check_digit:
        return False
    # An empty optional field may carry filler instead of 0.
    if check_digit == "<":
        return value.strip("<") == ""
    return _compute_check_digit(value) == check_digit


def decompose_td3(line1: str, line2: str) -> TD3Fields:
    """Slice two corrected 44-char lines into raw TD3 fields."""
    surname, given_names = split_name_region(line1)
    return TD3Fields(
        surname=surname,
        given_names=given_names,
        passport_number=line2[0:9],
        passport_cd=line2[9:10],
        nationality=line2[10:13],
        dob_raw=line2[13:19],
        dob_cd=line2[19:20],
        sex=line2[20:21],
        expiry_raw=line2[21:27],
        expiry_cd=line2[27:28],
        personal_number=line2[28:42],
        personal_cd=line2[42:43],
        composite_cd=line2[43:44],
    )


def verify_check_digits(line2: str) -> MRZChecks:
    fields = decompose_td3("", line2)
    composite_source = line2[0:10] + line2[13:20] + line2[21:43]
    return MRZChecks(
        passport_number=_valid_check_digit(fields.passport_number, fields.passport_cd),
        date_of_birth=_valid_check_digit(fields.dob_raw, fields.dob_cd),
        date_of_expiry=_valid_check_digit(fields.expiry_raw, fields.expiry_cd),
        national_id_number=_valid_check_digit(fields.personal_number, fields.personal_cd),
        composite=_valid_check_digit(composite_source, fields.composite_cd),
    )


def build_record(fields: TD3Fields, config: Optional[MRZConfig] = None) -> PassportRecord:
    config = config or MRZConfig()
    return PassportRecord(
        first_name=format_mrz_name(fields.given_names),
        last_name=format_mrz_name(fields.surname),
        gender=map_gender(fields.sex),
        passport_number=strip_filler(fields.passport_number),
        national_id_number=strip_filler(fields.personal_number),
        date_of_birth=yymmdd_to_date(fields.dob_raw, pivot=config.century_pivot),
        date_of_expiry=yymmdd_to_date(fields.expiry_raw, pivot=config.century_pivot),
    )


def parse_mrz_lines(line1: str, line2: str, config: Optional[MRZConfig] = None) -> MRZResult:
    config = config or MRZConfig()
    line1 = correct_name_region(normalize_line1(line1, config))
    line2 = correct_line2(normalize_line2(line2, config), config)
    LOGGER.info("MRZ L1: %s", line1)
    LOGGER.info("MRZ L2: %s", line2)

    fields = decompose_td3(line1, line2)
    checks = verify_check_digits(line2)
    if not checks.ok:
        failed = [name for name, ok in checks.model_dump().items() if not ok]
        LOGGER.warning("MRZ check digits failed for: %s", ", ".join(failed))
    return MRZResult(record=build_record(fields, config), lines=[line1, line2], checks=checks)


def parse_mrz(text: str, config: Optional[MRZConfig] = None) -> MRZResult:
    """Decode the TD3 MRZ found in raw OCR text.

    Raises ``MRZNotFoundError`` when the text holds fewer than two MRZ-like
    lines. Every other defect degrades to empty or partial fields.
    """
    config = config or MRZConfig()
    line1, line2 = extract_mrz_candidates(text, config)
    return parse_mrz_lines(line1, line2, config)
