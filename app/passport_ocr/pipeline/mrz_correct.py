from __future__ import annotations

import logging
import re
from typing import Dict, Optional, Tuple

from ..config import MRZConfig
from .mrz_lines import FILLER, LINE2_DIGIT_SLOTS, NAME_START

LOGGER = logging.getLogger(__name__)

DIGIT = "digit"
LETTER = "letter"

# Expected character class -> observed glyph -> replacement.
CONFUSION_TABLE: Dict[str, Dict[str, str]] = {
    DIGIT: {
        "O": "0",
        "Q": "0",
        "D": "0",
        "I": "1",
        "L": "1",
        "l": "1",
        "Z": "2",
        "z": "2",
        "E": "3",
        "A": "4",
        "H": "4",
        "S": "5",
        "G": "6",
        "b": "6",
        "T": "7",
        "B": "8",
        "g": "9",
        "q": "9",
    },
    LETTER: {
        "0": "O",
        "1": "I",
        "2": "Z",
        "4": "A",
        "5": "S",
        "6": "G",
        "7": "T",
        "8": "B",
    },
}

# Glyphs OCR reads in place of a given letter, beyond the plain digit swaps.
LETTER_LOOKALIKES: Dict[str, str] = {
    "T": "71IY",
    "R": "8BPK",
    "U": "V0OL",
    "O": "0QD",
    "D": "0O",
    "E": "3F",
    "A": "4",
    "S": "5",
    "G": "6C",
    "B": "8",
    "I": "1L",
    "Z": "2",
}

NATIONALITY_SLOT = slice(10, 13)
SEX_POS = 20
SEX_CODES = {"M", "F", FILLER}
SEX_MISREADS = {"W": "M", "N": "M", "H": "M"}
NON_ALPHA_RUN_RE = re.compile(r"[^A-Z]{2,}")
FILLER_RUN_RE = re.compile(r"<{2,}")


def correct_char(expected: str, observed: str) -> str:
    """Map a single observed glyph onto the expected character class.

    Characters already in the class, and those with no known confusion,
    come back unchanged.
    """
    if expected == DIGIT and observed.isdigit():
        return observed
    if expected == LETTER and observed.isalpha() and observed.isupper():
        return observed
    return CONFUSION_TABLE.get(expected, {}).get(observed, observed)


def _looks_like(expected: str, observed: str) -> bool:
    if observed == expected:
        return True
    if correct_char(LETTER, observed) == expected:
        return True
    return observed in LETTER_LOOKALIKES.get(expected, "")


def correct_nationality(observed: str, expected: Optional[str]) -> str:
    fixed = "".join(correct_char(LETTER, ch) for ch in observed)
    if not expected or fixed == expected or len(observed) != len(expected):
        return fixed
    if all(_looks_like(exp, obs) for exp, obs in zip(expected, observed)):
        LOGGER.debug("Nationality %s rewritten to %s", observed, expected)
        return expected
    return fixed


def correct_sex(observed: str) -> str:
    if observed in SEX_CODES:
        return observed
    return SEX_MISREADS.get(observed, observed)


def correct_line2(line: str, config: Optional[MRZConfig] = None) -> str:
    config = config or MRZConfig()
    chars = list(line)
    for idx in LINE2_DIGIT_SLOTS:
        if idx < len(chars):
            chars[idx] = correct_char(DIGIT, chars[idx])
    nationality = "".join(chars[NATIONALITY_SLOT])
    chars[NATIONALITY_SLOT] = list(correct_nationality(nationality, config.expected_nationality or None))
    chars[SEX_POS] = correct_sex(chars[SEX_POS])
    corrected = "".join(chars)
    if corrected != line:
        LOGGER.debug("MRZ line 2 corrected: %s -> %s", line, corrected)
    return corrected


def _filler_runs(region: str) -> str:
    region = NON_ALPHA_RUN_RE.sub(lambda m: FILLER * len(m.group(0)), region)
    chars = list(region)
    for idx in range(1, len(chars) - 1):
        if not chars[idx].isalpha() and chars[idx - 1].isalpha() and chars[idx + 1].isalpha():
            chars[idx] = FILLER
    return "".join(chars)


def correct_name_region(line1: str) -> str:
    """Turn separator noise in line 1's name region into filler."""
    return line1[:NAME_START] + _filler_runs(line1[NAME_START:])


def split_name_region(line1: str) -> Tuple[str, str]:
    """Return (surname, given names) split on the first double filler."""
    parts = FILLER_RUN_RE.split(line1[NAME_START:])
    surname = parts[0]
    given = FILLER.join(part for part in parts[1:] if part)
    return surname, given
