from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import MRZConfig

LOGGER = logging.getLogger(__name__)

TD3_LINE_LENGTH = 44
FILLER = "<"
MIN_CANDIDATE_LENGTH = 28
MIN_CONFORMANCE = 0.85
NAME_START = 5
MRZ_ALPHABET = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789<")
WHITESPACE_RE = re.compile(r"\s+")
# line 2 slots that must hold digits: check digits and the two dates
LINE2_DIGIT_SLOTS = (9, *range(13, 20), *range(21, 28), 42, 43)


class MRZNotFoundError(Exception):
    """Raised when the OCR text holds fewer than two MRZ-shaped lines."""

    def __init__(self, candidate_count: int, raw_text: str) -> None:
        self.candidate_count = candidate_count
        self.raw_text = raw_text
        super().__init__(
            f"MRZ not found. {candidate_count} candidate line(s). OCR text:\n{raw_text}"
        )


@dataclass(frozen=True)
class MRZCandidateLine:
    raw: str
    length: int
    conformance: float

    @property
    def qualifies(self) -> bool:
        return self.length >= MIN_CANDIDATE_LENGTH and self.conformance > MIN_CONFORMANCE

    @property
    def cleaned(self) -> str:
        return "".join(ch.upper() for ch in self.raw if ch.upper() in MRZ_ALPHABET)


def conformance_ratio(line: str) -> float:
    if not line:
        return 0.0
    hits = sum(1 for ch in line if ch.upper() in MRZ_ALPHABET)
    return hits / len(line)


def scan_lines(text: str) -> List[MRZCandidateLine]:
    scanned = []
    for raw in (text or "").split("\n"):
        line = WHITESPACE_RE.sub("", raw.strip())
        scanned.append(MRZCandidateLine(raw=line, length=len(line), conformance=conformance_ratio(line)))
    return scanned


def _pair_score(line1: str, line2: str) -> float:
    score = 1.0 if line1.startswith("P") else 0.0
    slots = [line2[i] for i in LINE2_DIGIT_SLOTS if i < len(line2)]
    if slots:
        score += sum(1 for ch in slots if ch.isdigit()) / len(LINE2_DIGIT_SLOTS)
    return score


def _select_best_pair(lines: List[str]) -> Tuple[str, str]:
    best = (lines[-2], lines[-1])
    best_score = -1.0
    for first, second in zip(lines, lines[1:]):
        score = _pair_score(first, second)
        # >= keeps the later pair on ties (bottom-of-page bias).
        if score >= best_score:
            best = (first, second)
            best_score = score
    return best


def extract_mrz_candidates(text: str, config: Optional[MRZConfig] = None) -> Tuple[str, str]:
    """Pick the two OCR lines that make up the MRZ.

    Lines qualify when they are long enough and made almost entirely of MRZ
    characters. The returned lines are upper-cased and restricted to
    ``A-Z0-9<``.
    """
    config = config or MRZConfig()
    candidates = [line for line in scan_lines(text) if line.qualifies]
    LOGGER.debug("MRZ candidate lines: %d", len(candidates))
    if len(candidates) < 2:
        raise MRZNotFoundError(len(candidates), text)

    cleaned = [candidate.cleaned for candidate in candidates]
    if config.line_policy == "best_pair":
        return _select_best_pair(cleaned)
    if config.line_policy != "last_two":
        LOGGER.warning("Unknown MRZ line policy %r; using last_two", config.line_policy)
    return cleaned[-2], cleaned[-1]


def _fit_width(line: str, truncate: bool) -> str:
    line = line.ljust(TD3_LINE_LENGTH, FILLER)
    if truncate and len(line) > TD3_LINE_LENGTH:
        LOGGER.debug("Truncating %d-char MRZ line to %d", len(line), TD3_LINE_LENGTH)
        line = line[:TD3_LINE_LENGTH]
    return line


def normalize_line1(line: str, config: Optional[MRZConfig] = None) -> str:
    config = config or MRZConfig()
    chars = list(_fit_width(line, config.truncate_long_lines))
    chars[1] = FILLER
    last_alpha = None
    for idx in range(len(chars) - 1, NAME_START - 1, -1):
        if chars[idx].isalpha():
            last_alpha = idx
            break
    # Everything after the last legible name letter is trailing noise.
    tail_start = last_alpha + 1 if last_alpha is not None else NAME_START
    for idx in range(tail_start, len(chars)):
        chars[idx] = FILLER
    return "".join(chars)


def normalize_line2(line: str, config: Optional[MRZConfig] = None) -> str:
    config = config or MRZConfig()
    return _fit_width(line, config.truncate_long_lines)
