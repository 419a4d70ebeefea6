import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from passport_ocr.config import MRZConfig  # noqa: E402


TR_LINE1 = "P<TURYILMAZ<<AHMET<<<<<<<<<<<<<<<<<<<<<<<<<<"
TR_LINE2 = "U123456785TUR9001015M2501017<<<<<<<<<<<<<<06"
ICAO_LINE1 = "P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<"
ICAO_LINE2 = "L898902C36UTO7408122F1204159ZE184226B<<<<<10"


@pytest.fixture
def mrz_config() -> MRZConfig:
    return MRZConfig(expected_nationality="TUR", century_pivot=50, line_policy="last_two")


@pytest.fixture
def tr_ocr_text() -> str:
    return "\n".join(
        [
            "REPUBLIC OF TURKEY",
            "PASAPORT / PASSPORT",
            "Soyadi / Surname",
            "YILMAZ",
            "Adi / Given name(s)",
            "AHMET",
            "",
            TR_LINE1,
            TR_LINE2,
            "",
        ]
    )


@pytest.fixture
def icao_lines() -> tuple[str, str]:
    return ICAO_LINE1, ICAO_LINE2
