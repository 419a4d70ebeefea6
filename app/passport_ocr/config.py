from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

API_KEY_ENV = "MONDAY_API_KEY"


def _load_dotenv() -> None:
    repo_root = Path(__file__).resolve().parents[2]
    candidates = [repo_root / ".env", Path.cwd() / ".env"]
    for env_path in candidates:
        if not env_path.exists():
            continue
        try:
            for line in env_path.read_text().splitlines():
                stripped = line.strip()
                if not stripped or stripped.startswith("#") or "=" not in stripped:
                    continue
                key, value = stripped.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
        except OSError:
            continue
        break


_load_dotenv()


@dataclass(frozen=True)
class BoardConfig:
    api_url: str = os.getenv("MONDAY_API_URL", "https://api.monday.com/v2")
    api_version: str = os.getenv("MONDAY_API_VERSION", "2024-10")
    board_id: str = os.getenv("MONDAY_BOARD_ID", "5092025623")
    timeout: float = float(os.getenv("MONDAY_TIMEOUT", "30"))


@dataclass(frozen=True)
class OCRConfig:
    lang: str = os.getenv("OCR_LANG", "eng")
    psm: int = int(os.getenv("OCR_PSM", "6"))
    fetch_timeout: float = float(os.getenv("IMAGE_FETCH_TIMEOUT", "30"))


@dataclass(frozen=True)
class MRZConfig:
    # Empty disables the issuing-country rewrite.
    expected_nationality: str = os.getenv("MRZ_EXPECTED_NATIONALITY", "TUR").strip().upper()
    century_pivot: int = int(os.getenv("MRZ_CENTURY_PIVOT", "50"))
    # "last_two" or "best_pair".
    line_policy: str = os.getenv("MRZ_LINE_POLICY", "last_two").strip().lower()
    truncate_long_lines: bool = True


@dataclass(frozen=True)
class AppConfig:
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    board: BoardConfig = field(default_factory=BoardConfig)
    ocr: OCRConfig = field(default_factory=OCRConfig)
    mrz: MRZConfig = field(default_factory=MRZConfig)


CONFIG = AppConfig()


def resolve_api_key(override: Optional[str] = None) -> Optional[str]:
    if override:
        return override
    return os.getenv(API_KEY_ENV) or None
