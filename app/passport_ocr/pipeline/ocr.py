from __future__ import annotations

import logging
from typing import Optional

import pytesseract
from PIL import Image

from ..config import OCRConfig
from .ingest import fetch_image

LOGGER = logging.getLogger(__name__)

MRZ_WHITELIST = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789<"


def mrz_tesseract_config(psm: int) -> str:
    return (
        f"--psm {psm} "
        f"-c tessedit_char_whitelist={MRZ_WHITELIST} "
        "-c load_system_dawg=0 -c load_freq_dawg=0"
    )


def ocr_mrz_text(image: Image.Image, config: Optional[OCRConfig] = None) -> str:
    """Run OCR restricted to the MRZ alphabet (uppercase, digits and <)."""
    config = config or OCRConfig()
    LOGGER.info("Running Tesseract OCR (lang=%s, psm=%d)", config.lang, config.psm)
    try:
        text = pytesseract.image_to_string(
            image, lang=config.lang, config=mrz_tesseract_config(config.psm)
        )
    except pytesseract.TesseractError:
        if not config.lang:
            raise
        LOGGER.warning("OCR language %s failed; retrying default OCR.", config.lang)
        text = pytesseract.image_to_string(image, config=mrz_tesseract_config(config.psm))
    LOGGER.info("OCR complete: %d chars", len(text))
    return text


def ocr_image_url(url: str, config: Optional[OCRConfig] = None) -> str:
    config = config or OCRConfig()
    image = fetch_image(url, timeout=config.fetch_timeout)
    return ocr_mrz_text(image, config)
