from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import requests
from PIL import Image, ImageOps

LOGGER = logging.getLogger(__name__)


SUPPORTED_IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".tif", ".tiff"}


def _prepare(image: Image.Image) -> Image.Image:
    # Normalize orientation/mode so OCR sees consistent pixels.
    image = ImageOps.exif_transpose(image)
    if image.mode not in {"RGB", "L"}:
        image = image.convert("RGB")
    return image


def load_image_bytes(data: bytes) -> Image.Image:
    """Decode raw image bytes into a PIL image ready for OCR."""
    image = Image.open(BytesIO(data))
    image.load()
    return _prepare(image)


def load_image(path: Path) -> Image.Image:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_IMAGE_EXTS:
        raise ValueError(f"Unsupported file type: {suffix}")
    LOGGER.info("Loading image %s", path)
    return load_image_bytes(path.read_bytes())


def fetch_image(url: str, timeout: float = 30) -> Image.Image:
    LOGGER.info("Downloading passport image")
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return load_image_bytes(resp.content)
