from __future__ import annotations

import logging
from typing import Dict, Optional

import anyio
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from .automation.board import BoardClient
from .config import CONFIG
from .field_registry import field_registry_payload
from .pipeline.mrz_lines import MRZNotFoundError
from .pipeline.ocr import ocr_image_url
from .pipeline.passport import MRZResult, parse_mrz

logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
LOGGER = logging.getLogger("passport_ocr")

app = FastAPI(title="Passport OCR")


@app.get("/")
async def root() -> Dict[str, str]:
    return {"status": "ok", "service": "passport-ocr"}


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/field_registry")
async def field_registry() -> Dict[str, object]:
    return field_registry_payload()


def _event_ids(payload: Dict) -> tuple[Optional[str], str]:
    event = payload.get("event") if isinstance(payload.get("event"), dict) else payload
    item_id = event.get("itemId") or event.get("pulseId")
    board_id = event.get("boardId") or CONFIG.board.board_id
    return (str(item_id) if item_id else None), str(board_id)


def _result_payload(result: MRZResult) -> Dict[str, object]:
    return {
        "data": result.record.model_dump(),
        "checks": result.checks.model_dump(),
        "lines": result.lines,
    }


def _mrz_not_found(exc: MRZNotFoundError) -> JSONResponse:
    return JSONResponse(
        {"error": str(exc).split("\n", 1)[0], "candidates": exc.candidate_count, "ocr_text": exc.raw_text},
        status_code=422,
    )


def process_item(item_id: str, board_id: str) -> MRZResult:
    """Fetch the item's passport image, decode its MRZ and write the fields back."""
    client = BoardClient()
    image_url = client.get_image_url(item_id)
    LOGGER.info("Image URL obtained for item %s", item_id)

    ocr_text = ocr_image_url(image_url, CONFIG.ocr)
    LOGGER.info("OCR text: %d chars", len(ocr_text))

    result = parse_mrz(ocr_text, CONFIG.mrz)
    LOGGER.info("Extracted: %s", result.record.model_dump())

    client.update_item(board_id, item_id, result.record)
    LOGGER.info("Board item %s updated", item_id)
    return result


@app.post("/api/webhook")
async def webhook(payload: Dict):
    if not isinstance(payload, dict):
        return JSONResponse({"error": "Invalid payload"}, status_code=400)
    # Monday.com sends a challenge when the webhook is registered.
    if payload.get("challenge"):
        return JSONResponse({"challenge": payload["challenge"]})

    item_id, board_id = _event_ids(payload)
    if not item_id:
        return JSONResponse({"error": "Missing itemId", "body": payload}, status_code=400)

    LOGGER.info("Processing item %s (board %s)", item_id, board_id)
    try:
        result = await anyio.to_thread.run_sync(process_item, item_id, board_id)
    except MRZNotFoundError as exc:
        LOGGER.error("Item %s: %s candidate MRZ line(s) found", item_id, exc.candidate_count)
        return _mrz_not_found(exc)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Item %s failed", item_id)
        return JSONResponse({"error": str(exc)}, status_code=500)

    return JSONResponse({"success": True, **_result_payload(result)})


@app.post("/api/parse")
async def parse_text(payload: Dict):
    if not isinstance(payload, dict):
        return JSONResponse({"error": "Invalid payload"}, status_code=400)
    text = payload.get("text")
    if not isinstance(text, str) or not text.strip():
        return JSONResponse({"error": "Missing text"}, status_code=400)
    try:
        result = parse_mrz(text, CONFIG.mrz)
    except MRZNotFoundError as exc:
        return _mrz_not_found(exc)
    return JSONResponse({"success": True, **_result_payload(result)})
