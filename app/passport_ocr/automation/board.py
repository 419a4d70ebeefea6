from __future__ import annotations

import json
import logging
from typing import Dict, List, Optional

import requests

from ..config import CONFIG, BoardConfig, resolve_api_key
from ..field_registry import iter_writable_fields
from ..pipeline.normalize import to_iso_date
from ..schemas import PassportRecord

LOGGER = logging.getLogger(__name__)

IMAGE_EXTS = {"png", "jpg", "jpeg", "webp", "bmp", "tiff"}

ITEM_COLUMNS_QUERY = """
query ($ids: [ID!]!) {
    items(ids: $ids) {
        id name
        column_values { id type value }
    }
}
"""

ASSETS_QUERY = """
query ($ids: [ID!]!) { assets(ids: $ids) { id name public_url file_extension } }
"""

UPDATE_COLUMNS_MUTATION = """
mutation ($b: ID!, $i: ID!, $v: JSON!) {
    change_multiple_column_values(board_id: $b, item_id: $i, column_values: $v) { id name }
}
"""


class BoardAPIError(RuntimeError):
    pass


class BoardClient:
    """Thin GraphQL client for the Monday.com board holding passport scans."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[BoardConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or CONFIG.board
        self.api_key = resolve_api_key(api_key)
        self.session = session or requests.Session()

    def query(self, query: str, variables: Optional[Dict[str, object]] = None) -> Dict[str, object]:
        if not self.api_key:
            raise BoardAPIError("Monday API key not configured")
        headers = {
            "Authorization": self.api_key,
            "Content-Type": "application/json",
            "API-Version": self.config.api_version,
        }
        resp = self.session.post(
            self.config.api_url,
            json={"query": query, "variables": variables or {}},
            headers=headers,
            timeout=self.config.timeout,
        )
        if not resp.ok:
            raise BoardAPIError(f"Monday API {resp.status_code}: {resp.text}")
        data = resp.json()
        if data.get("errors"):
            raise BoardAPIError(f"Monday GQL: {json.dumps(data['errors'])}")
        return data

    def get_image_url(self, item_id: str) -> str:
        result = self.query(ITEM_COLUMNS_QUERY, {"ids": [str(item_id)]})
        items = (result.get("data") or {}).get("items") or []
        if not items:
            raise BoardAPIError(f"Item {item_id} not found.")
        item = items[0]

        asset_ids = _file_asset_ids(item.get("column_values") or [])
        if not asset_ids:
            raise BoardAPIError(f'No files on item "{item.get("name")}".')

        result = self.query(ASSETS_QUERY, {"ids": asset_ids})
        assets = (result.get("data") or {}).get("assets") or []
        if not assets:
            raise BoardAPIError(f"No public URLs for assets: {', '.join(asset_ids)}")

        image = next((asset for asset in assets if _is_image(asset)), assets[0])
        if not image.get("public_url"):
            raise BoardAPIError(f'No public URL for "{image.get("name")}".')
        LOGGER.debug("Item %s resolved to asset %s", item_id, image.get("id"))
        return image["public_url"]

    def update_item(self, board_id: str, item_id: str, record: PassportRecord) -> Dict[str, object]:
        values = column_values(record)
        LOGGER.info("Writing %d column(s) to item %s", len(values), item_id)
        return self.query(
            UPDATE_COLUMNS_MUTATION,
            {"b": str(board_id), "i": str(item_id), "v": json.dumps(values)},
        )


def _file_asset_ids(columns: List[Dict[str, object]]) -> List[str]:
    asset_ids: List[str] = []
    for column in columns:
        if column.get("type") != "file" or not column.get("value"):
            continue
        try:
            value = json.loads(column["value"])
        except (TypeError, ValueError):
            LOGGER.debug("Skipping unreadable file column %s", column.get("id"))
            continue
        if not isinstance(value, dict):
            continue
        for entry in value.get("files") or []:
            if isinstance(entry, dict) and entry.get("assetId"):
                asset_ids.append(str(entry["assetId"]))
    return asset_ids


def _is_image(asset: Dict[str, object]) -> bool:
    ext = str(asset.get("file_extension") or "").lower().replace(".", "")
    return ext in IMAGE_EXTS


def column_values(record: PassportRecord) -> Dict[str, object]:
    """Map record fields to board column values, skipping empty ones."""
    data = record.model_dump()
    values: Dict[str, object] = {}
    for spec in iter_writable_fields():
        value = data.get(spec.key)
        if not value:
            continue
        if spec.field_type == "date":
            iso = to_iso_date(value)
            if iso:
                values[spec.column_id] = {"date": iso}
        else:
            values[spec.column_id] = value
    return values
