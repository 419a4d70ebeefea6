from __future__ import annotations

import json

import pytest

from passport_ocr.automation.board import BoardAPIError, BoardClient, column_values
from passport_ocr.config import BoardConfig
from passport_ocr.schemas import PassportRecord


class FakeResponse:
    def __init__(self, payload: dict, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.text = json.dumps(payload)

    def json(self) -> dict:
        return self._payload


class FakeSession:
    def __init__(self, responses: list) -> None:
        self.responses = list(responses)
        self.calls: list = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return self.responses.pop(0)


def _client(responses: list) -> tuple[BoardClient, FakeSession]:
    session = FakeSession(responses)
    config = BoardConfig(api_url="https://board.test/v2", api_version="2024-10", board_id="1", timeout=5)
    return BoardClient(api_key="secret", config=config, session=session), session


def _item_payload(columns: list) -> FakeResponse:
    return FakeResponse({"data": {"items": [{"id": "42", "name": "Ahmet", "column_values": columns}]}})


def test_query_sends_auth_headers() -> None:
    client, session = _client([FakeResponse({"data": {"ok": True}})])
    assert client.query("query { me { id } }") == {"data": {"ok": True}}
    call = session.calls[0]
    assert call["url"] == "https://board.test/v2"
    assert call["headers"]["Authorization"] == "secret"
    assert call["headers"]["API-Version"] == "2024-10"
    assert call["json"]["variables"] == {}
    assert call["timeout"] == 5


def test_query_raises_on_http_and_graphql_errors() -> None:
    client, _ = _client([FakeResponse({"error": "nope"}, status_code=401)])
    with pytest.raises(BoardAPIError, match="401"):
        client.query("query { me { id } }")
    client, _ = _client([FakeResponse({"errors": [{"message": "bad field"}]})])
    with pytest.raises(BoardAPIError, match="bad field"):
        client.query("query { me { id } }")


def test_missing_api_key(monkeypatch) -> None:
    monkeypatch.delenv("MONDAY_API_KEY", raising=False)
    client = BoardClient(session=FakeSession([]))
    with pytest.raises(BoardAPIError, match="not configured"):
        client.query("query { me { id } }")


def test_get_image_url_prefers_image_assets() -> None:
    columns = [
        {"id": "name", "type": "text", "value": '"Ahmet"'},
        {"id": "files", "type": "file", "value": json.dumps({"files": [{"assetId": 7}, {"assetId": 8}]})},
        {"id": "broken", "type": "file", "value": "{not json"},
    ]
    assets = FakeResponse(
        {
            "data": {
                "assets": [
                    {"id": "7", "name": "form.pdf", "public_url": "https://cdn/form.pdf", "file_extension": ".pdf"},
                    {"id": "8", "name": "scan.JPG", "public_url": "https://cdn/scan.jpg", "file_extension": ".JPG"},
                ]
            }
        }
    )
    client, session = _client([_item_payload(columns), assets])
    assert client.get_image_url("42") == "https://cdn/scan.jpg"
    assert session.calls[0]["json"]["variables"] == {"ids": ["42"]}
    assert session.calls[1]["json"]["variables"] == {"ids": ["7", "8"]}


def test_get_image_url_falls_back_to_first_asset() -> None:
    columns = [{"id": "files", "type": "file", "value": json.dumps({"files": [{"assetId": 7}]})}]
    assets = FakeResponse(
        {"data": {"assets": [{"id": "7", "name": "scan", "public_url": "https://cdn/scan", "file_extension": ""}]}}
    )
    client, _ = _client([_item_payload(columns), assets])
    assert client.get_image_url("42") == "https://cdn/scan"


def test_get_image_url_errors() -> None:
    client, _ = _client([FakeResponse({"data": {"items": []}})])
    with pytest.raises(BoardAPIError, match="not found"):
        client.get_image_url("42")

    client, _ = _client([_item_payload([{"id": "files", "type": "file", "value": None}])])
    with pytest.raises(BoardAPIError, match="No files"):
        client.get_image_url("42")

    columns = [{"id": "files", "type": "file", "value": json.dumps({"files": [{"assetId": 7}]})}]
    no_url = FakeResponse({"data": {"assets": [{"id": "7", "name": "scan.png", "file_extension": "png"}]}})
    client, _ = _client([_item_payload(columns), no_url])
    with pytest.raises(BoardAPIError, match="No public URL"):
        client.get_image_url("42")


def test_column_values_skip_empty_and_convert_dates() -> None:
    record = PassportRecord(
        first_name="AHMET",
        last_name="YILMAZ",
        gender="E",
        passport_number="U12345678",
        national_id_number="",
        date_of_birth="01/01/1990",
        date_of_expiry="",
    )
    assert column_values(record) == {
        "text_mm0qv8de": "AHMET",
        "text_mm0qgd7q": "YILMAZ",
        "text_mm0qkzhv": "E",
        "text_mm0qj5f2": "U12345678",
        "date_mm0qj1wq": {"date": "1990-01-01"},
    }


def test_update_item_sends_mutation() -> None:
    client, session = _client([FakeResponse({"data": {"change_multiple_column_values": {"id": "42"}}})])
    record = PassportRecord(first_name="AHMET", date_of_expiry="01/01/2025")
    client.update_item("1", "42", record)
    variables = session.calls[0]["json"]["variables"]
    assert variables["b"] == "1"
    assert variables["i"] == "42"
    assert json.loads(variables["v"]) == {
        "text_mm0qv8de": "AHMET",
        "date_mm0q1gcb": {"date": "2025-01-01"},
    }
