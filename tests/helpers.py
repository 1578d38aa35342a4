"""
Shared test helpers for dbx-tools.

Centralizes mock wiring patterns that repeat across test files.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import httpx

TEST_TOKEN = "sl.test-token"


def wire_httpx_client(mock_client_cls: MagicMock) -> MagicMock:
    """Wire up httpx.Client context manager mock and return the client instance.

    Replaces the repetitive 3-line pattern:
        mock_client = MagicMock()
        mock_client_cls.return_value.__enter__ = MagicMock(return_value=mock_client)
        mock_client_cls.return_value.__exit__ = MagicMock(return_value=False)

    Usage:
        @patch("adapters.dropbox.httpx.Client")
        def test_something(self, mock_client_cls):
            mock_client = wire_httpx_client(mock_client_cls)
            mock_client.post.return_value = json_response({"ok": True})
    """
    mock_client = MagicMock()
    mock_client_cls.return_value.__enter__ = MagicMock(return_value=mock_client)
    mock_client_cls.return_value.__exit__ = MagicMock(return_value=False)
    return mock_client


def json_response(
    data: Any,
    status: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """A real httpx.Response with a JSON body."""
    return httpx.Response(
        status,
        content=json.dumps(data).encode("utf-8"),
        headers={"Content-Type": "application/json", **(headers or {})},
    )


def text_response(text: str, status: int = 200) -> httpx.Response:
    return httpx.Response(status, content=text.encode("utf-8"))


def download_response(content: bytes, metadata: dict[str, Any]) -> httpx.Response:
    """A download-style response: bytes body, metadata in Dropbox-API-Result."""
    return httpx.Response(
        200,
        content=content,
        headers={
            "Content-Type": "application/octet-stream",
            "Dropbox-API-Result": json.dumps(metadata),
        },
    )


def api_error(status: int, error_summary: str, tag: str | None = None) -> httpx.Response:
    """A Dropbox route error response ({"error_summary", "error"})."""
    error: dict[str, Any] = {".tag": tag or error_summary.split("/")[0]}
    return json_response({"error_summary": error_summary, "error": error}, status=status)


def sent_json(mock_client: MagicMock, call_index: int = -1) -> Any:
    """Decode the JSON body of a recorded client.post call."""
    kwargs = mock_client.post.call_args_list[call_index].kwargs
    return json.loads(kwargs["content"])


def sent_headers(mock_client: MagicMock, call_index: int = -1) -> dict[str, str]:
    return mock_client.post.call_args_list[call_index].kwargs["headers"]


def sent_url(mock_client: MagicMock, call_index: int = -1) -> str:
    return mock_client.post.call_args_list[call_index].args[0]
