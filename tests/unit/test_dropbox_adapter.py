"""
Tests for the Dropbox HTTP adapter.

Request building per endpoint style, response parsing, error normalization
and the send/request wiring with a mocked httpx.Client.
"""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from adapters.dropbox import (
    build_request,
    error_from_response,
    header_json,
    parse_response,
    request,
    send,
)
from config import API_TIMEOUT, LONGPOLL_TIMEOUT, USER_AGENT
from models import DbxError, Endpoint, ErrorKind, Host, Style
from tests.helpers import (
    TEST_TOKEN,
    api_error,
    download_response,
    json_response,
    sent_headers,
    sent_json,
    sent_url,
    text_response,
)

RPC = Endpoint(name="get_metadata", route="files/get_metadata", description="")
UPLOAD = Endpoint(
    name="upload_file", route="files/upload", description="",
    style=Style.UPLOAD, host=Host.CONTENT,
)
DOWNLOAD = Endpoint(
    name="download_file", route="files/download", description="",
    style=Style.DOWNLOAD, host=Host.CONTENT,
)
LONGPOLL = Endpoint(
    name="list_folder_longpoll", route="files/list_folder/longpoll", description="",
    host=Host.NOTIFY, auth=False,
)


class TestHeaderJson:
    """Tests for Dropbox-API-Arg serialization."""

    def test_non_ascii_escaped(self) -> None:
        assert header_json({"path": "/Café"}) == '{"path": "/Caf\\u00e9"}'

    def test_delete_char_escaped(self) -> None:
        assert "\x7f" not in header_json({"path": "/a\x7fb"})
        assert "\\u007f" in header_json({"path": "/a\x7fb"})


class TestBuildRequest:
    """Tests for build_request across styles."""

    def test_rpc_json_body(self) -> None:
        call = build_request(RPC, {"path": "/a"}, token="t")
        assert call.url == "https://api.dropboxapi.com/2/files/get_metadata"
        assert call.headers["Content-Type"] == "application/json"
        assert call.headers["Authorization"] == "Bearer t"
        assert call.headers["User-Agent"] == USER_AGENT
        assert json.loads(call.content) == {"path": "/a"}
        assert call.timeout == API_TIMEOUT

    def test_rpc_without_arguments_sends_null(self) -> None:
        call = build_request(RPC, None, token="t")
        assert call.content == b"null"

    def test_upload_arg_header_and_bytes(self) -> None:
        call = build_request(UPLOAD, {"path": "/a.txt", "mode": {".tag": "add"}}, token="t", content=b"data")
        assert call.url == "https://content.dropboxapi.com/2/files/upload"
        assert call.headers["Content-Type"] == "application/octet-stream"
        assert json.loads(call.headers["Dropbox-API-Arg"]) == {"path": "/a.txt", "mode": {".tag": "add"}}
        assert call.content == b"data"

    def test_upload_without_content_sends_empty_body(self) -> None:
        call = build_request(UPLOAD, {"close": False}, token="t")
        assert call.content == b""

    def test_download_has_no_body(self) -> None:
        call = build_request(DOWNLOAD, {"path": "/a.txt"}, token="t")
        assert call.content is None
        assert "Content-Type" not in call.headers
        assert json.loads(call.headers["Dropbox-API-Arg"]) == {"path": "/a.txt"}

    def test_select_and_path_root_headers(self) -> None:
        call = build_request(
            RPC, None, token="t",
            select_user="dbmid:user", select_admin="dbmid:admin", namespace_id="12345",
        )
        assert call.headers["Dropbox-API-Select-User"] == "dbmid:user"
        assert call.headers["Dropbox-API-Select-Admin"] == "dbmid:admin"
        assert json.loads(call.headers["Dropbox-API-Path-Root"]) == {
            ".tag": "namespace_id", "namespace_id": "12345",
        }

    def test_optional_headers_omitted(self) -> None:
        call = build_request(RPC, None, token="t")
        for header in ("Dropbox-API-Select-User", "Dropbox-API-Select-Admin", "Dropbox-API-Path-Root"):
            assert header not in call.headers

    def test_longpoll_unauthenticated_and_long_timeout(self) -> None:
        call = build_request(LONGPOLL, {"cursor": "c", "timeout": 30}, token="t")
        assert call.url == "https://notify.dropboxapi.com/2/files/list_folder/longpoll"
        assert "Authorization" not in call.headers
        assert call.timeout > LONGPOLL_TIMEOUT


class TestErrorFromResponse:
    """Tests for Dropbox error normalization."""

    def test_409_endpoint_error(self) -> None:
        error = error_from_response(api_error(409, "path/conflict/folder/..", "path"))
        assert error.kind == ErrorKind.ENDPOINT_ERROR
        assert error.message == "path/conflict/folder/.."
        assert error.details["error_summary"] == "path/conflict/folder/.."
        assert error.details["error_tag"] == "path"
        assert error.details["status"] == 409
        assert not error.retryable

    def test_409_not_found(self) -> None:
        error = error_from_response(api_error(409, "path/not_found/..", "path"))
        assert error.kind == ErrorKind.NOT_FOUND

    def test_not_found_must_be_a_whole_segment(self) -> None:
        error = error_from_response(api_error(409, "path/not_found_in_team/..", "path"))
        assert error.kind == ErrorKind.ENDPOINT_ERROR

    def test_400_plain_text(self) -> None:
        error = error_from_response(text_response("Error in call to API function \"files/get_metadata\": bad path", 400))
        assert error.kind == ErrorKind.INVALID_INPUT
        assert error.details["raw"].startswith("Error in call")
        assert error.message == "Dropbox API error"

    @pytest.mark.parametrize("status,kind", [
        (401, ErrorKind.AUTH_EXPIRED),
        (403, ErrorKind.PERMISSION_DENIED),
        (404, ErrorKind.NOT_FOUND),
        (500, ErrorKind.SERVER_ERROR),
        (503, ErrorKind.SERVER_ERROR),
    ])
    def test_status_mapping(self, status: int, kind: ErrorKind) -> None:
        assert error_from_response(api_error(status, "some_error/")).kind == kind

    def test_server_errors_retryable(self) -> None:
        assert error_from_response(text_response("", 502)).retryable

    def test_429_retry_after_header(self) -> None:
        response = json_response(
            {"error_summary": "too_many_requests/", "error": {".tag": "too_many_requests"}},
            status=429,
            headers={"Retry-After": "7"},
        )
        error = error_from_response(response)
        assert error.kind == ErrorKind.RATE_LIMITED
        assert error.retryable
        assert error.retry_after == 7.0

    def test_429_retry_after_body(self) -> None:
        response = json_response(
            {"error_summary": "too_many_write_operations/", "error": {"reason": {".tag": "too_many_write_operations"}, "retry_after": 3}},
            status=429,
        )
        assert error_from_response(response).retry_after == 3.0

    def test_empty_body_message(self) -> None:
        error = error_from_response(text_response("", 403))
        assert error.message == "Dropbox API error"
        assert "raw" not in error.details

    def test_to_dict_shape(self) -> None:
        result = error_from_response(api_error(409, "path/conflict/file/..", "path")).to_dict()
        assert result["error"] is True
        assert result["kind"] == "endpoint_error"
        assert result["retryable"] is False
        assert result["response"]["error"] == {".tag": "path"}


class TestParseResponse:
    """Tests for successful response parsing."""

    def test_json(self) -> None:
        assert parse_response(json_response({"name": "a.txt"}), Style.RPC) == {"name": "a.txt"}

    def test_json_null(self) -> None:
        assert parse_response(text_response("null"), Style.RPC) is None

    def test_empty_body(self) -> None:
        assert parse_response(text_response(""), Style.RPC) is None

    def test_text_fallback(self) -> None:
        assert parse_response(text_response("not json"), Style.RPC) == "not json"

    def test_download_text(self) -> None:
        result = parse_response(download_response(b"hello", {"name": "a.txt"}), Style.DOWNLOAD)
        assert result == {
            "metadata": {"name": "a.txt"},
            "content": "hello",
            "content_encoding": "utf-8",
            "size": 5,
        }

    def test_download_binary(self) -> None:
        result = parse_response(download_response(b"\xff\xd8\xff", {"name": "a.jpg"}), Style.DOWNLOAD)
        assert result["content_encoding"] == "base64"
        assert result["content"] == "/9j/"


class TestSendAndRequest:
    """Tests for the transport wiring."""

    def test_request_sends_bearer_token(self, mock_client: MagicMock) -> None:
        mock_client.post.return_value = json_response({"name": "a.txt"})

        result = request(RPC, {"path": "/a.txt"})

        assert result == {"name": "a.txt"}
        assert sent_url(mock_client) == "https://api.dropboxapi.com/2/files/get_metadata"
        assert sent_headers(mock_client)["Authorization"] == f"Bearer {TEST_TOKEN}"
        assert sent_json(mock_client) == {"path": "/a.txt"}

    def test_request_without_token(self, mock_client: MagicMock, no_token: None) -> None:
        with pytest.raises(DbxError) as exc_info:
            request(RPC, None)
        assert exc_info.value.kind == ErrorKind.AUTH_REQUIRED
        mock_client.post.assert_not_called()

    def test_unauthenticated_route_needs_no_token(self, mock_client: MagicMock, no_token: None) -> None:
        mock_client.post.return_value = json_response({"changes": False, "backoff": 60})
        assert request(LONGPOLL, {"cursor": "c", "timeout": 30}) == {"changes": False, "backoff": 60}

    def test_error_status_raises(self, mock_client: MagicMock) -> None:
        mock_client.post.return_value = api_error(409, "path/not_found/..", "path")
        with pytest.raises(DbxError) as exc_info:
            request(RPC, {"path": "/missing"})
        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert mock_client.post.call_count == 1

    @patch("adapters.dropbox.clear_token_cache")
    def test_expired_token_clears_cache(self, mock_clear: MagicMock, mock_client: MagicMock) -> None:
        mock_client.post.return_value = api_error(401, "expired_access_token/", "expired_access_token")
        with pytest.raises(DbxError) as exc_info:
            request(RPC, {"path": "/a.txt"})
        assert exc_info.value.kind == ErrorKind.AUTH_EXPIRED
        assert exc_info.value.message == "expired_access_token/"
        mock_clear.assert_called_once()

    @patch("adapters.dropbox.clear_token_cache")
    def test_other_errors_keep_cache(self, mock_clear: MagicMock, mock_client: MagicMock) -> None:
        mock_client.post.return_value = api_error(403, "no_permission/", "no_permission")
        with pytest.raises(DbxError):
            request(RPC, {"path": "/a.txt"})
        mock_clear.assert_not_called()

    def test_server_error_retried(self, mock_client: MagicMock) -> None:
        mock_client.post.side_effect = [
            text_response("", 503),
            json_response({"name": "a.txt"}),
        ]
        assert request(RPC, {"path": "/a.txt"}) == {"name": "a.txt"}
        assert mock_client.post.call_count == 2

    def test_rate_limit_gives_up_after_three_attempts(self, mock_client: MagicMock) -> None:
        mock_client.post.return_value = api_error(429, "too_many_requests/")
        with pytest.raises(DbxError) as exc_info:
            request(RPC, {"path": "/a.txt"})
        assert exc_info.value.kind == ErrorKind.RATE_LIMITED
        assert mock_client.post.call_count == 3

    def test_transport_failure_becomes_network_error(self, mock_client: MagicMock) -> None:
        mock_client.post.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(DbxError) as exc_info:
            request(RPC, None)
        assert exc_info.value.kind == ErrorKind.NETWORK_ERROR
        assert mock_client.post.call_count == 3

    def test_timeout_becomes_timeout(self, mock_client: MagicMock) -> None:
        mock_client.post.side_effect = httpx.ReadTimeout("read timed out")
        with pytest.raises(DbxError) as exc_info:
            request(RPC, None)
        assert exc_info.value.kind == ErrorKind.TIMEOUT

    @patch("adapters.dropbox.httpx.Client")
    def test_client_timeout_from_call(self, mock_client_cls: MagicMock) -> None:
        from tests.helpers import wire_httpx_client

        client = wire_httpx_client(mock_client_cls)
        client.post.return_value = json_response({})
        send(build_request(LONGPOLL, {"cursor": "c"}, token=None))

        timeout = mock_client_cls.call_args.kwargs["timeout"]
        assert isinstance(timeout, httpx.Timeout)
        assert timeout.read > LONGPOLL_TIMEOUT
