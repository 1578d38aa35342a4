"""
Tests for Dropbox credential resolution.

The autouse dropbox_env fixture sets a static token and points TOKEN_FILE
at tmp_path; tests here remove the static token where they need the other
sources.
"""

import json
import time
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from adapters import credentials
from adapters.credentials import (
    StoredToken,
    clear_token_cache,
    get_access_token,
    load_token_file,
    refresh_access_token,
    save_token_file,
)
from config import (
    ACCESS_TOKEN_ENV,
    APP_KEY_ENV,
    APP_SECRET_ENV,
    LEGACY_TOKEN_ENV,
    REFRESH_TOKEN_ENV,
    TOKEN_URL,
)
from models import DbxError, ErrorKind
from tests.helpers import TEST_TOKEN, json_response, text_response


def _token_response(access_token: str = "sl.fresh", expires_in: int = 14400) -> httpx.Response:
    return json_response({
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": expires_in,
    })


@pytest.fixture
def token_file() -> Path:
    return credentials.TOKEN_FILE


class TestStoredToken:
    """Tests for StoredToken expiry."""

    def test_no_expiry_never_expires(self) -> None:
        assert not StoredToken("t").is_expired()

    def test_expiry_margin(self) -> None:
        token = StoredToken("t", expires_at=1000.0)
        assert not token.is_expired(now=600.0)
        # Inside the refresh margin counts as expired
        assert token.is_expired(now=900.0)


class TestTokenFile:
    """Tests for token.json load/save."""

    def test_round_trip_and_permissions(self, token_file: Path) -> None:
        save_token_file(StoredToken("a", "r", 123.0, "key"))

        assert load_token_file() == StoredToken("a", "r", 123.0, "key")
        assert token_file.stat().st_mode & 0o777 == 0o600

    def test_missing_file(self) -> None:
        assert load_token_file() is None

    def test_unreadable_file(self, token_file: Path) -> None:
        token_file.write_text("{not json")
        assert load_token_file() is None

    def test_file_without_access_token(self, token_file: Path) -> None:
        token_file.write_text(json.dumps({"refresh_token": "r"}))
        assert load_token_file() is None


class TestRefresh:
    """Tests for refresh_access_token."""

    @patch("adapters.credentials.httpx.post")
    def test_refresh_posts_grant(self, mock_post: MagicMock) -> None:
        mock_post.return_value = _token_response()

        token = refresh_access_token("r", "key", "secret")

        assert token.access_token == "sl.fresh"
        assert token.refresh_token == "r"
        assert token.expires_at > time.time()
        assert mock_post.call_args.args[0] == TOKEN_URL
        assert mock_post.call_args.kwargs["data"] == {
            "grant_type": "refresh_token",
            "refresh_token": "r",
            "client_id": "key",
            "client_secret": "secret",
        }

    @patch("adapters.credentials.httpx.post")
    def test_pkce_refresh_has_no_secret(self, mock_post: MagicMock) -> None:
        mock_post.return_value = _token_response()
        refresh_access_token("r", "key")
        assert "client_secret" not in mock_post.call_args.kwargs["data"]

    @patch("adapters.credentials.httpx.post")
    def test_rejected_refresh(self, mock_post: MagicMock) -> None:
        mock_post.return_value = text_response('{"error": "invalid_grant"}', 400)
        with pytest.raises(DbxError) as exc_info:
            refresh_access_token("r", "key")
        assert exc_info.value.kind == ErrorKind.AUTH_EXPIRED

    @patch("adapters.credentials.httpx.post")
    def test_transport_failure(self, mock_post: MagicMock) -> None:
        mock_post.side_effect = httpx.ConnectError("down")
        with pytest.raises(DbxError) as exc_info:
            refresh_access_token("r", "key")
        assert exc_info.value.kind == ErrorKind.NETWORK_ERROR
        assert exc_info.value.retryable


class TestGetAccessToken:
    """Tests for the resolution order."""

    def test_static_token(self) -> None:
        assert get_access_token() == TEST_TOKEN

    def test_static_token_wins_over_file(self) -> None:
        save_token_file(StoredToken("from-file"))
        assert get_access_token() == TEST_TOKEN

    def test_token_file(self, no_token: None) -> None:
        save_token_file(StoredToken("from-file", expires_at=time.time() + 3600))
        assert get_access_token() == "from-file"

    @patch("adapters.credentials.httpx.post")
    def test_expired_token_file_refreshed_and_saved(self, mock_post: MagicMock, no_token: None) -> None:
        mock_post.return_value = _token_response("sl.refreshed")
        save_token_file(StoredToken("old", "r", expires_at=time.time() - 10, app_key="key"))

        assert get_access_token() == "sl.refreshed"
        assert load_token_file().access_token == "sl.refreshed"

    def test_expired_token_file_without_refresh_token(self, no_token: None) -> None:
        save_token_file(StoredToken("old", expires_at=time.time() - 10))
        with pytest.raises(DbxError) as exc_info:
            get_access_token()
        assert exc_info.value.kind == ErrorKind.AUTH_REQUIRED

    @patch("adapters.credentials.httpx.post")
    def test_env_refresh_token(
        self, mock_post: MagicMock, no_token: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(REFRESH_TOKEN_ENV, "r")
        monkeypatch.setenv(APP_KEY_ENV, "key")
        monkeypatch.setenv(APP_SECRET_ENV, "secret")
        mock_post.return_value = _token_response("sl.env")

        assert get_access_token() == "sl.env"

    def test_legacy_variable(self, no_token: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(LEGACY_TOKEN_ENV, "legacy")
        assert get_access_token() == "legacy"

    def test_nothing_configured(self, no_token: None) -> None:
        with pytest.raises(DbxError) as exc_info:
            get_access_token()
        assert exc_info.value.kind == ErrorKind.AUTH_REQUIRED
        assert ACCESS_TOKEN_ENV in exc_info.value.message

    def test_cached_until_cleared(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert get_access_token() == TEST_TOKEN
        monkeypatch.setenv(ACCESS_TOKEN_ENV, "rotated")
        assert get_access_token() == TEST_TOKEN
        clear_token_cache()
        assert get_access_token() == "rotated"
