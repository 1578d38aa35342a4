"""
Shared pytest fixtures for dbx-tools tests.

Every test runs with a fake static token and no real sleeping, so nothing
here can reach Dropbox or wait on backoff. HTTP is mocked per test by
patching adapters.dropbox.httpx.Client (see tests/helpers.py).
"""

from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

from adapters.credentials import clear_token_cache
from config import (
    ACCESS_TOKEN_ENV,
    APP_KEY_ENV,
    APP_SECRET_ENV,
    LEGACY_TOKEN_ENV,
    REFRESH_TOKEN_ENV,
)
from tests.helpers import TEST_TOKEN


@pytest.fixture(autouse=True)
def dropbox_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[None, None, None]:
    """Static test token; other credential sources disabled."""
    for name in (REFRESH_TOKEN_ENV, APP_KEY_ENV, APP_SECRET_ENV, LEGACY_TOKEN_ENV):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv(ACCESS_TOKEN_ENV, TEST_TOKEN)
    monkeypatch.setattr("adapters.credentials.TOKEN_FILE", tmp_path / "token.json")
    clear_token_cache()
    yield
    clear_token_cache()


@pytest.fixture(autouse=True)
def no_sleep() -> Generator[MagicMock, None, None]:
    """Retry backoff returns immediately."""
    with patch("retry.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def no_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """No credentials configured at all."""
    monkeypatch.delenv(ACCESS_TOKEN_ENV, raising=False)
    clear_token_cache()


@pytest.fixture
def mock_client() -> Generator[MagicMock, None, None]:
    """
    Patched httpx.Client for the Dropbox adapter.

    Usage:
        def test_something(mock_client):
            mock_client.post.return_value = json_response({...})
    """
    from tests.helpers import wire_httpx_client

    with patch("adapters.dropbox.httpx.Client") as mock_client_cls:
        yield wire_httpx_client(mock_client_cls)
