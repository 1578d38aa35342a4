"""
Dropbox credential resolution.

Shared by all adapters. Resolves a bearer token from the environment or
token.json, refreshing short-lived tokens through the OAuth token endpoint.
Uses lru_cache so a resolved token is reused across calls.

Resolution order:
1. DROPBOX_ACCESS_TOKEN (static token, never refreshed)
2. token.json written by `python -m auth` (refreshed when expired)
3. DROPBOX_REFRESH_TOKEN + app key/secret from the environment
4. DROPBOX_S_PUBLIC_WORKSPACE_API_KEY (legacy variable)
"""

import json
import os
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx

from config import (
    ACCESS_TOKEN_ENV,
    API_TIMEOUT,
    APP_KEY_ENV,
    APP_SECRET_ENV,
    LEGACY_TOKEN_ENV,
    REFRESH_TOKEN_ENV,
    TOKEN_EXPIRY_MARGIN,
    TOKEN_FILE,
    TOKEN_URL,
)
from logging_config import logger
from models import DbxError, ErrorKind

__all__ = [
    "StoredToken",
    "get_access_token",
    "refresh_access_token",
    "load_token_file",
    "save_token_file",
    "clear_token_cache",
]


@dataclass
class StoredToken:
    """Contents of token.json."""
    access_token: str
    refresh_token: str | None = None
    expires_at: float | None = None  # Unix time
    app_key: str | None = None

    def is_expired(self, now: float | None = None) -> bool:
        if self.expires_at is None:
            return False
        now = time.time() if now is None else now
        return now >= self.expires_at - TOKEN_EXPIRY_MARGIN

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "app_key": self.app_key,
        }


def load_token_file(path: Path | None = None) -> StoredToken | None:
    """Load token.json, or None if missing or unreadable."""
    path = path or TOKEN_FILE
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable token file {path}: {e}")
        return None
    if not raw.get("access_token"):
        return None
    return StoredToken(
        access_token=raw["access_token"],
        refresh_token=raw.get("refresh_token"),
        expires_at=raw.get("expires_at"),
        app_key=raw.get("app_key"),
    )


def save_token_file(token: StoredToken, path: Path | None = None) -> None:
    """Write token.json with owner-only permissions."""
    path = path or TOKEN_FILE
    path.write_text(json.dumps(token.to_dict(), indent=2))
    path.chmod(0o600)


def refresh_access_token(
    refresh_token: str,
    app_key: str,
    app_secret: str | None = None,
) -> StoredToken:
    """
    Exchange a refresh token for a short-lived access token.

    app_secret is optional: PKCE apps refresh with client_id only.

    Raises:
        DbxError: AUTH_EXPIRED if Dropbox rejects the refresh token,
            NETWORK_ERROR on transport failure
    """
    data = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": app_key,
    }
    if app_secret:
        data["client_secret"] = app_secret

    try:
        response = httpx.post(TOKEN_URL, data=data, timeout=API_TIMEOUT)
    except httpx.RequestError as e:
        raise DbxError(ErrorKind.NETWORK_ERROR, f"Token refresh failed: {e}", retryable=True)

    if response.status_code != 200:
        raise DbxError(
            ErrorKind.AUTH_EXPIRED,
            f"Token refresh rejected ({response.status_code}): {response.text[:200]}",
        )

    payload = response.json()
    expires_in = payload.get("expires_in")
    logger.info("Refreshed Dropbox access token")
    return StoredToken(
        access_token=payload["access_token"],
        refresh_token=refresh_token,
        expires_at=time.time() + expires_in if expires_in else None,
        app_key=app_key,
    )


def _from_token_file() -> StoredToken | None:
    stored = load_token_file()
    if stored is None:
        return None
    if not stored.is_expired():
        return stored

    app_key = stored.app_key or os.environ.get(APP_KEY_ENV)
    if not stored.refresh_token or not app_key:
        logger.warning(f"{TOKEN_FILE} has expired and cannot be refreshed. Run: python -m auth")
        return None

    refreshed = refresh_access_token(
        stored.refresh_token, app_key, os.environ.get(APP_SECRET_ENV)
    )
    save_token_file(refreshed)
    return refreshed


def _from_env_refresh() -> StoredToken | None:
    refresh_token = os.environ.get(REFRESH_TOKEN_ENV)
    app_key = os.environ.get(APP_KEY_ENV)
    if not refresh_token or not app_key:
        return None
    return refresh_access_token(refresh_token, app_key, os.environ.get(APP_SECRET_ENV))


@lru_cache(maxsize=1)
def _resolve_token() -> StoredToken:
    static = os.environ.get(ACCESS_TOKEN_ENV)
    if static:
        return StoredToken(access_token=static)

    for source in (_from_token_file, _from_env_refresh):
        token = source()
        if token is not None:
            return token

    legacy = os.environ.get(LEGACY_TOKEN_ENV)
    if legacy:
        return StoredToken(access_token=legacy)

    raise DbxError(
        ErrorKind.AUTH_REQUIRED,
        f"No Dropbox token configured. Set {ACCESS_TOKEN_ENV} or run: python -m auth",
    )


def get_access_token() -> str:
    """
    Get a usable bearer token (cached until expiry).

    Raises:
        DbxError: AUTH_REQUIRED when nothing is configured
    """
    token = _resolve_token()
    if token.is_expired():
        _resolve_token.cache_clear()
        token = _resolve_token()
    return token.access_token


def clear_token_cache() -> None:
    """Clear the cached token. Useful for testing or after re-auth."""
    _resolve_token.cache_clear()
