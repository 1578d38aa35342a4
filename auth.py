#!/usr/bin/env python3
"""
OAuth Authentication for dbx-tools.

Runs the Dropbox authorization-code flow with offline access and writes
token.json (access token, refresh token, expiry). adapters/credentials.py
refreshes the access token from it when it expires.

Usage:
    python -m auth                      # Opens the browser, then prompts for the code
    python -m auth --manual             # Print the URL only (remote/SSH)
    python -m auth --code CODE          # Non-interactive: exchange CODE directly

Prerequisites:
    - A Dropbox app (https://www.dropbox.com/developers/apps)
    - DROPBOX_APP_KEY (and DROPBOX_APP_SECRET) in the environment or .env
"""

import argparse
import os
import sys
import time
import webbrowser
from urllib.parse import urlencode

import httpx

from adapters.credentials import StoredToken, save_token_file
from config import (
    API_TIMEOUT,
    APP_KEY_ENV,
    APP_SECRET_ENV,
    AUTHORIZE_URL,
    TOKEN_FILE,
    TOKEN_URL,
)


def _is_interactive() -> bool:
    """Check if we're running in an interactive terminal with a display."""
    return sys.stdin.isatty() and bool(
        os.environ.get("DISPLAY", os.environ.get("WAYLAND_DISPLAY", ""))
    )


def authorize_url(app_key: str) -> str:
    """URL the user opens to grant access (code flow, offline refresh token)."""
    query = urlencode({
        "client_id": app_key,
        "response_type": "code",
        "token_access_type": "offline",
    })
    return f"{AUTHORIZE_URL}?{query}"


def exchange_code(code: str, app_key: str, app_secret: str) -> StoredToken:
    """
    Exchange an authorization code for tokens.

    Raises:
        RuntimeError: If Dropbox rejects the code
    """
    response = httpx.post(
        TOKEN_URL,
        data={
            "code": code.strip(),
            "grant_type": "authorization_code",
            "client_id": app_key,
            "client_secret": app_secret,
        },
        timeout=API_TIMEOUT,
    )
    if response.status_code != 200:
        raise RuntimeError(f"Token exchange failed ({response.status_code}): {response.text[:200]}")

    payload = response.json()
    expires_in = payload.get("expires_in")
    return StoredToken(
        access_token=payload["access_token"],
        refresh_token=payload.get("refresh_token"),
        expires_at=time.time() + expires_in if expires_in else None,
        app_key=app_key,
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="OAuth authentication for dbx-tools"
    )
    parser.add_argument(
        '--manual',
        action='store_true',
        help='Manual mode: print the URL instead of opening a browser'
    )
    parser.add_argument(
        '--code',
        type=str,
        help='Authorization code (non-interactive)'
    )
    parser.add_argument(
        '--app-key',
        default=os.environ.get(APP_KEY_ENV),
        help=f'Dropbox app key (default: ${APP_KEY_ENV})'
    )
    parser.add_argument(
        '--app-secret',
        default=os.environ.get(APP_SECRET_ENV),
        help=f'Dropbox app secret (default: ${APP_SECRET_ENV})'
    )

    args = parser.parse_args(argv)

    if not args.app_key or not args.app_secret:
        print(f"Error: set {APP_KEY_ENV} and {APP_SECRET_ENV} (or pass --app-key/--app-secret)")
        sys.exit(1)

    code = args.code
    if not code:
        url = authorize_url(args.app_key)
        manual = args.manual or not _is_interactive()
        if manual:
            print("Open this URL, allow access, and copy the code:")
            print()
            print(f"  {url}")
        else:
            print("Opening browser for Dropbox authorization...")
            webbrowser.open(url)
        print()
        try:
            code = input("Authorization code: ")
        except KeyboardInterrupt:
            print("\n\nAuthentication cancelled")
            sys.exit(1)

    try:
        token = exchange_code(code, args.app_key, args.app_secret)
    except (RuntimeError, httpx.HTTPError) as e:
        print(f"\nAuthentication failed: {e}")
        sys.exit(1)

    save_token_file(token)
    print()
    print(f"Authentication complete. {TOKEN_FILE} created.")


if __name__ == '__main__':
    main()
