"""
Configuration - Single Source of Truth

All connection, credential and limit parameters defined here. Do not duplicate
elsewhere. Values can be overridden via environment variables (a .env file in
the working directory is loaded first).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Package root (where this file lives)
_PACKAGE_ROOT = Path(__file__).parent

# --- Credentials ---
# Checked in this order by adapters/credentials.py
ACCESS_TOKEN_ENV = 'DROPBOX_ACCESS_TOKEN'
REFRESH_TOKEN_ENV = 'DROPBOX_REFRESH_TOKEN'
APP_KEY_ENV = 'DROPBOX_APP_KEY'
APP_SECRET_ENV = 'DROPBOX_APP_SECRET'
# Older variable name, still accepted
LEGACY_TOKEN_ENV = 'DROPBOX_S_PUBLIC_WORKSPACE_API_KEY'

# Local token storage written by `python -m auth` (user's tokens, not shared)
# Absolute path so it works regardless of cwd when the MCP server runs
TOKEN_FILE = Path(os.environ.get('DBX_TOKEN_FILE', _PACKAGE_ROOT / 'token.json'))

# --- OAuth endpoints ---
AUTHORIZE_URL = 'https://www.dropbox.com/oauth2/authorize'
TOKEN_URL = 'https://api.dropboxapi.com/oauth2/token'

# Refresh this many seconds before the access token actually expires
TOKEN_EXPIRY_MARGIN = 300

# --- HTTP ---
# Default timeout for Dropbox API calls (seconds)
API_TIMEOUT = float(os.environ.get('DBX_TIMEOUT', 60))

# list_folder/longpoll holds the connection open for up to 480s (+ jitter)
LONGPOLL_TIMEOUT = float(os.environ.get('DBX_LONGPOLL_TIMEOUT', 480))

USER_AGENT = 'dbx-tools/0.1 (+https://www.dropbox.com/developers)'

# --- Limits ---
# Upper bound on continue calls when a tool is invoked with fetch_all=true
MAX_PAGES = int(os.environ.get('DBX_MAX_PAGES', 20))

# --- Logging ---
LOG_LEVEL = os.environ.get('DBX_LOG_LEVEL', 'INFO')
