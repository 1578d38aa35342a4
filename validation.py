"""
Input validation and argument shaping utilities.

Handles:
- JSON-schema validation of tool arguments
- Dropbox path normalization (root, ids, revisions, namespaces)
- Dropbox union selectors ({".tag": ..., ...}) for members, groups, files
- Upload/download content encoding (UTF-8 text or base64)

Everything here is pure: no HTTP, no logging. Errors are ValueError;
the tools layer turns them into invalid_input responses.
"""

import base64
import binascii
import re
from typing import Any

from jsonschema import Draft202012Validator

# =============================================================================
# PATTERNS
# =============================================================================

# Paths can also be given as file ids, revisions or namespace-relative paths
DROPBOX_ID_PREFIXES = ('id:', 'rev:', 'ns:')
TEAM_MEMBER_ID_PATTERN = re.compile(r'^dbmid:[A-Za-z0-9_-]+$')

# Identifier keys accepted wherever a single team member is selected
MEMBER_SELECTOR_KEYS = ('team_member_id', 'email', 'external_id')


# =============================================================================
# SCHEMA VALIDATION
# =============================================================================

class ArgumentError(ValueError):
    """ValueError carrying the location of the offending argument."""

    def __init__(self, message: str, path: list[str | int] | None = None):
        super().__init__(message)
        self.path = path or []


def validate_arguments(schema: dict[str, Any], arguments: dict[str, Any]) -> None:
    """
    Validate tool arguments against a JSON schema.

    Reports the first error (by path order) so messages stay short enough
    for an LLM to act on.

    Raises:
        ArgumentError: With the offending argument path in the message
    """
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(arguments), key=lambda e: list(e.path))
    if not errors:
        return

    error = errors[0]
    path = list(error.path)
    location = ".".join(str(p) for p in path)
    if location:
        raise ArgumentError(f"Invalid argument '{location}': {error.message}", path)
    raise ArgumentError(f"Invalid arguments: {error.message}", path)


# =============================================================================
# PATHS
# =============================================================================

def normalize_path(path: str | None) -> str:
    """
    Normalize a Dropbox path argument.

    - None, "" and "/" mean the root, which the API spells ""
    - id:/rev:/ns: references pass through untouched
    - Anything else gets a leading slash and loses a trailing one

    Examples:
        normalize_path("/")            → ""
        normalize_path("Reports/Q4/")  → "/Reports/Q4"
        normalize_path("id:a4ayc_80")  → "id:a4ayc_80"
    """
    if path is None:
        return ""
    path = path.strip()
    if path in ("", "/"):
        return ""
    if path.startswith(DROPBOX_ID_PREFIXES):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/")


# =============================================================================
# UNION SELECTORS
# =============================================================================

def tagged(tag: str, value: Any = None) -> dict[str, Any]:
    """
    Build a Dropbox union value.

    tagged("group_id", "g:1") → {".tag": "group_id", "group_id": "g:1"}
    tagged("viewer")          → {".tag": "viewer"}
    """
    if value is None:
        return {".tag": tag}
    return {".tag": tag, tag: value}


def member_selector(arguments: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """
    Build a UserSelectorArg from whichever identifier the caller supplied.

    Looks for {prefix}team_member_id, {prefix}email, {prefix}external_id in
    that order.

    Raises:
        ValueError: If none is present
    """
    for key in MEMBER_SELECTOR_KEYS:
        value = arguments.get(f"{prefix}{key}")
        if value:
            return tagged(key, value)
    names = ", ".join(f"{prefix}{key}" for key in MEMBER_SELECTOR_KEYS)
    raise ValueError(f"One of {names} is required to identify the team member")


def user_selector(user: str | dict[str, Any]) -> dict[str, Any]:
    """
    UserSelectorArg from a bare identifier.

    dbmid:... is a team member id, anything with @ is an email, and
    everything else is taken as an external id. Dicts pass through.
    """
    if isinstance(user, dict):
        return user
    user = user.strip()
    if user.startswith("dbmid:"):
        return tagged("team_member_id", user)
    if "@" in user:
        return tagged("email", user)
    return tagged("external_id", user)


def group_selector(group_id: str) -> dict[str, Any]:
    """GroupSelector for a group id."""
    return tagged("group_id", group_id)


def sharing_member(member: str | dict[str, Any]) -> dict[str, Any]:
    """
    MemberSelector for sharing routes.

    Accepts an already-tagged dict, an email address, or a Dropbox id
    (dbid:...).
    """
    if isinstance(member, dict):
        return member
    if "@" in member:
        return tagged("email", member)
    return tagged("dropbox_id", member)


def validate_team_member_id(team_member_id: str) -> str:
    """
    Validate a team member id (dbmid:...).

    Raises:
        ValueError: If the id isn't in dbmid: form
    """
    team_member_id = team_member_id.strip()
    if not TEAM_MEMBER_ID_PATTERN.match(team_member_id):
        raise ValueError(
            f"Invalid team member id: {team_member_id}\n"
            "Team member ids look like dbmid:AAH... (see list_members)"
        )
    return team_member_id


# =============================================================================
# CONTENT ENCODING
# =============================================================================

def decode_content(content: str, encoding: str = "utf-8") -> bytes:
    """
    Turn a tool's string content argument into upload bytes.

    Raises:
        ValueError: On unknown encoding or invalid base64
    """
    if encoding == "utf-8":
        return content.encode("utf-8")
    if encoding == "base64":
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"content is not valid base64: {e}") from e
    raise ValueError(f"Unknown content_encoding: {encoding}. Supported: utf-8, base64")


def encode_content(data: bytes) -> tuple[str, str]:
    """
    Turn downloaded bytes into (text, encoding) for a JSON response.

    UTF-8 text is returned as-is; anything else is base64.
    """
    try:
        return data.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        return base64.b64encode(data).decode("ascii"), "base64"
