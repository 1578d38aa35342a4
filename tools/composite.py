"""
Composite tools: short fixed sequences of Dropbox calls.

get_user_folders gathers everything a team member can see in one result;
detect_token_type tells personal tokens from team tokens.
"""

from typing import Any

from adapters import dropbox
from logging_config import logger
from models import DbxError, ErrorKind
from tools.catalog import get_endpoint
from tools.schema import string
from validation import validate_team_member_id

GET_USER_FOLDERS_DESCRIPTION = (
    "Get every folder a team member can see: their personal folders, the team "
    "folders, and the shared folders they belong to. Needs a team token. Each "
    "part is returned even if another part fails."
)

DETECT_TOKEN_TYPE_DESCRIPTION = (
    "Find out whether the configured token is a personal (user) token or a "
    "team token, and return the matching account or team information."
)

GET_USER_FOLDERS_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "member_id": string("Team member id (dbmid:...). Use list_members to find it."),
    },
    "required": ["member_id"],
}

DETECT_TOKEN_TYPE_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {},
    "required": [],
}


def get_user_folders(member_id: str | None = None) -> dict[str, Any]:
    """
    Collect personal, team and shared folders for one team member.

    Each step runs even if an earlier one failed. Failed steps leave their
    slot None; the first failure is reported in "error".
    """
    if not member_id:
        return DbxError(
            ErrorKind.INVALID_INPUT,
            "Member ID is required. Use list_members to get member IDs.",
        ).to_dict()
    try:
        member_id = validate_team_member_id(member_id)
    except ValueError as e:
        return DbxError(ErrorKind.INVALID_INPUT, str(e)).to_dict()

    results: dict[str, Any] = {
        "personal_folders": None,
        "team_folders": None,
        "shared_folders": None,
        "error": None,
    }
    steps = [
        (
            "personal_folders",
            "Personal folders",
            "list_folder",
            {"path": "", "recursive": False, "include_deleted": False},
            {"select_user": member_id},
        ),
        ("team_folders", "Team folders", "list_team_folders", {"limit": 100}, {}),
        (
            "shared_folders",
            "Shared folders",
            "list_folders",
            {"limit": 100},
            {"select_user": member_id},
        ),
    ]

    for key, label, tool_name, arg, headers in steps:
        try:
            results[key] = dropbox.request(get_endpoint(tool_name), arg, **headers)
        except DbxError as e:
            logger.warning(f"get_user_folders: {label} failed: {e.message}")
            if results["error"] is None:
                results["error"] = f"{label} error: {e.message}"

    return results


def detect_token_type() -> dict[str, Any]:
    """
    Probe the token: personal tokens can read the current account, team
    tokens can read team info.
    """
    try:
        account = dropbox.request(get_endpoint("get_current_account"), None)
        return {"token_type": "personal", "account": account}
    except DbxError as e:
        if e.kind == ErrorKind.AUTH_REQUIRED:
            return e.to_dict()
        logger.debug(f"Not a personal token: {e.message}")

    try:
        team = dropbox.request(get_endpoint("get_info"), None)
        return {"token_type": "team", "team": team}
    except DbxError as e:
        details = e.details.get("raw") or e.details.get("error_summary") or e.message
        return {
            "token_type": "unknown",
            "status": e.details.get("status"),
            "detail": str(details)[:200],
        }
