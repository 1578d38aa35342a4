"""
JSON-schema helpers for the endpoint catalog.

Catalog entries declare their parameters with these small constructors so
the table stays readable. parameters_schema() assembles the final schema,
adding the header-driven parameters an endpoint's flags imply.
"""

from typing import Any

from models import (
    CONTENT_ENCODING_PARAM,
    CONTENT_PARAM,
    FETCH_ALL_PARAM,
    PATH_ROOT_PARAM,
    SELECT_USER_PARAM,
    Endpoint,
    Style,
)


def string(description: str, enum: list[str] | None = None, **extra: Any) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "string", "description": description}
    if enum:
        prop["enum"] = enum
    prop.update(extra)
    return prop


def boolean(description: str) -> dict[str, Any]:
    return {"type": "boolean", "description": description}


def integer(
    description: str,
    minimum: int | None = None,
    maximum: int | None = None,
) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "integer", "description": description}
    if minimum is not None:
        prop["minimum"] = minimum
    if maximum is not None:
        prop["maximum"] = maximum
    return prop


def array(description: str, items: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "array", "description": description}
    if items is not None:
        prop["items"] = items
    prop.update(extra)
    return prop


def strings(description: str, **extra: Any) -> dict[str, Any]:
    """Array of strings."""
    return array(description, {"type": "string"}, **extra)


def user_list(description: str, **extra: Any) -> dict[str, Any]:
    """Array of users: bare identifiers or UserSelectorArg objects."""
    return array(
        description,
        {"anyOf": [{"type": "string"}, {"type": "object"}]},
        **extra,
    )


def obj(
    description: str,
    properties: dict[str, Any] | None = None,
    required: list[str] | None = None,
) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "object", "description": description}
    if properties:
        prop["properties"] = properties
    if required:
        prop["required"] = required
    return prop


def objects(
    description: str,
    properties: dict[str, Any] | None = None,
    required: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Array of objects."""
    item: dict[str, Any] = {"type": "object"}
    if properties:
        item["properties"] = properties
    if required:
        item["required"] = required
    return array(description, item, **extra)


# =============================================================================
# Shared parameter definitions
# =============================================================================

PATH = string("Path in the user's Dropbox (e.g. /Reports/Q4.pdf), or an id:/rev: reference.")
CURSOR = string("Cursor returned by a previous call of the matching list operation.")
ASYNC_JOB_ID = string("Id of the asynchronous job returned by the launching call.")
LIMIT = integer("Maximum number of results per page.", minimum=1, maximum=1000)
AUTORENAME = boolean("Rename automatically on a naming conflict.")
TEAM_FOLDER_ID = string("Id of the team folder.")
SHARED_FOLDER_ID = string("Id of the shared folder.")
GROUP_ID = string("Id of the group (g:...).")
TEMPLATE_ID = string("Id of the property template (ptid:...).")
LEGAL_HOLD_ID = string("Id of the legal hold policy (pid_dbhid:...).")
FILE = string("File path or id (id:...) of the shared file.")
ACCESS_LEVEL = string("Access level to grant.", enum=["viewer", "editor", "owner", "viewer_no_comment"])
UPLOAD_MODE = string("What to do if the file already exists.", enum=["add", "overwrite"])
SHARING_ACTIONS = strings("Permission actions to report on in the response (optional).")

MEMBER_SELECTOR_PARAMS: dict[str, dict[str, Any]] = {
    "team_member_id": string("Team member id (dbmid:...). One of team_member_id, email, external_id is required."),
    "email": string("Email address of the team member."),
    "external_id": string("External id of the team member."),
}

_SELECT_USER = string(
    "Team member id (dbmid:...) to act as. Required when using a team token "
    "for user-level operations."
)
_SELECT_ADMIN = string("Team admin id (dbmid:...) to act as for team-admin operations.")
_NAMESPACE_ID = string("Namespace id to resolve paths against (Dropbox-API-Path-Root).")
_FETCH_ALL = boolean("Follow the cursor and return every page in one result.")
_CONTENT = string("File content. UTF-8 text, or base64 when content_encoding is base64.")
_CONTENT_ENCODING = string("Encoding of content.", enum=["utf-8", "base64"])


def parameters_schema(endpoint: Endpoint) -> dict[str, Any]:
    """
    Build the complete JSON schema for an endpoint's arguments.

    Header flags and styles contribute their own optional parameters; an
    explicit declaration in endpoint.params always wins.
    """
    properties: dict[str, Any] = dict(endpoint.params)

    if endpoint.select_user:
        properties.setdefault(SELECT_USER_PARAM, _SELECT_USER)
    elif endpoint.select_admin:
        properties.setdefault(SELECT_USER_PARAM, _SELECT_ADMIN)
    if endpoint.path_root:
        properties.setdefault(PATH_ROOT_PARAM, _NAMESPACE_ID)
    if endpoint.pagination is not None:
        properties.setdefault(FETCH_ALL_PARAM, _FETCH_ALL)
    if endpoint.style == Style.UPLOAD:
        properties.setdefault(CONTENT_PARAM, _CONTENT)
        properties.setdefault(CONTENT_ENCODING_PARAM, _CONTENT_ENCODING)

    return {
        "type": "object",
        "properties": properties,
        "required": list(endpoint.required),
    }


def control_params(endpoint: Endpoint) -> set[str]:
    """Argument names consumed by headers or the executor, never sent in the body."""
    names: set[str] = set()
    if endpoint.select_user or endpoint.select_admin:
        names.add(SELECT_USER_PARAM)
    if endpoint.path_root:
        names.add(PATH_ROOT_PARAM)
    if endpoint.pagination is not None:
        names.add(FETCH_ALL_PARAM)
    if endpoint.style == Style.UPLOAD:
        names.update({CONTENT_PARAM, CONTENT_ENCODING_PARAM})
    return names


def definition(name: str, description: str, parameters: dict[str, Any]) -> dict[str, Any]:
    """Function-calling definition in the shape LLM harnesses expect."""
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }
