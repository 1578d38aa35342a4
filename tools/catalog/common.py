"""
Body builders shared across catalog modules.

A builder receives the validated arguments (defaults applied, control
parameters and None values removed) and returns the request argument.
"""

from typing import Any

from models import BodyBuilder
from validation import (
    group_selector,
    member_selector,
    normalize_path,
    tagged,
    user_selector,
)


def normalized(*keys: str) -> BodyBuilder:
    """Pass arguments through, normalizing the named path arguments."""

    def build(args: dict[str, Any]) -> dict[str, Any]:
        body = dict(args)
        for key in keys:
            if key in body:
                body[key] = normalize_path(body[key])
        return body

    return build


def path_entries(args: dict[str, Any]) -> dict[str, Any]:
    """entries: [{"path": ...}] with each path normalized."""
    body = dict(args)
    body["entries"] = [
        {**entry, "path": normalize_path(entry.get("path"))} for entry in args["entries"]
    ]
    return body


def relocation_entries(args: dict[str, Any]) -> dict[str, Any]:
    """entries: [{"from_path", "to_path"}] for copy/move batches."""
    body = dict(args)
    body["entries"] = [
        {
            **entry,
            "from_path": normalize_path(entry.get("from_path")),
            "to_path": normalize_path(entry.get("to_path")),
        }
        for entry in args["entries"]
    ]
    return body


def tag_fields(*keys: str) -> BodyBuilder:
    """Wrap the named string arguments as void union tags ({".tag": value})."""

    def build(args: dict[str, Any]) -> dict[str, Any]:
        body = dict(args)
        for key in keys:
            if isinstance(body.get(key), str):
                body[key] = tagged(body[key])
        return body

    return build


def member_body(*extra: str, key: str = "user") -> BodyBuilder:
    """
    {key: UserSelectorArg, **extra} for single-member team routes.

    The member is picked from team_member_id, email or external_id.
    """

    def build(args: dict[str, Any]) -> dict[str, Any]:
        body: dict[str, Any] = {key: member_selector(args)}
        for name in extra:
            if name in args:
                body[name] = args[name]
        return body

    return build


def users_list(field: str = "users") -> BodyBuilder:
    """A list of users given as ids, emails or selector objects."""

    def build(args: dict[str, Any]) -> dict[str, Any]:
        body = dict(args)
        body[field] = [user_selector(user) for user in args[field]]
        return body

    return build


def with_group(args: dict[str, Any]) -> dict[str, Any]:
    """Replace group_id with a {"group": GroupSelector} argument."""
    body = {k: v for k, v in args.items() if k != "group_id"}
    body["group"] = group_selector(args["group_id"])
    return body
