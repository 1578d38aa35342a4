"""Team groups namespace."""

from typing import Any

from models import Endpoint, Pagination
from tools.catalog.common import tag_fields, with_group
from tools.schema import (
    ASYNC_JOB_ID,
    CURSOR,
    GROUP_ID,
    boolean,
    integer,
    objects,
    string,
    strings,
    user_list,
)
from validation import group_selector, tagged, user_selector

ACCESS_TYPES = ["member", "owner"]
MANAGEMENT_TYPES = ["user_managed", "company_managed", "system_managed"]

_RETURN_MEMBERS = boolean("Include the group's member list in the response.")


def _add_members(args: dict[str, Any]) -> dict[str, Any]:
    members = []
    for entry in args["members"]:
        if not isinstance(entry, dict) or "user" not in entry:
            entry = {"user": entry}
        members.append({
            "user": user_selector(entry["user"]),
            "access_type": tagged(entry.get("access_type", "member")),
        })
    return {
        "group": group_selector(args["group_id"]),
        "members": members,
        "return_members": args.get("return_members", True),
    }


def _remove_members(args: dict[str, Any]) -> dict[str, Any]:
    return {
        "group": group_selector(args["group_id"]),
        "users": [user_selector(user) for user in args["users"]],
        "return_members": args.get("return_members", True),
    }


def _set_access_type(args: dict[str, Any]) -> dict[str, Any]:
    return {
        "group": group_selector(args["group_id"]),
        "user": user_selector(args["team_member_id"]),
        "access_type": tagged(args["access_type"]),
        "return_members": args.get("return_members", True),
    }


def _update(args: dict[str, Any]) -> dict[str, Any]:
    body = with_group(args)
    if "new_group_management_type" in body:
        body["new_group_management_type"] = tagged(body["new_group_management_type"])
    return body


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="create_group",
        route="team/groups/create",
        description="Create a new, empty group.",
        params={
            "group_name": string("Group name."),
            "add_creator_as_owner": boolean("Add the calling admin as a group owner."),
            "group_external_id": string("External id for the group."),
            "group_management_type": string("Who manages the group.", enum=MANAGEMENT_TYPES),
        },
        required=("group_name",),
        defaults={"add_creator_as_owner": False},
        body=tag_fields("group_management_type"),
    ),
    Endpoint(
        name="delete_group",
        route="team/groups/delete",
        description="Delete a group. Returns an async_job_id for get_group_job_status.",
        params={"group_id": GROUP_ID},
        required=("group_id",),
        body=lambda args: group_selector(args["group_id"]),
    ),
    Endpoint(
        name="groups_get_info",
        route="team/groups/get_info",
        description="Get information about one or more groups.",
        params={"group_ids": strings("Group ids (g:...).")},
        required=("group_ids",),
        body=lambda args: {".tag": "group_ids", "group_ids": args["group_ids"]},
    ),
    Endpoint(
        name="get_group_job_status",
        route="team/groups/job_status/get",
        description="Check the status of an asynchronous group job (delete, member changes).",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
    ),
    Endpoint(
        name="list_groups",
        route="team/groups/list",
        description="List the team's groups.",
        params={"limit": integer("Maximum groups per page.", minimum=1, maximum=1000)},
        defaults={"limit": 100},
        pagination=Pagination("team/groups/list/continue", "groups"),
    ),
    Endpoint(
        name="continue_group_listing",
        route="team/groups/list/continue",
        description="Get the next page of list_groups results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="add_group_members",
        route="team/groups/members/add",
        description="Add members to a group.",
        params={
            "group_id": GROUP_ID,
            "members": objects(
                "Members to add: user (dbmid:, email or external id) and access_type.",
                {
                    "user": string("Team member id, email or external id."),
                    "access_type": string("Group access.", enum=ACCESS_TYPES),
                },
                ["user"],
            ),
            "return_members": _RETURN_MEMBERS,
        },
        required=("group_id", "members"),
        defaults={"return_members": True},
        body=_add_members,
    ),
    Endpoint(
        name="list_group_members",
        route="team/groups/members/list",
        description="List the members of a group.",
        params={"group_id": GROUP_ID, "limit": integer("Maximum members per page.", minimum=1, maximum=1000)},
        required=("group_id",),
        defaults={"limit": 100},
        body=with_group,
        pagination=Pagination("team/groups/members/list/continue", "members"),
    ),
    Endpoint(
        name="continue_group_members_list",
        route="team/groups/members/list/continue",
        description="Get the next page of list_group_members results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="remove_group_members",
        route="team/groups/members/remove",
        description="Remove members from a group.",
        params={
            "group_id": GROUP_ID,
            "users": user_list("Members to remove: dbmid: ids, emails or external ids."),
            "return_members": _RETURN_MEMBERS,
        },
        required=("group_id", "users"),
        defaults={"return_members": True},
        body=_remove_members,
    ),
    Endpoint(
        name="set_access_type",
        route="team/groups/members/set_access_type",
        description="Make a group member an owner or a regular member.",
        params={
            "group_id": GROUP_ID,
            "team_member_id": string("Team member id (dbmid:...)."),
            "access_type": string("Group access.", enum=ACCESS_TYPES),
            "return_members": _RETURN_MEMBERS,
        },
        required=("group_id", "team_member_id", "access_type"),
        defaults={"return_members": True},
        body=_set_access_type,
    ),
    Endpoint(
        name="update_group",
        route="team/groups/update",
        description="Update a group's name, external id or management type.",
        params={
            "group_id": GROUP_ID,
            "new_group_name": string("New name."),
            "new_group_external_id": string("New external id."),
            "new_group_management_type": string("New management type.", enum=MANAGEMENT_TYPES),
            "return_members": _RETURN_MEMBERS,
        },
        required=("group_id",),
        defaults={"return_members": True},
        body=_update,
    ),
]
