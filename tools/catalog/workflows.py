"""
Team admin workflows: flat shortcuts over team member and group routes.

These take plain strings instead of Dropbox's nested union arguments, which
is easier for a model to fill in correctly.
"""

from typing import Any

from models import Endpoint, Pagination
from tools.schema import CURSOR, GROUP_ID, boolean, integer, string
from tools.catalog.team_members import ADMIN_ROLES
from validation import group_selector, tagged


def _add_to_team(args: dict[str, Any]) -> dict[str, Any]:
    member: dict[str, Any] = {
        "member_email": args["email"],
        "send_welcome_email": args["welcome_email"],
        "role": tagged(args["member_role"]),
    }
    for source, target in (
        ("first_name", "member_given_name"),
        ("last_name", "member_surname"),
        ("external_id", "member_external_id"),
    ):
        if source in args:
            member[target] = args[source]
    return {"new_members": [member], "force_async": False}


def _add_to_group(args: dict[str, Any]) -> dict[str, Any]:
    return {
        "group": group_selector(args["group_id"]),
        "members": [
            {
                "user": tagged("team_member_id", args["team_member_id"]),
                "access_type": tagged(args["access_type"]),
            }
        ],
        "return_members": True,
    }


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="add_member_to_team",
        route="team/members/add",
        description="Invite one person to the team by email.",
        params={
            "email": string("Email address of the new member."),
            "first_name": string("Given name."),
            "last_name": string("Surname."),
            "external_id": string("External id."),
            "welcome_email": boolean("Send a welcome email."),
            "member_role": string("Admin role.", enum=ADMIN_ROLES),
        },
        required=("email",),
        defaults={"welcome_email": True, "member_role": "member_only"},
        body=_add_to_team,
    ),
    Endpoint(
        name="add_member_to_group",
        route="team/groups/members/add",
        description="Add one team member to a group.",
        params={
            "group_id": GROUP_ID,
            "team_member_id": string("Team member id (dbmid:...)."),
            "access_type": string("Group access.", enum=["member", "owner"]),
        },
        required=("group_id", "team_member_id"),
        defaults={"access_type": "member"},
        body=_add_to_group,
    ),
    Endpoint(
        name="add_group",
        route="team/groups/create",
        description="Create a team group from a name and optional external id.",
        params={
            "group_name": string("Name of the new group."),
            "group_external_id": string("External id for the group."),
        },
        required=("group_name",),
    ),
    Endpoint(
        name="get_groups",
        route="team/groups/list",
        description="List the team's groups. Pass the returned cursor to get_more_groups for the next page.",
        params={"limit": integer("Maximum groups per page.", minimum=1, maximum=1000)},
        defaults={"limit": 100},
        pagination=Pagination("team/groups/list/continue", "groups"),
    ),
    Endpoint(
        name="get_more_groups",
        route="team/groups/list/continue",
        description="Get the next page of get_groups results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
]
