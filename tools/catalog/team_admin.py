"""
Team administration: team info, async jobs, legal holds, linked apps,
member space limits, namespaces and the token's admin.
"""

from typing import Any

from models import Endpoint, Pagination
from tools.catalog.common import users_list
from tools.schema import (
    ASYNC_JOB_ID,
    CURSOR,
    LEGAL_HOLD_ID,
    boolean,
    integer,
    objects,
    string,
    strings,
    user_list,
)
from validation import user_selector

_USERS = user_list("Members: dbmid: ids, emails, external ids or selector objects.")


def _quotas(args: dict[str, Any]) -> dict[str, Any]:
    return {
        "users_and_quotas": [
            {"user": user_selector(entry["user"]), "quota_gb": entry["quota_gb"]}
            for entry in args["users_and_quotas"]
        ]
    }


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="get_info",
        route="team/get_info",
        description="Get information about the team (name, member counts, policies).",
    ),
    Endpoint(
        name="check_job_status",
        route="team/job_status/get",
        description="Check the status of an asynchronous team job.",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
        select_admin=True,
    ),
    Endpoint(
        name="get_authenticated_admin",
        route="team/token/get_authenticated_admin",
        description="Get the team admin who authorized the team token.",
    ),
    # Legal holds
    Endpoint(
        name="create_legal_hold_policy",
        route="team/legal_holds/create_policy",
        description="Create a legal hold policy over members' content.",
        params={
            "name": string("Policy name."),
            "description": string("Policy description."),
            "members": strings("Team member ids (dbmid:...) to hold."),
            "start_date": string("Start, ISO 8601 timestamp."),
            "end_date": string("End, ISO 8601 timestamp."),
        },
        required=("name", "members"),
    ),
    Endpoint(
        name="get_legal_hold_policy",
        route="team/legal_holds/get_policy",
        description="Get a legal hold policy.",
        params={"id": LEGAL_HOLD_ID},
        required=("id",),
    ),
    Endpoint(
        name="list_held_revisions",
        route="team/legal_holds/list_held_revisions",
        description="List the file revisions held by a legal hold policy.",
        params={"id": LEGAL_HOLD_ID},
        required=("id",),
    ),
    Endpoint(
        name="legal_holds_list_held_revisions_continue",
        route="team/legal_holds/list_held_revisions_continue",
        description="Get the next page of held revisions.",
        params={"id": LEGAL_HOLD_ID, "cursor": CURSOR},
        required=("id",),
    ),
    Endpoint(
        name="list_legal_holds",
        route="team/legal_holds/list_policies",
        description="List the team's legal hold policies.",
        params={"include_released": boolean("Include released policies.")},
        defaults={"include_released": False},
    ),
    Endpoint(
        name="release_legal_hold",
        route="team/legal_holds/release_policy",
        description="Release a legal hold policy.",
        params={"id": LEGAL_HOLD_ID},
        required=("id",),
    ),
    Endpoint(
        name="update_legal_hold_policy",
        route="team/legal_holds/update_policy",
        description="Update a legal hold policy's members, name or description.",
        params={
            "id": LEGAL_HOLD_ID,
            "members": strings("Team member ids (dbmid:...) to hold."),
            "name": string("New name."),
            "description": string("New description."),
        },
        required=("id",),
    ),
    # Linked apps
    Endpoint(
        name="list_member_linked_apps",
        route="team/linked_apps/list_member_linked_apps",
        description="List the apps linked to a team member's account.",
        params={"team_member_id": string("Team member id (dbmid:...).")},
        required=("team_member_id",),
    ),
    Endpoint(
        name="list_linked_apps",
        route="team/linked_apps/list_members_linked_apps",
        description="List the apps linked to every member's account.",
        params={"cursor": CURSOR},
    ),
    Endpoint(
        name="revoke_linked_app",
        route="team/linked_apps/revoke_linked_app",
        description="Revoke an app's access to a member's account.",
        params={
            "app_id": string("Linked app id."),
            "team_member_id": string("Team member id (dbmid:...)."),
            "keep_app_folder": boolean("Keep the app's folder in the member's Dropbox."),
        },
        required=("app_id", "team_member_id"),
        defaults={"keep_app_folder": True},
    ),
    Endpoint(
        name="revoke_linked_app_batch",
        route="team/linked_apps/revoke_linked_app_batch",
        description="Revoke several linked apps at once.",
        params={
            "revoke_linked_app": objects(
                "Apps to revoke.",
                {
                    "app_id": string("Linked app id."),
                    "team_member_id": string("Team member id (dbmid:...)."),
                    "keep_app_folder": boolean("Keep the app's folder."),
                },
                ["app_id", "team_member_id"],
            ),
        },
        required=("revoke_linked_app",),
    ),
    # Member space limits
    Endpoint(
        name="add_excluded_users",
        route="team/member_space_limits/excluded_users/add",
        description="Exclude members from the team's member space limit.",
        params={"users": _USERS},
        required=("users",),
        body=users_list(),
    ),
    Endpoint(
        name="list_excluded_users",
        route="team/member_space_limits/excluded_users/list",
        description="List members excluded from the member space limit.",
        params={"limit": integer("Maximum users per page.", minimum=1, maximum=1000)},
        defaults={"limit": 100},
        pagination=Pagination("team/member_space_limits/excluded_users/list/continue", "users"),
    ),
    Endpoint(
        name="continue_excluded_users_listing",
        route="team/member_space_limits/excluded_users/list/continue",
        description="Get the next page of list_excluded_users results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="remove_excluded_users",
        route="team/member_space_limits/excluded_users/remove",
        description="Apply the member space limit to previously excluded members again.",
        params={"users": _USERS},
        required=("users",),
        body=users_list(),
    ),
    Endpoint(
        name="get_custom_quota",
        route="team/member_space_limits/get_custom_quota",
        description="Get members' custom storage quotas.",
        params={"users": _USERS},
        required=("users",),
        body=users_list(),
    ),
    Endpoint(
        name="remove_custom_quota",
        route="team/member_space_limits/remove_custom_quota",
        description="Remove members' custom storage quotas.",
        params={"users": _USERS},
        required=("users",),
        body=users_list(),
    ),
    Endpoint(
        name="set_custom_quota",
        route="team/member_space_limits/set_custom_quota",
        description="Set members' custom storage quotas in GB (minimum 15).",
        params={
            "users_and_quotas": objects(
                "Members and quotas.",
                {
                    "user": string("Team member id, email or external id."),
                    "quota_gb": integer("Quota in GB.", minimum=15),
                },
                ["user", "quota_gb"],
            ),
        },
        required=("users_and_quotas",),
        body=_quotas,
    ),
    # Namespaces
    Endpoint(
        name="list_namespaces",
        route="team/namespaces/list",
        description="List the team's namespaces (team folders, shared folders, member folders).",
        params={"limit": integer("Maximum namespaces per page.", minimum=1, maximum=1000)},
        defaults={"limit": 1000},
        pagination=Pagination("team/namespaces/list/continue", "namespaces"),
    ),
    Endpoint(
        name="continue_namespaces_list",
        route="team/namespaces/list/continue",
        description="Get the next page of list_namespaces results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
]
