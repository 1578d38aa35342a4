"""Team members namespace (team tokens only)."""

from typing import Any

from models import Endpoint, Pagination
from tools.catalog.common import member_body
from tools.schema import (
    ASYNC_JOB_ID,
    CURSOR,
    MEMBER_SELECTOR_PARAMS,
    boolean,
    integer,
    objects,
    string,
    strings,
    user_list,
)
from validation import member_selector, tagged, user_selector

ADMIN_ROLES = ["team_admin", "user_management_admin", "support_admin", "member_only"]

_SECONDARY_EMAILS = objects(
    "Per-user lists: each has user (team member id, email or selector) and secondary_emails.",
    {
        "user": string("Team member id (dbmid:...), email or external id."),
        "secondary_emails": strings("Secondary email addresses."),
    },
    ["user", "secondary_emails"],
)

_NEW_MEMBERS = objects(
    "Members to invite.",
    {
        "member_email": string("Email address."),
        "member_given_name": string("Given name."),
        "member_surname": string("Surname."),
        "member_external_id": string("External id."),
        "send_welcome_email": boolean("Send a welcome email."),
        "role": string("Admin role.", enum=ADMIN_ROLES),
    },
    ["member_email"],
)


def _secondary_emails(field: str):
    def build(args: dict[str, Any]) -> dict[str, Any]:
        entries = [
            {**entry, "user": user_selector(entry["user"])} for entry in args[field]
        ]
        return {field: entries}

    return build


def _members_info(args: dict[str, Any]) -> dict[str, Any]:
    return {"members": [user_selector(member) for member in args["members"]]}


def _remove(args: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {"user": member_selector(args)}
    for key in ("wipe_data", "keep_account", "retain_team_shares"):
        if key in args:
            body[key] = args[key]
    # Transfer targets are only sent when given; Dropbox rejects a member
    # as its own transfer destination
    if "transfer_dest_id" in args:
        body["transfer_dest_id"] = user_selector(args["transfer_dest_id"])
    if "transfer_admin_id" in args:
        body["transfer_admin_id"] = user_selector(args["transfer_admin_id"])
    return body


def _set_profile(args: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {"user": member_selector(args)}
    for key in (
        "new_email",
        "new_external_id",
        "new_given_name",
        "new_surname",
        "new_persistent_id",
        "new_is_directory_restricted",
    ):
        if key in args:
            body[key] = args[key]
    return body


def _set_admin_permissions(args: dict[str, Any]) -> dict[str, Any]:
    return {"user": member_selector(args), "new_role": tagged(args["new_role"])}


def _set_profile_photo(args: dict[str, Any]) -> dict[str, Any]:
    return {"user": member_selector(args), "photo": tagged("base64_data", args["base64_data"])}


def _move_former_member_files(args: dict[str, Any]) -> dict[str, Any]:
    return {
        "user": member_selector(args),
        "transfer_dest_id": user_selector(args["transfer_dest_id"]),
        "transfer_admin_id": user_selector(args["transfer_admin_id"]),
    }


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="add_members",
        route="team/members/add",
        description="Invite new members to the team. May return an async_job_id for get_members_add_job_status.",
        params={"new_members": _NEW_MEMBERS, "force_async": boolean("Always run as an asynchronous job.")},
        required=("new_members",),
        defaults={"force_async": False},
    ),
    Endpoint(
        name="get_members_add_job_status",
        route="team/members/add/job_status/get",
        description="Check the status of an asynchronous add_members job.",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
    ),
    Endpoint(
        name="members_get_info",
        route="team/members/get_info",
        description="Get information about team members by team member id, email or external id.",
        params={
            "members": user_list(
                "Members to look up: dbmid: ids, email addresses, external ids or selector objects."
            ),
        },
        required=("members",),
        body=_members_info,
    ),
    Endpoint(
        name="list_members",
        route="team/members/list",
        description="List the members of the team.",
        params={
            "limit": integer("Maximum members per page.", minimum=1, maximum=1000),
            "include_removed": boolean("Include removed members."),
        },
        defaults={"limit": 100, "include_removed": False},
        pagination=Pagination("team/members/list/continue", "members"),
    ),
    Endpoint(
        name="members_list_continue",
        route="team/members/list/continue",
        description="Get the next page of list_members results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="recover_member",
        route="team/members/recover",
        description="Recover a deleted team member within 7 days of removal.",
        params=MEMBER_SELECTOR_PARAMS,
        body=member_body(),
    ),
    Endpoint(
        name="remove_member",
        route="team/members/remove",
        description=(
            "Remove a member from the team. Identify the member by team_member_id, "
            "email or external_id. Optionally transfer their files to another member."
        ),
        params={
            **MEMBER_SELECTOR_PARAMS,
            "wipe_data": boolean("Wipe data from the member's linked devices."),
            "keep_account": boolean("Keep the account as a Basic account."),
            "retain_team_shares": boolean("Keep access to team shared content (requires keep_account)."),
            "transfer_dest_id": string("Member (dbmid:, email or external id) to receive the files."),
            "transfer_admin_id": string("Admin (dbmid:, email or external id) notified of transfer errors."),
        },
        defaults={"wipe_data": True, "keep_account": False, "retain_team_shares": False},
        body=_remove,
    ),
    Endpoint(
        name="get_member_removal_job_status",
        route="team/members/remove/job_status/get",
        description="Check the status of an asynchronous remove_member job.",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
    ),
    Endpoint(
        name="suspend_member",
        route="team/members/suspend",
        description="Suspend a team member. Identify the member by team_member_id, email or external_id.",
        params={**MEMBER_SELECTOR_PARAMS, "wipe_data": boolean("Wipe data from linked devices.")},
        defaults={"wipe_data": False},
        body=member_body("wipe_data"),
    ),
    Endpoint(
        name="unsuspend_member",
        route="team/members/unsuspend",
        description="Unsuspend a team member. Identify the member by team_member_id, email or external_id.",
        params=MEMBER_SELECTOR_PARAMS,
        body=member_body(),
    ),
    Endpoint(
        name="send_welcome_email",
        route="team/members/send_welcome_email",
        description="Resend the welcome email to a member who hasn't joined yet.",
        params=MEMBER_SELECTOR_PARAMS,
        body=member_selector,
    ),
    Endpoint(
        name="set_admin_permissions",
        route="team/members/set_admin_permissions",
        description="Change a member's admin role.",
        params={**MEMBER_SELECTOR_PARAMS, "new_role": string("New role.", enum=ADMIN_ROLES)},
        required=("new_role",),
        body=_set_admin_permissions,
    ),
    Endpoint(
        name="update_team_member_profile",
        route="team/members/set_profile",
        description="Update a member's email, name, external id or persistent id.",
        params={
            **MEMBER_SELECTOR_PARAMS,
            "new_email": string("New email address."),
            "new_external_id": string("New external id."),
            "new_given_name": string("New given name."),
            "new_surname": string("New surname."),
            "new_persistent_id": string("New persistent id (SAML)."),
            "new_is_directory_restricted": boolean("Hide the member from the team directory."),
        },
        body=_set_profile,
    ),
    Endpoint(
        name="set_member_profile_photo",
        route="team/members/set_profile_photo",
        description="Set a team member's profile photo.",
        params={**MEMBER_SELECTOR_PARAMS, "base64_data": string("Base64-encoded image (JPEG or PNG).")},
        required=("base64_data",),
        body=_set_profile_photo,
    ),
    Endpoint(
        name="delete_profile_photo",
        route="team/members/delete_profile_photo",
        description="Delete a team member's profile photo.",
        params=MEMBER_SELECTOR_PARAMS,
        body=member_body(),
    ),
    Endpoint(
        name="add_secondary_emails",
        route="team/members/secondary_emails/add",
        description="Add secondary email addresses to team members.",
        params={"new_secondary_emails": _SECONDARY_EMAILS},
        required=("new_secondary_emails",),
        body=_secondary_emails("new_secondary_emails"),
    ),
    Endpoint(
        name="delete_secondary_emails",
        route="team/members/secondary_emails/delete",
        description="Delete secondary email addresses from team members.",
        params={"emails_to_delete": _SECONDARY_EMAILS},
        required=("emails_to_delete",),
        body=_secondary_emails("emails_to_delete"),
    ),
    Endpoint(
        name="resend_verification_emails",
        route="team/members/secondary_emails/resend_verification_emails",
        description="Resend verification emails for unverified secondary emails.",
        params={"emails_to_resend": _SECONDARY_EMAILS},
        required=("emails_to_resend",),
        body=_secondary_emails("emails_to_resend"),
    ),
    Endpoint(
        name="move_former_member_files",
        route="team/members/move_former_member_files",
        description="Move a removed member's files to another member.",
        params={
            **MEMBER_SELECTOR_PARAMS,
            "transfer_dest_id": string("Member (dbmid:, email or external id) to receive the files."),
            "transfer_admin_id": string("Admin (dbmid:, email or external id) notified of errors."),
        },
        required=("transfer_dest_id", "transfer_admin_id"),
        body=_move_former_member_files,
    ),
    Endpoint(
        name="check_move_former_member_files_job_status",
        route="team/members/move_former_member_files/job_status/check",
        description="Check the status of an asynchronous move_former_member_files job.",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
    ),
]
