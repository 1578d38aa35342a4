"""Sharing namespace: file and folder membership, shared folders, shared links."""

from typing import Any

from models import Endpoint, Host, Pagination, Style
from tools.catalog.common import normalized
from tools.schema import (
    ACCESS_LEVEL,
    ASYNC_JOB_ID,
    CURSOR,
    FILE,
    LIMIT,
    PATH,
    SHARED_FOLDER_ID,
    SHARING_ACTIONS,
    boolean,
    integer,
    obj,
    objects,
    string,
    strings,
)
from validation import normalize_path, sharing_member

_MEMBER = string(
    "Member to act on: an email address or a Dropbox account id (dbid:...)."
)
_LEAVE_A_COPY = boolean("Keep a copy of the folder's contents after leaving.")

_ACL_UPDATE_POLICY = string("Who can add and remove members.", enum=["owner", "editors"])
_MEMBER_POLICY = string("Who can be a member.", enum=["team", "anyone"])
_SHARED_LINK_POLICY = string(
    "Who can access the folder's shared links.", enum=["anyone", "team", "members"]
)
_ACCESS_INHERITANCE = string(
    "Whether the folder inherits members from its parent.", enum=["inherit", "no_inherit"]
)

# list_folders and friends report the last page by omitting the cursor
_SHARED_FOLDER_PAGES = Pagination("sharing/list_folders/continue", "entries", has_more_key=None)


def _with_member(args: dict[str, Any]) -> dict[str, Any]:
    body = dict(args)
    body["member"] = sharing_member(args["member"])
    return body


def _file_members(args: dict[str, Any]) -> dict[str, Any]:
    body = dict(args)
    body["members"] = [sharing_member(member) for member in args["members"]]
    return body


def _folder_members(args: dict[str, Any]) -> dict[str, Any]:
    body = dict(args)
    members = []
    for entry in args["members"]:
        if isinstance(entry, str):
            entry = {"member": entry}
        item = {**entry, "member": sharing_member(entry["member"])}
        item.setdefault("access_level", "viewer")
        members.append(item)
    body["members"] = members
    return body


def _list_shared_links(args: dict[str, Any]) -> dict[str, Any]:
    body = dict(args)
    if "path" in body:
        body["path"] = normalize_path(body["path"])
    return body


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="add_file_member",
        route="sharing/add_file_member",
        description="Share a file with members (email addresses or dbid: account ids).",
        params={
            "file": FILE,
            "members": strings("Members to add: email addresses or dbid: ids."),
            "custom_message": string("Message to include in the invitation."),
            "quiet": boolean("Don't send notifications."),
            "access_level": ACCESS_LEVEL,
            "add_message_as_comment": boolean("Also add the message as a comment on the file."),
        },
        required=("file", "members"),
        defaults={"quiet": False, "access_level": "viewer", "add_message_as_comment": False},
        body=_file_members,
    ),
    Endpoint(
        name="add_folder_member",
        route="sharing/add_folder_member",
        description="Share a folder with members. Each member gets its own access level (viewer by default).",
        params={
            "shared_folder_id": SHARED_FOLDER_ID,
            "members": objects(
                "Members to add.",
                {"member": _MEMBER, "access_level": ACCESS_LEVEL},
                ["member"],
            ),
            "quiet": boolean("Don't send notifications."),
            "custom_message": string("Message to include in the invitation."),
        },
        required=("shared_folder_id", "members"),
        defaults={"quiet": False},
        body=_folder_members,
    ),
    Endpoint(
        name="check_share_job_status",
        route="sharing/check_share_job_status",
        description="Check the status of an asynchronous share_folder job.",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
    ),
    Endpoint(
        name="get_file_metadata",
        route="sharing/get_file_metadata",
        description="Get sharing metadata for a file.",
        params={"file": FILE, "actions": SHARING_ACTIONS},
        required=("file",),
        defaults={"actions": []},
    ),
    Endpoint(
        name="get_file_metadata_batch",
        route="sharing/get_file_metadata/batch",
        description="Get sharing metadata for up to 100 files.",
        params={"files": strings("File paths or ids.", maxItems=100), "actions": SHARING_ACTIONS},
        required=("files",),
        defaults={"actions": []},
    ),
    Endpoint(
        name="get_folder_metadata",
        route="sharing/get_folder_metadata",
        description="Get sharing metadata for a shared folder.",
        params={"shared_folder_id": SHARED_FOLDER_ID, "actions": SHARING_ACTIONS},
        required=("shared_folder_id",),
        defaults={"actions": []},
    ),
    Endpoint(
        name="list_file_members",
        route="sharing/list_file_members",
        description="List the members of a shared file.",
        params={
            "file": FILE,
            "include_inherited": boolean("Include members who have access through a parent folder."),
            "limit": integer("Maximum members per page.", minimum=1, maximum=300),
        },
        required=("file",),
        defaults={"include_inherited": True, "limit": 100},
    ),
    Endpoint(
        name="list_file_members_batch",
        route="sharing/list_file_members/batch",
        description="List the members of up to 100 shared files.",
        params={
            "files": strings("File paths or ids.", maxItems=100),
            "limit": integer("Maximum members per file.", minimum=1, maximum=20),
        },
        required=("files",),
        defaults={"limit": 10},
    ),
    Endpoint(
        name="list_file_members_continue",
        route="sharing/list_file_members/continue",
        description="Get the next page of list_file_members results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="list_folder_members",
        route="sharing/list_folder_members",
        description="List the members of a shared folder.",
        params={
            "shared_folder_id": SHARED_FOLDER_ID,
            "actions": SHARING_ACTIONS,
            "limit": integer("Maximum members per page.", minimum=1, maximum=1000),
        },
        required=("shared_folder_id",),
        defaults={"limit": 1000},
    ),
    Endpoint(
        name="list_folder_members_continue",
        route="sharing/list_folder_members/continue",
        description="Get the next page of shared folder members.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="list_folders",
        route="sharing/list_folders",
        description="List the shared folders the user has access to.",
        params={"limit": LIMIT, "actions": SHARING_ACTIONS},
        defaults={"limit": 100, "actions": []},
        select_user=True,
        path_root=True,
        pagination=_SHARED_FOLDER_PAGES,
    ),
    Endpoint(
        name="list_folders_continue",
        route="sharing/list_folders/continue",
        description="Get the next page of list_folders results.",
        params={"cursor": CURSOR},
        required=("cursor",),
        select_user=True,
        path_root=True,
    ),
    Endpoint(
        name="list_mountable_folders",
        route="sharing/list_mountable_folders",
        description="List shared folders the user can mount but hasn't yet.",
        params={"limit": LIMIT, "actions": SHARING_ACTIONS},
        defaults={"limit": 100, "actions": []},
        pagination=Pagination(
            "sharing/list_mountable_folders/continue", "entries", has_more_key=None
        ),
    ),
    Endpoint(
        name="list_mountable_folders_continue",
        route="sharing/list_mountable_folders/continue",
        description="Get the next page of list_mountable_folders results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="list_received_files",
        route="sharing/list_received_files",
        description="List files shared with the user.",
        params={"limit": integer("Maximum files per page.", minimum=1, maximum=300), "actions": SHARING_ACTIONS},
        defaults={"limit": 100, "actions": []},
        pagination=Pagination(
            "sharing/list_received_files/continue", "entries", has_more_key=None
        ),
    ),
    Endpoint(
        name="list_received_files_continue",
        route="sharing/list_received_files/continue",
        description="Get the next page of list_received_files results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="list_shared_links",
        route="sharing/list_shared_links",
        description="List shared links, optionally only those for a given path.",
        params={
            "path": PATH,
            "cursor": CURSOR,
            "direct_only": boolean("Only links to the path itself, not to its parents."),
        },
        body=_list_shared_links,
        select_user=True,
        pagination=Pagination("sharing/list_shared_links", "links"),
    ),
    Endpoint(
        name="get_shared_link_metadata",
        route="sharing/get_shared_link_metadata",
        description="Get metadata for a shared link, or for a path inside a shared folder link.",
        params={
            "url": string("Shared link URL."),
            "path": string("Path relative to the shared folder link."),
            "link_password": string("Password for a protected link."),
        },
        required=("url",),
    ),
    Endpoint(
        name="get_shared_link_file",
        route="sharing/get_shared_link_file",
        description="Download the file behind a shared link.",
        params={
            "url": string("Shared link URL."),
            "path": string("Path relative to the shared folder link."),
            "link_password": string("Password for a protected link."),
        },
        required=("url",),
        style=Style.DOWNLOAD,
        host=Host.CONTENT,
    ),
    Endpoint(
        name="modify_shared_link_settings",
        route="sharing/modify_shared_link_settings",
        description="Change the visibility, expiry or password of a shared link.",
        params={
            "url": string("Shared link URL."),
            "settings": obj("New link settings (requested_visibility, link_password, expires, access, allow_download)."),
            "remove_expiration": boolean("Remove the link's expiration date."),
        },
        required=("url", "settings"),
        defaults={"remove_expiration": False},
    ),
    Endpoint(
        name="revoke_shared_link",
        route="sharing/revoke_shared_link",
        description="Revoke a shared link.",
        params={"url": string("Shared link URL.")},
        required=("url",),
    ),
    Endpoint(
        name="mount_folder",
        route="sharing/mount_folder",
        description="Mount a shared folder the user has been invited to.",
        params={"shared_folder_id": SHARED_FOLDER_ID},
        required=("shared_folder_id",),
    ),
    Endpoint(
        name="unmount_folder",
        route="sharing/unmount_folder",
        description="Unmount a shared folder without leaving it.",
        params={"shared_folder_id": SHARED_FOLDER_ID},
        required=("shared_folder_id",),
    ),
    Endpoint(
        name="share_folder",
        route="sharing/share_folder",
        description="Turn a folder into a shared folder.",
        params={
            "path": PATH,
            "acl_update_policy": _ACL_UPDATE_POLICY,
            "force_async": boolean("Always run as an asynchronous job."),
            "member_policy": _MEMBER_POLICY,
            "shared_link_policy": _SHARED_LINK_POLICY,
            "access_inheritance": _ACCESS_INHERITANCE,
        },
        required=("path",),
        defaults={
            "acl_update_policy": "editors",
            "force_async": False,
            "member_policy": "team",
            "shared_link_policy": "members",
            "access_inheritance": "inherit",
        },
        body=normalized("path"),
    ),
    Endpoint(
        name="unshare_folder",
        route="sharing/unshare_folder",
        description="Stop sharing a folder. Members lose access.",
        params={"shared_folder_id": SHARED_FOLDER_ID, "leave_a_copy": _LEAVE_A_COPY},
        required=("shared_folder_id",),
        defaults={"leave_a_copy": False},
        select_user=True,
        select_admin=True,
        path_root=True,
    ),
    Endpoint(
        name="transfer_folder",
        route="sharing/transfer_folder",
        description="Transfer ownership of a shared folder to another member.",
        params={
            "shared_folder_id": SHARED_FOLDER_ID,
            "to_dropbox_id": string("Account id (dbid:...) of the new owner."),
        },
        required=("shared_folder_id", "to_dropbox_id"),
    ),
    Endpoint(
        name="unshare_file",
        route="sharing/unshare_file",
        description="Remove all members from a file.",
        params={"file": FILE},
        required=("file",),
    ),
    Endpoint(
        name="relinquish_file_membership",
        route="sharing/relinquish_file_membership",
        description="Leave a file the user was invited to.",
        params={"file": FILE},
        required=("file",),
    ),
    Endpoint(
        name="relinquish_folder_membership",
        route="sharing/relinquish_folder_membership",
        description="Leave a shared folder.",
        params={"shared_folder_id": SHARED_FOLDER_ID, "leave_a_copy": _LEAVE_A_COPY},
        required=("shared_folder_id",),
        defaults={"leave_a_copy": False},
    ),
    Endpoint(
        name="remove_file_member_2",
        route="sharing/remove_file_member_2",
        description="Remove a member from a file.",
        params={"file": FILE, "member": _MEMBER},
        required=("file", "member"),
        body=_with_member,
    ),
    Endpoint(
        name="remove_folder_member",
        route="sharing/remove_folder_member",
        description="Remove a member from a shared folder.",
        params={"shared_folder_id": SHARED_FOLDER_ID, "member": _MEMBER, "leave_a_copy": _LEAVE_A_COPY},
        required=("shared_folder_id", "member"),
        defaults={"leave_a_copy": False},
        body=_with_member,
    ),
    Endpoint(
        name="update_file_member",
        route="sharing/update_file_member",
        description="Change a file member's access level.",
        params={"file": FILE, "member": _MEMBER, "access_level": ACCESS_LEVEL},
        required=("file", "member", "access_level"),
        body=_with_member,
    ),
    Endpoint(
        name="update_folder_member",
        route="sharing/update_folder_member",
        description="Change a shared folder member's access level.",
        params={"shared_folder_id": SHARED_FOLDER_ID, "member": _MEMBER, "access_level": ACCESS_LEVEL},
        required=("shared_folder_id", "member", "access_level"),
        body=_with_member,
    ),
    Endpoint(
        name="set_access_inheritance",
        route="sharing/set_access_inheritance",
        description="Set whether a shared folder inherits members from its parent.",
        params={"shared_folder_id": SHARED_FOLDER_ID, "access_inheritance": _ACCESS_INHERITANCE},
        required=("shared_folder_id", "access_inheritance"),
    ),
    Endpoint(
        name="update_folder_policy",
        route="sharing/update_folder_policy",
        description="Update a shared folder's member, ACL and shared link policies.",
        params={
            "shared_folder_id": SHARED_FOLDER_ID,
            "member_policy": _MEMBER_POLICY,
            "acl_update_policy": _ACL_UPDATE_POLICY,
            "shared_link_policy": _SHARED_LINK_POLICY,
        },
        required=("shared_folder_id",),
    ),
]
