"""Team folders namespace."""

from typing import Any

from models import Endpoint, Pagination
from tools.schema import CURSOR, TEAM_FOLDER_ID, boolean, integer, objects, string, strings
from validation import tagged

SYNC_SETTINGS = ["default", "not_synced"]


def _sync_setting(args: dict[str, Any]) -> dict[str, Any]:
    body = dict(args)
    if "sync_setting" in body:
        body["sync_setting"] = tagged(body["sync_setting"])
    if "content_sync_settings" in body:
        body["content_sync_settings"] = [
            {"id": entry["id"], "sync_setting": tagged(entry["sync_setting"])}
            for entry in body["content_sync_settings"]
        ]
    return body


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="activate_team_folder",
        route="team/team_folder/activate",
        description="Reactivate an archived team folder.",
        params={"team_folder_id": TEAM_FOLDER_ID},
        required=("team_folder_id",),
    ),
    Endpoint(
        name="archive_team_folder",
        route="team/team_folder/archive",
        description="Archive an active team folder.",
        params={
            "team_folder_id": TEAM_FOLDER_ID,
            "force_async_off": boolean("Wait for completion instead of returning a job id."),
        },
        required=("team_folder_id",),
        defaults={"force_async_off": False},
    ),
    Endpoint(
        name="create_team_folder",
        route="team/team_folder/create",
        description="Create a new, active team folder with no members.",
        params={
            "name": string("Folder name."),
            "sync_setting": string("Desktop sync behaviour.", enum=SYNC_SETTINGS),
        },
        required=("name",),
        defaults={"sync_setting": "not_synced"},
        body=_sync_setting,
    ),
    Endpoint(
        name="team_folder_get_info",
        route="team/team_folder/get_info",
        description="Get metadata for team folders.",
        params={"team_folder_ids": strings("Team folder ids.")},
        required=("team_folder_ids",),
    ),
    Endpoint(
        name="list_team_folders",
        route="team/team_folder/list",
        description="List the team's team folders.",
        params={"limit": integer("Maximum folders per page.", minimum=1, maximum=1000)},
        defaults={"limit": 100},
        pagination=Pagination("team/team_folder/list/continue", "team_folders"),
    ),
    Endpoint(
        name="team_folder_list_continue",
        route="team/team_folder/list/continue",
        description="Get the next page of list_team_folders results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="team_folder_permanently_delete",
        route="team/team_folder/permanently_delete",
        description="Permanently delete an archived team folder.",
        params={"team_folder_id": TEAM_FOLDER_ID},
        required=("team_folder_id",),
    ),
    Endpoint(
        name="rename_team_folder",
        route="team/team_folder/rename",
        description="Rename an active or archived team folder.",
        params={"team_folder_id": TEAM_FOLDER_ID, "name": string("New name.")},
        required=("team_folder_id", "name"),
    ),
    Endpoint(
        name="update_sync_settings",
        route="team/team_folder/update_sync_settings",
        description="Update a team folder's sync settings, or those of folders inside it.",
        params={
            "team_folder_id": TEAM_FOLDER_ID,
            "sync_setting": string("Sync setting for the team folder.", enum=SYNC_SETTINGS),
            "content_sync_settings": objects(
                "Per-folder settings: id and sync_setting.",
                {"id": string("Folder id."), "sync_setting": string("Sync setting.", enum=SYNC_SETTINGS)},
                ["id", "sync_setting"],
            ),
        },
        required=("team_folder_id",),
        body=_sync_setting,
    ),
]
