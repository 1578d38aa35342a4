"""Files namespace: content, metadata, batches, search and upload sessions."""

from typing import Any

from models import Endpoint, Host, Pagination, Style
from tools.catalog.common import normalized, path_entries, relocation_entries
from tools.schema import (
    ASYNC_JOB_ID,
    AUTORENAME,
    CURSOR,
    PATH,
    UPLOAD_MODE,
    boolean,
    integer,
    obj,
    objects,
    string,
    strings,
)
from validation import normalize_path, tagged

PATH_NOT_FOUND = "The specified path does not exist in the user's Dropbox."

THUMBNAIL_FORMATS = ["jpeg", "png"]
THUMBNAIL_SIZES = [
    "w32h32", "w64h64", "w128h128", "w256h256", "w480h320",
    "w640h480", "w960h640", "w1024h768", "w2048h1536",
]
THUMBNAIL_MODES = ["strict", "bestfit", "fitone_bestfit"]

_RELOCATION = {
    "from_path": string("Path of the file or folder to copy or move."),
    "to_path": string("Destination path."),
    "allow_shared_folder": boolean("Deprecated; kept for compatibility."),
    "autorename": AUTORENAME,
    "allow_ownership_transfer": boolean("Allow moves that transfer ownership of content."),
}
_RELOCATION_DEFAULTS = {
    "allow_shared_folder": False,
    "autorename": False,
    "allow_ownership_transfer": False,
}
_RELOCATION_ENTRIES = objects(
    "Pairs of from_path/to_path.",
    {"from_path": string("Source path."), "to_path": string("Destination path.")},
    ["from_path", "to_path"],
)
_PATH_ENTRIES = objects("Entries, each with a path.", {"path": PATH}, ["path"])

_LIST_FLAGS = {
    "recursive": boolean("List all subfolders recursively."),
    "include_media_info": boolean("Deprecated; media info is no longer returned."),
    "include_deleted": boolean("Include deleted entries."),
    "include_has_explicit_shared_members": boolean(
        "Report whether each file has explicit shared members."
    ),
}
_LIST_DEFAULTS = {
    "recursive": False,
    "include_media_info": False,
    "include_deleted": False,
    "include_has_explicit_shared_members": False,
}

_COMMIT = {
    "path": PATH,
    "mode": UPLOAD_MODE,
    "autorename": AUTORENAME,
    "mute": boolean("Don't notify the user's desktop clients."),
    "strict_conflict": boolean("Treat an identical-content overwrite as a conflict."),
}
_COMMIT_DEFAULTS = {"mode": "add", "autorename": True, "mute": False, "strict_conflict": False}


def _commit_info(args: dict[str, Any]) -> dict[str, Any]:
    info = {key: args[key] for key in _COMMIT if key in args}
    info["path"] = normalize_path(info.get("path"))
    return info


def _temporary_upload_link(args: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {"commit_info": _commit_info(args)}
    if "duration" in args:
        body["duration"] = args["duration"]
    return body


def _thumbnail(args: dict[str, Any]) -> dict[str, Any]:
    return {
        "resource": tagged("path", normalize_path(args["path"])),
        "format": tagged(args["format"]),
        "size": tagged(args["size"]),
        "mode": tagged(args["mode"]),
    }


def _thumbnail_batch(args: dict[str, Any]) -> dict[str, Any]:
    entries = []
    for entry in args["entries"]:
        item: dict[str, Any] = {"path": normalize_path(entry["path"])}
        for key, default in (("format", "jpeg"), ("size", "w64h64"), ("mode", "strict")):
            item[key] = tagged(entry.get(key, default))
        entries.append(item)
    return {"entries": entries}


def _list_revisions(args: dict[str, Any]) -> dict[str, Any]:
    body = dict(args)
    body["path"] = normalize_path(args["path"])
    body["mode"] = tagged(args["mode"])
    return body


def _search(args: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {"query": args["query"]}
    options: dict[str, Any] = {}
    if "path" in args:
        options["path"] = normalize_path(args["path"])
    if "max_results" in args:
        options["max_results"] = args["max_results"]
    if "file_extensions" in args:
        options["file_extensions"] = args["file_extensions"]
    if options:
        body["options"] = options
    if "include_highlights" in args:
        body["match_field_options"] = {"include_highlights": args["include_highlights"]}
    return body


def _upload(args: dict[str, Any]) -> dict[str, Any]:
    return _commit_info(args)


def _append(args: dict[str, Any]) -> dict[str, Any]:
    return {
        "cursor": {"session_id": args["session_id"], "offset": args["offset"]},
        "close": args.get("close", False),
    }


def _finish(args: dict[str, Any]) -> dict[str, Any]:
    return {
        "cursor": {"session_id": args["session_id"], "offset": args["offset"]},
        "commit": _commit_info(args),
    }


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="copy_file_or_folder",
        route="files/copy_v2",
        description="Copy a file or folder to a different location in the user's Dropbox.",
        params=_RELOCATION,
        required=("from_path", "to_path"),
        defaults=_RELOCATION_DEFAULTS,
        body=normalized("from_path", "to_path"),
        select_user=True,
    ),
    Endpoint(
        name="copy_batch",
        route="files/copy_batch_v2",
        description=(
            "Copy multiple files or folders. Returns an async_job_id to poll with "
            "copy_batch_check unless the job completes immediately."
        ),
        params={"entries": _RELOCATION_ENTRIES, "autorename": AUTORENAME},
        required=("entries",),
        defaults={"autorename": False},
        body=relocation_entries,
        select_user=True,
    ),
    Endpoint(
        name="copy_batch_check",
        route="files/copy_batch/check_v2",
        description="Check the status of an asynchronous copy_batch job.",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
    ),
    Endpoint(
        name="copy_reference_get",
        route="files/copy_reference/get",
        description="Get a copy reference to a file or folder, usable with save_copy_reference.",
        params={"path": PATH},
        required=("path",),
        body=normalized("path"),
    ),
    Endpoint(
        name="save_copy_reference",
        route="files/copy_reference/save",
        description="Save a copy reference returned by copy_reference_get to the user's Dropbox.",
        params={
            "copy_reference": string("Copy reference returned by copy_reference_get."),
            "path": PATH,
        },
        required=("copy_reference", "path"),
        body=normalized("path"),
    ),
    Endpoint(
        name="create_folder",
        route="files/create_folder_v2",
        description="Create a folder at a given path.",
        params={"path": PATH, "autorename": AUTORENAME},
        required=("path",),
        defaults={"autorename": True},
        body=normalized("path"),
        select_user=True,
    ),
    Endpoint(
        name="create_folder_batch",
        route="files/create_folder_batch",
        description="Create multiple folders at once.",
        params={
            "paths": strings("Paths of the folders to create."),
            "autorename": AUTORENAME,
            "force_async": boolean("Always run as an asynchronous job."),
        },
        required=("paths",),
        defaults={"autorename": False, "force_async": False},
        body=lambda args: {**args, "paths": [normalize_path(p) for p in args["paths"]]},
    ),
    Endpoint(
        name="delete_file_or_folder",
        route="files/delete_v2",
        description="Delete the file or folder at a given path. Folders are deleted with their contents.",
        params={"path": PATH, "parent_rev": string("Only delete if the file's revision matches.")},
        required=("path",),
        body=normalized("path"),
    ),
    Endpoint(
        name="delete_batch",
        route="files/delete_batch",
        description="Delete multiple files or folders. Returns an async_job_id for delete_batch_check.",
        params={"entries": _PATH_ENTRIES},
        required=("entries",),
        body=path_entries,
    ),
    Endpoint(
        name="delete_batch_check",
        route="files/delete_batch/check",
        description="Check the status of an asynchronous delete_batch job.",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
    ),
    Endpoint(
        name="permanently_delete",
        route="files/permanently_delete",
        description="Permanently delete a file or folder (business accounts only).",
        params={"path": PATH},
        required=("path",),
        body=normalized("path"),
    ),
    Endpoint(
        name="download_file",
        route="files/download",
        description="Download a file. Returns metadata and the content (UTF-8 text or base64).",
        params={"path": PATH},
        required=("path",),
        style=Style.DOWNLOAD,
        host=Host.CONTENT,
        body=normalized("path"),
        select_user=True,
    ),
    Endpoint(
        name="download_zip",
        route="files/download_zip",
        description="Download a folder as a zip file (base64 content).",
        params={"path": PATH},
        required=("path",),
        style=Style.DOWNLOAD,
        host=Host.CONTENT,
        body=normalized("path"),
    ),
    Endpoint(
        name="export_file",
        route="files/export",
        description="Export a non-downloadable file (e.g. a Paper doc) to a downloadable format.",
        params={
            "path": PATH,
            "export_format": string("Export format (see get_metadata export_info)."),
        },
        required=("path",),
        style=Style.DOWNLOAD,
        host=Host.CONTENT,
        body=normalized("path"),
        select_user=True,
    ),
    Endpoint(
        name="get_metadata",
        route="files/get_metadata",
        description="Get metadata for a file or folder.",
        params={
            "path": PATH,
            "include_media_info": _LIST_FLAGS["include_media_info"],
            "include_deleted": _LIST_FLAGS["include_deleted"],
            "include_has_explicit_shared_members": _LIST_FLAGS["include_has_explicit_shared_members"],
        },
        required=("path",),
        defaults={
            "include_media_info": False,
            "include_deleted": False,
            "include_has_explicit_shared_members": False,
        },
        body=normalized("path"),
        select_user=True,
        not_found_message=PATH_NOT_FOUND,
    ),
    Endpoint(
        name="get_preview",
        route="files/get_preview",
        description="Get a PDF or HTML preview of a file (base64 content).",
        params={"path": PATH},
        required=("path",),
        style=Style.DOWNLOAD,
        host=Host.CONTENT,
        body=normalized("path"),
    ),
    Endpoint(
        name="get_temporary_link",
        route="files/get_temporary_link",
        description="Get a temporary link (valid four hours) to stream a file's content.",
        params={"path": PATH},
        required=("path",),
        body=normalized("path"),
    ),
    Endpoint(
        name="get_temporary_upload_link",
        route="files/get_temporary_upload_link",
        description="Get a one-time link for uploading a file to the given path.",
        params={
            **_COMMIT,
            "duration": integer("Link lifetime in seconds.", minimum=60, maximum=14400),
        },
        required=("path",),
        defaults={**_COMMIT_DEFAULTS, "duration": 3600},
        body=_temporary_upload_link,
    ),
    Endpoint(
        name="get_thumbnail",
        route="files/get_thumbnail_v2",
        description="Get a thumbnail for an image file (base64 content).",
        params={
            "path": PATH,
            "format": string("Image format.", enum=THUMBNAIL_FORMATS),
            "size": string("Thumbnail size.", enum=THUMBNAIL_SIZES),
            "mode": string("How to resize and crop.", enum=THUMBNAIL_MODES),
        },
        required=("path",),
        style=Style.DOWNLOAD,
        host=Host.CONTENT,
        defaults={"format": "jpeg", "size": "w64h64", "mode": "strict"},
        body=_thumbnail,
    ),
    Endpoint(
        name="get_thumbnail_batch",
        route="files/get_thumbnail_batch",
        description="Get thumbnails for up to 25 image files in one call.",
        params={
            "entries": objects(
                "Files to thumbnail.",
                {
                    "path": PATH,
                    "format": string("Image format.", enum=THUMBNAIL_FORMATS),
                    "size": string("Thumbnail size.", enum=THUMBNAIL_SIZES),
                    "mode": string("How to resize and crop.", enum=THUMBNAIL_MODES),
                },
                ["path"],
                maxItems=25,
            ),
        },
        required=("entries",),
        host=Host.CONTENT,
        body=_thumbnail_batch,
    ),
    Endpoint(
        name="get_file_lock_batch",
        route="files/get_file_lock_batch",
        description="Get lock information for multiple files.",
        params={"entries": _PATH_ENTRIES},
        required=("entries",),
        body=path_entries,
    ),
    Endpoint(
        name="lock_file_batch",
        route="files/lock_file_batch",
        description="Lock multiple files for editing.",
        params={"entries": _PATH_ENTRIES},
        required=("entries",),
        body=path_entries,
    ),
    Endpoint(
        name="unlock_file_batch",
        route="files/unlock_file_batch",
        description="Unlock multiple locked files.",
        params={"entries": _PATH_ENTRIES},
        required=("entries",),
        body=path_entries,
    ),
    Endpoint(
        name="list_folder",
        route="files/list_folder",
        description=(
            "List the contents of a folder. Use '' or '/' for the root. "
            "Set fetch_all to follow the cursor through every page."
        ),
        params={"path": PATH, **_LIST_FLAGS, "limit": integer("Approximate page size.", minimum=1, maximum=2000)},
        defaults={"path": "", **_LIST_DEFAULTS},
        body=normalized("path"),
        select_user=True,
        pagination=Pagination("files/list_folder/continue", "entries"),
        not_found_message=PATH_NOT_FOUND,
    ),
    Endpoint(
        name="list_folder_continue",
        route="files/list_folder/continue",
        description="Get the next page of a list_folder listing.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="get_latest_cursor",
        route="files/list_folder/get_latest_cursor",
        description="Get a cursor for the current state of a folder without listing it (for longpoll).",
        params={
            "path": PATH,
            **_LIST_FLAGS,
            "include_mounted_folders": boolean("Include mounted folders."),
            "include_non_downloadable_files": boolean("Include files that cannot be downloaded."),
        },
        required=("path",),
        defaults={
            **_LIST_DEFAULTS,
            "include_mounted_folders": True,
            "include_non_downloadable_files": True,
        },
        body=normalized("path"),
    ),
    Endpoint(
        name="list_folder_longpoll",
        route="files/list_folder/longpoll",
        description="Wait for changes to a folder since the given cursor. Needs no token.",
        params={
            "cursor": CURSOR,
            "timeout": integer("Seconds to wait for changes.", minimum=30, maximum=480),
        },
        required=("cursor",),
        host=Host.NOTIFY,
        defaults={"timeout": 30},
        auth=False,
    ),
    Endpoint(
        name="list_revisions",
        route="files/list_revisions",
        description="List the revisions of a file.",
        params={
            "path": PATH,
            "mode": string("Whether path is a path or a file id.", enum=["path", "id"]),
            "limit": integer("Maximum number of revisions.", minimum=1, maximum=100),
        },
        required=("path",),
        defaults={"mode": "path", "limit": 10},
        body=_list_revisions,
    ),
    Endpoint(
        name="move_file_or_folder",
        route="files/move_v2",
        description="Move a file or folder to a different location in the user's Dropbox.",
        params=_RELOCATION,
        required=("from_path", "to_path"),
        defaults=_RELOCATION_DEFAULTS,
        body=normalized("from_path", "to_path"),
        select_user=True,
    ),
    Endpoint(
        name="move_batch",
        route="files/move_batch_v2",
        description="Move multiple files or folders. Returns an async_job_id for move_batch_check.",
        params={
            "entries": _RELOCATION_ENTRIES,
            "autorename": AUTORENAME,
            "allow_ownership_transfer": _RELOCATION["allow_ownership_transfer"],
        },
        required=("entries",),
        defaults={"autorename": False, "allow_ownership_transfer": False},
        body=relocation_entries,
        select_user=True,
    ),
    Endpoint(
        name="move_batch_check",
        route="files/move_batch/check_v2",
        description="Check the status of an asynchronous move_batch job.",
        params={"async_job_id": ASYNC_JOB_ID},
        required=("async_job_id",),
    ),
    Endpoint(
        name="restore_file",
        route="files/restore",
        description="Restore a specific revision of a file.",
        params={"path": PATH, "rev": string("Revision to restore.")},
        required=("path", "rev"),
        body=normalized("path"),
    ),
    Endpoint(
        name="save_url",
        route="files/save_url",
        description="Save the file at a URL into the user's Dropbox (runs asynchronously).",
        params={"path": PATH, "url": string("URL to download.")},
        required=("path", "url"),
        body=normalized("path"),
    ),
    Endpoint(
        name="search_files",
        route="files/search_v2",
        description="Search files and folders by name and content.",
        params={
            "query": string("Search text."),
            "path": string("Restrict the search to this folder."),
            "max_results": integer("Maximum results per page.", minimum=1, maximum=1000),
            "file_extensions": strings("Restrict to these extensions (e.g. ['pdf'])."),
            "include_highlights": boolean("Include highlighted match spans."),
        },
        required=("query",),
        defaults={"include_highlights": False},
        body=_search,
        pagination=Pagination("files/search/continue_v2", "matches"),
    ),
    Endpoint(
        name="search_continue",
        route="files/search/continue_v2",
        description="Get the next page of search_files results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="upload_file",
        route="files/upload",
        description="Upload a file of up to 150 MB. Larger files need an upload session.",
        params=_COMMIT,
        required=("path", "content"),
        style=Style.UPLOAD,
        host=Host.CONTENT,
        defaults=_COMMIT_DEFAULTS,
        body=_upload,
        select_user=True,
    ),
    Endpoint(
        name="upload_session_start",
        route="files/upload_session/start",
        description="Start an upload session, optionally with the first chunk of content.",
        params={"close": boolean("Close the session after this chunk.")},
        style=Style.UPLOAD,
        host=Host.CONTENT,
        defaults={"close": False},
    ),
    Endpoint(
        name="upload_session_append",
        route="files/upload_session/append_v2",
        description="Append a chunk of content to an upload session.",
        params={
            "session_id": string("Upload session id."),
            "offset": integer("Bytes uploaded so far.", minimum=0),
            "close": boolean("Close the session after this chunk."),
        },
        required=("session_id", "offset", "content"),
        style=Style.UPLOAD,
        host=Host.CONTENT,
        defaults={"close": False},
        body=_append,
    ),
    Endpoint(
        name="finish_upload_session",
        route="files/upload_session/finish",
        description="Finish an upload session and commit the file to the given path.",
        params={
            "session_id": string("Upload session id."),
            "offset": integer("Total bytes uploaded.", minimum=0),
            **_COMMIT,
        },
        required=("session_id", "offset", "path"),
        style=Style.UPLOAD,
        host=Host.CONTENT,
        defaults=_COMMIT_DEFAULTS,
        body=_finish,
    ),
    Endpoint(
        name="finish_upload_session_batch",
        route="files/upload_session/finish_batch_v2",
        description="Finish up to 1000 upload sessions in one call.",
        params={
            "entries": objects(
                "Sessions to finish, each with cursor and commit.",
                {
                    "cursor": obj("Session cursor.", {
                        "session_id": string("Upload session id."),
                        "offset": integer("Total bytes uploaded.", minimum=0),
                    }, ["session_id", "offset"]),
                    "commit": obj("Commit info.", _COMMIT, ["path"]),
                },
                ["cursor", "commit"],
            ),
        },
        required=("entries",),
    ),
]
