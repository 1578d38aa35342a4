"""File requests namespace."""

from typing import Any

from models import Endpoint, Pagination
from tools.schema import CURSOR, boolean, integer, obj, string
from validation import normalize_path

_LATE_UPLOADS = string(
    "How long after the deadline uploads are still accepted (Professional and Business only).",
    enum=["one_day", "two_days", "seven_days", "thirty_days", "always"],
)


def _create(args: dict[str, Any]) -> dict[str, Any]:
    body = dict(args)
    body["destination"] = normalize_path(args["destination"])
    return body


def _update(args: dict[str, Any]) -> dict[str, Any]:
    body = {k: v for k, v in args.items() if k not in ("deadline", "allow_late_uploads")}
    if "destination" in body:
        body["destination"] = normalize_path(body["destination"])
    if "deadline" in args:
        deadline: dict[str, Any] = {".tag": "update", "deadline": args["deadline"]}
        if "allow_late_uploads" in args:
            deadline["allow_late_uploads"] = args["allow_late_uploads"]
        body["deadline"] = deadline
    return body


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="count_file_requests",
        route="file_requests/count",
        description="Count the user's file requests.",
        select_user=True,
        path_root=True,
    ),
    Endpoint(
        name="create_file_request",
        route="file_requests/create",
        description="Create a file request that lets anyone upload files to a folder.",
        params={
            "title": string("Title shown to uploaders."),
            "destination": string("Folder uploads go to."),
            "deadline": obj(
                "Optional deadline.",
                {
                    "deadline": string("ISO 8601 timestamp (e.g. 2026-12-31T23:59:59Z)."),
                    "allow_late_uploads": _LATE_UPLOADS,
                },
                ["deadline"],
            ),
            "open": boolean("Whether the request accepts uploads now."),
            "description": string("Description shown to uploaders."),
        },
        required=("title", "destination"),
        defaults={"open": True},
        body=_create,
    ),
    Endpoint(
        name="get_file_request",
        route="file_requests/get",
        description="Get a file request by id.",
        params={"id": string("File request id.")},
        required=("id",),
    ),
    Endpoint(
        name="list_file_requests",
        route="file_requests/list_v2",
        description="List the user's file requests.",
        params={"limit": integer("Maximum requests per page.", minimum=1, maximum=1000)},
        defaults={"limit": 1000},
        pagination=Pagination("file_requests/list/continue", "file_requests"),
    ),
    Endpoint(
        name="list_continue",
        route="file_requests/list/continue",
        description="Get the next page of list_file_requests results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="update_file_request",
        route="file_requests/update",
        description="Update a file request's title, destination, deadline or open state.",
        params={
            "id": string("File request id."),
            "title": string("New title."),
            "destination": string("New destination folder."),
            "deadline": string("New deadline, ISO 8601 timestamp."),
            "allow_late_uploads": _LATE_UPLOADS,
            "open": boolean("Whether the request accepts uploads."),
            "description": string("New description."),
        },
        required=("id",),
        body=_update,
        select_user=True,
        path_root=True,
    ),
    Endpoint(
        name="delete_all_closed_file_requests",
        route="file_requests/delete_all_closed",
        description="Delete all closed file requests.",
        select_user=True,
        path_root=True,
    ),
]
