"""
Endpoint execution: the one interpreter for every catalog entry.

validate → apply defaults → split header/control arguments from the body →
build the request argument → call the adapter → (optionally) follow cursors →
normalize. DbxError is converted to a dict here and never escapes.
"""

from dataclasses import dataclass, replace
from typing import Any

from adapters import dropbox
from config import MAX_PAGES
from logging_config import logger
from models import (
    CONTENT_ENCODING_PARAM,
    CONTENT_PARAM,
    FETCH_ALL_PARAM,
    PATH_ROOT_PARAM,
    SELECT_USER_PARAM,
    DbxError,
    Endpoint,
    ErrorKind,
    PagedResult,
    Pagination,
    Style,
)
from tools.schema import control_params, parameters_schema
from validation import decode_content, validate_arguments


@dataclass
class CallPlan:
    """What call_endpoint sends: request argument, upload bytes and header values."""
    arg: Any
    content: bytes | None = None
    select_user: str | None = None
    select_admin: str | None = None
    namespace_id: str | None = None
    fetch_all: bool = False

    def headers(self) -> dict[str, str | None]:
        return {
            "select_user": self.select_user,
            "select_admin": self.select_admin,
            "namespace_id": self.namespace_id,
        }


def plan_call(endpoint: Endpoint, arguments: dict[str, Any]) -> CallPlan:
    """
    Turn tool arguments into a CallPlan without touching the network.

    Raises:
        ValueError: Schema violations (ArgumentError) or body builder rejections
    """
    validate_arguments(parameters_schema(endpoint), arguments)

    args = {**endpoint.defaults, **arguments}
    args = {k: v for k, v in args.items() if v is not None}

    plan = CallPlan(arg=None)
    if endpoint.select_user:
        plan.select_user = args.get(SELECT_USER_PARAM)
    elif endpoint.select_admin:
        plan.select_admin = args.get(SELECT_USER_PARAM)
    if endpoint.path_root:
        plan.namespace_id = args.get(PATH_ROOT_PARAM)
    if endpoint.pagination is not None:
        plan.fetch_all = bool(args.get(FETCH_ALL_PARAM))
    if endpoint.style == Style.UPLOAD and CONTENT_PARAM in args:
        plan.content = decode_content(
            args[CONTENT_PARAM], args.get(CONTENT_ENCODING_PARAM, "utf-8")
        )

    skip = control_params(endpoint)
    body_args = {k: v for k, v in args.items() if k not in skip}
    if endpoint.body is not None:
        plan.arg = endpoint.body(body_args)
    elif endpoint.params:
        plan.arg = body_args
    # Routes without parameters take the JSON literal null
    return plan


def normalize_result(result: Any) -> dict[str, Any]:
    """Shape any successful result as a JSON object."""
    if isinstance(result, PagedResult):
        return result.to_dict()
    if isinstance(result, dict):
        return result
    if result is None:
        return {"success": True}
    return {"result": result}


def _has_more(pagination: Pagination, page: dict[str, Any]) -> bool:
    if not page.get(pagination.cursor_key):
        return False
    if pagination.has_more_key is None:
        return True
    return bool(page.get(pagination.has_more_key))


def fetch_remaining(
    endpoint: Endpoint,
    first: dict[str, Any],
    plan: CallPlan,
    max_pages: int | None = None,
) -> PagedResult:
    """
    Follow the cursor from a first page, concatenating items.

    The merged result keeps the last page's cursor, so a truncated listing
    can be resumed with the matching *_continue tool.
    """
    pagination = endpoint.pagination
    assert pagination is not None
    max_pages = MAX_PAGES if max_pages is None else max_pages
    continuation = replace(
        endpoint, route=pagination.continue_route, body=None, style=Style.RPC
    )

    items = list(first.get(pagination.items_key, []))
    page = first
    pages = 1
    truncated = False
    while _has_more(pagination, page):
        if pages >= max_pages:
            truncated = True
            break
        page = dropbox.request(
            continuation,
            {"cursor": page[pagination.cursor_key]},
            **plan.headers(),
        )
        items.extend(page.get(pagination.items_key, []))
        pages += 1

    if truncated:
        logger.warning(f"{endpoint.name}: stopped after {pages} pages (DBX_MAX_PAGES)")
    return PagedResult({**page, pagination.items_key: items}, pages, truncated)


def error_response(endpoint: Endpoint, error: DbxError) -> dict[str, Any]:
    """DbxError → tool response, with the endpoint's friendly not-found text."""
    response = error.to_dict()
    if error.kind == ErrorKind.NOT_FOUND and endpoint.not_found_message:
        response["message"] = endpoint.not_found_message
    return response


def call_endpoint(endpoint: Endpoint, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Run one catalog endpoint with tool arguments.

    Returns:
        The normalized API result, or an error dict ({"error": True, "kind", ...})
    """
    arguments = arguments or {}
    try:
        plan = plan_call(endpoint, arguments)
    except ValueError as e:
        return DbxError(
            ErrorKind.INVALID_INPUT, str(e), details={"path": getattr(e, "path", [])}
        ).to_dict()

    try:
        result = dropbox.request(endpoint, plan.arg, content=plan.content, **plan.headers())
        if plan.fetch_all and isinstance(result, dict):
            result = fetch_remaining(endpoint, result, plan)
    except DbxError as e:
        logger.info(f"{endpoint.name} failed: {e.kind.value}: {e.message}")
        return error_response(endpoint, e)

    return normalize_result(result)
