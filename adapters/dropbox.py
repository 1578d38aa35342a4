"""
Dropbox HTTP adapter: one generic call for every endpoint.

Turns an Endpoint plus its request argument into an HTTP call and turns the
HTTP response back into plain Python data. Three endpoint styles:

- rpc:      JSON argument in the body, JSON result in the body
- upload:   JSON argument in Dropbox-API-Arg, raw bytes in the body
- download: JSON argument in Dropbox-API-Arg, raw bytes in the response
            body and JSON metadata in the Dropbox-API-Result header

Errors come back as DbxError with the Dropbox error summary and tag
preserved so the caller can see exactly what the API objected to.
"""

import json
from typing import Any

import httpx

from adapters.credentials import clear_token_cache, get_access_token
from config import API_TIMEOUT, LONGPOLL_TIMEOUT, USER_AGENT
from logging_config import log_api_call, log_api_result
from models import DbxError, Endpoint, ErrorKind, Host, PreparedCall, Style
from retry import with_retry
from validation import encode_content

__all__ = [
    "build_request",
    "send",
    "request",
    "parse_response",
    "error_from_response",
    "header_json",
]

# Response header carrying download metadata
RESULT_HEADER = "Dropbox-API-Result"

# Longpoll responses can take LONGPOLL_TIMEOUT plus up to 90s of jitter
LONGPOLL_GRACE = 90


def header_json(value: Any) -> str:
    """
    Serialize an argument for the Dropbox-API-Arg header.

    HTTP headers must be ASCII; Dropbox additionally requires 0x7F to be
    escaped.
    """
    return json.dumps(value, ensure_ascii=True).replace("\x7f", "\\u007f")


def build_request(
    endpoint: Endpoint,
    arg: Any,
    *,
    token: str | None,
    content: bytes | None = None,
    select_user: str | None = None,
    select_admin: str | None = None,
    namespace_id: str | None = None,
) -> PreparedCall:
    """
    Build the HTTP request for an endpoint call.

    Args:
        endpoint: Catalog entry being called
        arg: Request argument (already shaped by the endpoint's body builder)
        token: Bearer token (ignored when the endpoint takes no auth)
        content: Upload body for upload-style endpoints
        select_user: Team member to act as (Dropbox-API-Select-User)
        select_admin: Team admin to act as (Dropbox-API-Select-Admin)
        namespace_id: Namespace to resolve paths in (Dropbox-API-Path-Root)

    Returns:
        PreparedCall ready for send()
    """
    headers: dict[str, str] = {"User-Agent": USER_AGENT}
    if endpoint.auth and token:
        headers["Authorization"] = f"Bearer {token}"
    if select_user:
        headers["Dropbox-API-Select-User"] = select_user
    if select_admin:
        headers["Dropbox-API-Select-Admin"] = select_admin
    if namespace_id:
        headers["Dropbox-API-Path-Root"] = json.dumps(
            {".tag": "namespace_id", "namespace_id": namespace_id}
        )

    body: bytes | None
    if endpoint.style == Style.RPC:
        headers["Content-Type"] = "application/json"
        # Routes without arguments still expect a JSON body: null
        body = json.dumps(arg).encode("utf-8")
    else:
        headers["Dropbox-API-Arg"] = header_json(arg)
        if endpoint.style == Style.UPLOAD:
            headers["Content-Type"] = "application/octet-stream"
            body = content if content is not None else b""
        else:
            body = None

    timeout = API_TIMEOUT
    if endpoint.host == Host.NOTIFY:
        timeout = LONGPOLL_TIMEOUT + LONGPOLL_GRACE

    return PreparedCall(
        url=endpoint.url,
        headers=headers,
        content=body,
        style=endpoint.style,
        timeout=timeout,
    )


def _parse_retry_after(response: httpx.Response, data: Any) -> float | None:
    """Seconds to wait before retrying a 429, from header or error body."""
    header = response.headers.get("Retry-After")
    if header:
        try:
            return float(header)
        except ValueError:
            pass
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        value = data["error"].get("retry_after")
        if isinstance(value, (int, float)):
            return float(value)
    return None


def _is_not_found(error_summary: str | None) -> bool:
    """Dropbox spells lookup failures as e.g. 'path/not_found/..'."""
    if not error_summary:
        return False
    return "not_found" in error_summary.split("/")


def error_from_response(response: httpx.Response) -> DbxError:
    """
    Convert a failed Dropbox response into a DbxError.

    The dict form carries: status, error_summary, error_tag (top-level union
    tag of the route error), and the parsed response body (or raw text when
    the body isn't JSON, as with 400 errors).
    """
    status = response.status_code
    raw = response.text
    try:
        data: Any = json.loads(raw) if raw else None
    except ValueError:
        data = None

    details: dict[str, Any] = {"status": status}
    error_summary: str | None = None
    if isinstance(data, dict):
        error_summary = data.get("error_summary")
        error = data.get("error")
        if error_summary:
            details["error_summary"] = error_summary
        if isinstance(error, dict) and ".tag" in error:
            details["error_tag"] = error[".tag"]
        details["response"] = data
    elif raw:
        details["raw"] = raw[:1000]

    retryable = False
    retry_after = None
    if status == 400:
        kind = ErrorKind.INVALID_INPUT
    elif status == 401:
        kind = ErrorKind.AUTH_EXPIRED
    elif status == 403:
        kind = ErrorKind.PERMISSION_DENIED
    elif status == 404:
        kind = ErrorKind.NOT_FOUND
    elif status == 409:
        kind = ErrorKind.NOT_FOUND if _is_not_found(error_summary) else ErrorKind.ENDPOINT_ERROR
    elif status == 429:
        kind = ErrorKind.RATE_LIMITED
        retryable = True
        retry_after = _parse_retry_after(response, data)
    elif status >= 500:
        kind = ErrorKind.SERVER_ERROR
        retryable = True
    else:
        kind = ErrorKind.UNKNOWN

    message = error_summary or "Dropbox API error"
    return DbxError(kind, message, details=details, retryable=retryable, retry_after=retry_after)


def parse_response(response: httpx.Response, style: Style) -> Any:
    """
    Parse a successful response.

    Download style returns metadata plus content (text when it decodes as
    UTF-8, base64 otherwise). Other styles return parsed JSON, falling back
    to the raw text, or None for an empty body.
    """
    if style == Style.DOWNLOAD:
        metadata_header = response.headers.get(RESULT_HEADER)
        metadata = json.loads(metadata_header) if metadata_header else None
        data = response.content
        text, encoding = encode_content(data)
        return {
            "metadata": metadata,
            "content": text,
            "content_encoding": encoding,
            "size": len(data),
        }

    text = response.text
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


@with_retry(max_attempts=3, delay_ms=1000)
def send(call: PreparedCall) -> Any:
    """
    Send a prepared call and return the parsed result.

    Raises:
        DbxError: On HTTP error status or transport failure (after retries)
    """
    log_api_call(call.url, style=call.style.value)
    with httpx.Client(timeout=httpx.Timeout(call.timeout or API_TIMEOUT)) as client:
        response = client.post(call.url, headers=call.headers, content=call.content)
    log_api_result(call.url, response.status_code)

    if response.status_code >= 400:
        raise error_from_response(response)
    return parse_response(response, call.style)


def request(
    endpoint: Endpoint,
    arg: Any,
    *,
    content: bytes | None = None,
    select_user: str | None = None,
    select_admin: str | None = None,
    namespace_id: str | None = None,
) -> Any:
    """
    Build and send one endpoint call with the configured credentials.

    Raises:
        DbxError: AUTH_REQUIRED when no token is configured, or any send() error
    """
    token = get_access_token() if endpoint.auth else None
    call = build_request(
        endpoint,
        arg,
        token=token,
        content=content,
        select_user=select_user,
        select_admin=select_admin,
        namespace_id=namespace_id,
    )
    try:
        return send(call)
    except DbxError as e:
        if e.kind == ErrorKind.AUTH_EXPIRED:
            # Dead token; the next call re-reads the token file or refreshes
            clear_token_cache()
        raise
