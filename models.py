"""
Type definitions for dbx-tools.

Dataclasses defining the contracts between layers:
- The catalog declares Endpoint records (what to call, with which schema)
- Adapters turn an Endpoint plus arguments into an HTTP call
- Tools wire validation, execution and result shaping together

These types make the catalog→adapter contract explicit and IDE-checkable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


# ============================================================================
# ERROR TYPES
# ============================================================================

class ErrorKind(Enum):
    """Categories of errors for consistent handling."""
    AUTH_REQUIRED = "auth_required"      # No token configured
    AUTH_EXPIRED = "auth_expired"        # Token rejected (401)
    PERMISSION_DENIED = "permission_denied"  # Token lacks scope or team role
    NOT_FOUND = "not_found"              # Path, id or route doesn't exist
    ENDPOINT_ERROR = "endpoint_error"    # Route-specific error (HTTP 409)
    RATE_LIMITED = "rate_limited"        # Too many requests (429)
    SERVER_ERROR = "server_error"        # Dropbox 5xx
    NETWORK_ERROR = "network_error"      # Connection failed
    TIMEOUT = "timeout"                  # Request timed out
    INVALID_INPUT = "invalid_input"      # Bad parameters
    UNKNOWN = "unknown"                  # Unexpected error


class DbxError(Exception):
    """
    Structured error for consistent handling across layers.

    Adapters raise these on API failures.
    Tools catch and format for the tool-call response.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        retry_after: float | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}
        self.retryable = retryable
        self.retry_after = retry_after

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for the tool response."""
        return {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
            **self.details,
        }


# ============================================================================
# ENDPOINT TYPES
# ============================================================================

class Style(Enum):
    """Dropbox endpoint styles."""
    RPC = "rpc"            # JSON request body, JSON response
    UPLOAD = "upload"      # Argument in Dropbox-API-Arg header, bytes body
    DOWNLOAD = "download"  # Argument in Dropbox-API-Arg header, bytes response


class Host(Enum):
    """Dropbox API hosts."""
    API = "api"
    CONTENT = "content"
    NOTIFY = "notify"


# Arguments that never reach the request body
SELECT_USER_PARAM = "team_member_id"
PATH_ROOT_PARAM = "namespace_id"
FETCH_ALL_PARAM = "fetch_all"
CONTENT_PARAM = "content"
CONTENT_ENCODING_PARAM = "content_encoding"

BodyBuilder = Callable[[dict[str, Any]], Any]


@dataclass(frozen=True)
class Pagination:
    """
    Cursor continuation for list endpoints.

    The first page comes from the endpoint itself; later pages come from
    continue_route called with {"cursor": ...} until has_more is false.
    Some sharing routes have no has_more flag and signal the last page by
    omitting the cursor (has_more_key=None).
    """
    continue_route: str
    items_key: str
    cursor_key: str = "cursor"
    has_more_key: str | None = "has_more"


@dataclass(frozen=True)
class Endpoint:
    """
    One Dropbox route exposed as a tool.

    params holds JSON-schema property definitions. The header flags add
    their own optional parameters to the schema (see tools/schema.py), so
    catalog entries only declare what goes into the request argument.
    """
    name: str
    route: str
    description: str
    params: dict[str, dict[str, Any]] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    style: Style = Style.RPC
    host: Host = Host.API
    defaults: dict[str, Any] = field(default_factory=dict)
    body: BodyBuilder | None = None

    # Header flags
    select_user: bool = False
    select_admin: bool = False
    path_root: bool = False
    auth: bool = True

    pagination: Pagination | None = None
    not_found_message: str | None = None
    namespace: str = ""

    @property
    def url(self) -> str:
        return f"https://{self.host.value}.dropboxapi.com/2/{self.route}"


@dataclass
class PreparedCall:
    """A fully built HTTP request, ready for the transport."""
    url: str
    headers: dict[str, str]
    content: bytes | None = None
    style: Style = Style.RPC
    timeout: float | None = None


@dataclass
class PagedResult:
    """Successful result of a paginated fetch_all call."""
    data: dict[str, Any]
    pages: int
    truncated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {**self.data, "pages": self.pages, "truncated": self.truncated}
