"""
Declarative Dropbox endpoint catalog.

One Endpoint per tool, grouped by API namespace. Nothing here performs I/O;
tools/execute.py interprets the table.
"""

from dataclasses import replace
from functools import lru_cache

from models import Endpoint
from tools.catalog import (
    file_properties,
    file_requests,
    files,
    sharing,
    team_admin,
    team_folders,
    team_groups,
    team_members,
    users,
    workflows,
)

# namespace label -> module; order is the listing order
NAMESPACES = {
    "files": files,
    "sharing": sharing,
    "users": users,
    "file_requests": file_requests,
    "file_properties": file_properties,
    "team_members": team_members,
    "team_groups": team_groups,
    "team_folders": team_folders,
    "team_admin": team_admin,
    "workflows": workflows,
}


def all_endpoints() -> list[Endpoint]:
    """Every catalog endpoint, tagged with its namespace label."""
    return [
        replace(endpoint, namespace=namespace)
        for namespace, module in NAMESPACES.items()
        for endpoint in module.ENDPOINTS
    ]


@lru_cache(maxsize=1)
def _by_name() -> dict[str, Endpoint]:
    return {endpoint.name: endpoint for endpoint in all_endpoints()}


def get_endpoint(name: str) -> Endpoint:
    """
    Look up a catalog endpoint by tool name.

    Raises:
        KeyError: If no endpoint has that name
    """
    return _by_name()[name]


__all__ = ["NAMESPACES", "all_endpoints", "get_endpoint"]
