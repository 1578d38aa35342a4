"""
Tool Documentation Resources

Generates dbx://tools/* and dbx://docs/overview markdown directly from the
tool registry. Single source of truth: the catalog descriptions and schemas
ARE the documentation.
"""

import json
from typing import Any

from tools.registry import Tool, ToolRegistry, get_registry

TOOL_URI_PREFIX = "dbx://tools/"
OVERVIEW_URI = "dbx://docs/overview"

# Human labels for namespace headings
NAMESPACE_TITLES = {
    "files": "Files",
    "sharing": "Sharing",
    "users": "Users and account",
    "file_requests": "File requests",
    "file_properties": "File properties",
    "team_members": "Team members",
    "team_groups": "Team groups",
    "team_folders": "Team folders",
    "team_admin": "Team administration",
    "workflows": "Team admin workflows",
}


def _type_label(prop: dict[str, Any]) -> str:
    if "type" not in prop:
        return "any"
    label = str(prop["type"])
    if label == "array" and isinstance(prop.get("items"), dict):
        items = prop["items"]
        label = f"{items.get('type', 'any')}[]"
    if "enum" in prop:
        label += " (" + " \\| ".join(str(v) for v in prop["enum"]) + ")"
    return label


def tool_to_markdown(tool: Tool) -> str:
    """Render one tool as markdown: description, parameter table, route."""
    lines = [f"# {tool.name}", "", tool.description, ""]

    properties: dict[str, Any] = tool.parameters.get("properties", {})
    required = set(tool.parameters.get("required", []))
    defaults = tool.endpoint.defaults if tool.endpoint is not None else {}

    if properties:
        lines += [
            "## Parameters",
            "",
            "| Param | Type | Required | Default | Description |",
            "|-------|------|----------|---------|-------------|",
        ]
        for name, prop in properties.items():
            default = json.dumps(defaults[name]) if name in defaults else ""
            lines.append(
                f"| `{name}` | {_type_label(prop)} | "
                f"{'yes' if name in required else ''} | {default} | "
                f"{prop.get('description', '')} |"
            )
        lines.append("")
    else:
        lines += ["Takes no parameters.", ""]

    endpoint = tool.endpoint
    if endpoint is not None:
        lines += ["## Endpoint", "", f"`POST {endpoint.url}` ({endpoint.style.value})"]
        notes = []
        if endpoint.select_user:
            notes.append("`team_member_id` is sent as Dropbox-API-Select-User")
        elif endpoint.select_admin:
            notes.append("`team_member_id` is sent as Dropbox-API-Select-Admin")
        if endpoint.path_root:
            notes.append("`namespace_id` is sent as Dropbox-API-Path-Root")
        if endpoint.pagination is not None:
            notes.append(
                f"`fetch_all` follows `{endpoint.pagination.continue_route}` "
                f"and merges `{endpoint.pagination.items_key}`"
            )
        if not endpoint.auth:
            notes.append("no authorization header")
        if notes:
            lines.append("")
            lines += [f"- {note}" for note in notes]
        lines.append("")

    return "\n".join(lines)


def overview_markdown(registry: ToolRegistry) -> str:
    """Overview: how tools behave, then every tool grouped by namespace."""
    lines = [
        "# dbx-tools",
        "",
        "Dropbox HTTP API as LLM tools. Every tool takes a JSON object of",
        "arguments and returns a JSON object.",
        "",
        "## Conventions",
        "",
        "- Failures return `{\"error\": true, \"kind\", \"message\", \"retryable\", ...}`",
        "- Team tokens act as a member by passing `team_member_id`",
        "- List tools accept `fetch_all: true` to follow cursors",
        "- Uploads take `content` (UTF-8 text, or base64 with `content_encoding`)",
        "",
        "## Resources",
        "",
        f"- `{OVERVIEW_URI}`: this overview",
        f"- `{TOOL_URI_PREFIX}{{name}}`: parameters and endpoint for one tool",
        "",
    ]
    for namespace in registry.namespaces():
        title = NAMESPACE_TITLES.get(namespace, namespace)
        lines += [f"## {title}", ""]
        for tool in registry:
            if tool.namespace == namespace:
                summary = tool.description.split(". ")[0].rstrip(".")
                lines.append(f"- `{tool.name}`: {summary}")
        lines.append("")
    return "\n".join(lines)


def list_resources(registry: ToolRegistry | None = None) -> list[dict[str, str]]:
    """List all available documentation resources."""
    if registry is None:
        registry = get_registry()
    resources = [{
        "uri": OVERVIEW_URI,
        "name": "overview",
        "description": "Conventions and the full tool list",
    }]
    for tool in registry:
        resources.append({
            "uri": f"{TOOL_URI_PREFIX}{tool.name}",
            "name": tool.name,
            "description": tool.description[:100],
        })
    return resources


def read_resource(uri: str, registry: ToolRegistry | None = None) -> str:
    """
    Get resource text by URI.

    Raises:
        KeyError: If the URI names no known resource
    """
    if registry is None:
        registry = get_registry()
    if uri == OVERVIEW_URI:
        return overview_markdown(registry)
    if not uri.startswith(TOOL_URI_PREFIX):
        raise KeyError(f"Not a dbx resource: {uri}")

    name = uri[len(TOOL_URI_PREFIX):]
    tool = registry.get(name)
    if tool is None:
        raise KeyError(f"Tool not found: {name}")
    return tool_to_markdown(tool)
