"""Tests for the generated markdown documentation resources."""

import pytest

from resources.tools import (
    OVERVIEW_URI,
    TOOL_URI_PREFIX,
    list_resources,
    overview_markdown,
    read_resource,
    tool_to_markdown,
)
from tools.registry import ToolRegistry, function_tool, get_registry


class TestToolToMarkdown:
    """Tests for per-tool pages."""

    def test_parameter_table(self) -> None:
        text = tool_to_markdown(get_registry().get("get_metadata"))

        assert text.startswith("# get_metadata\n")
        assert "| Param | Type | Required | Default | Description |" in text
        assert "| `path` | string | yes |" in text
        assert "| `include_deleted` | boolean |  | false |" in text

    def test_endpoint_section(self) -> None:
        text = tool_to_markdown(get_registry().get("get_metadata"))

        assert "`POST https://api.dropboxapi.com/2/files/get_metadata` (rpc)" in text
        assert "Dropbox-API-Select-User" in text

    def test_enum_rendered(self) -> None:
        text = tool_to_markdown(get_registry().get("upload_file"))
        assert "string (utf-8 \\| base64)" in text

    def test_pagination_note(self) -> None:
        text = tool_to_markdown(get_registry().get("list_members"))
        assert "`fetch_all` follows `team/members/list/continue` and merges `members`" in text

    def test_no_parameters(self) -> None:
        text = tool_to_markdown(get_registry().get("get_current_account"))
        assert "Takes no parameters." in text

    def test_unauthenticated_note(self) -> None:
        text = tool_to_markdown(get_registry().get("list_folder_longpoll"))
        assert "no authorization header" in text

    def test_composite_has_no_endpoint_section(self) -> None:
        text = tool_to_markdown(get_registry().get("get_user_folders"))
        assert "## Endpoint" not in text
        assert "`member_id`" in text


class TestOverview:
    """Tests for the overview page."""

    def test_lists_every_tool(self) -> None:
        registry = get_registry()
        text = overview_markdown(registry)
        for tool in registry:
            assert f"`{tool.name}`" in text

    def test_namespace_headings(self) -> None:
        text = overview_markdown(get_registry())
        assert "## Files" in text
        assert "## Team admin workflows" in text

    def test_unknown_namespace_uses_label(self) -> None:
        registry = ToolRegistry()
        registry.register(function_tool(
            "ping", "Ping. Returns pong.", {"type": "object", "properties": {}},
            lambda: {"pong": True}, namespace="misc",
        ))
        text = overview_markdown(registry)
        assert "## misc" in text
        assert "- `ping`: Ping" in text


class TestResourceAccess:
    """Tests for list_resources / read_resource."""

    def test_list_includes_overview_and_tools(self) -> None:
        resources = list_resources()
        uris = [r["uri"] for r in resources]

        assert uris[0] == OVERVIEW_URI
        assert f"{TOOL_URI_PREFIX}list_folder" in uris
        assert len(resources) == len(get_registry()) + 1

    def test_empty_registry_is_respected(self) -> None:
        assert [r["uri"] for r in list_resources(ToolRegistry())] == [OVERVIEW_URI]

    def test_read_tool(self) -> None:
        assert read_resource(f"{TOOL_URI_PREFIX}list_folder").startswith("# list_folder")

    def test_read_overview(self) -> None:
        assert read_resource(OVERVIEW_URI).startswith("# dbx-tools")

    @pytest.mark.parametrize("uri", [
        f"{TOOL_URI_PREFIX}no_such_tool",
        "other://tools/search",
        "dbx://docs/other",
    ])
    def test_unknown_uri(self, uri: str) -> None:
        with pytest.raises(KeyError):
            read_resource(uri)
