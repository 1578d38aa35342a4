"""
Tool registry: every callable tool by name.

Catalog endpoints are wrapped generically; composite tools register their
own handlers. The registry is what the MCP server, the CLI and the docs
resources all read from.
"""

from dataclasses import dataclass
from functools import lru_cache, partial
from typing import Any, Callable, Iterator

from logging_config import logger
from models import DbxError, Endpoint, ErrorKind
from tools import composite
from tools.catalog import all_endpoints
from tools.execute import call_endpoint
from tools.schema import definition, parameters_schema
from validation import validate_arguments

Handler = Callable[[dict[str, Any]], dict[str, Any]]

COMPOSITE_NAMESPACE = "workflows"


@dataclass
class Tool:
    """A named tool with its argument schema and handler."""
    name: str
    description: str
    parameters: dict[str, Any]
    handler: Handler
    namespace: str = ""
    endpoint: Endpoint | None = None

    @property
    def definition(self) -> dict[str, Any]:
        return definition(self.name, self.description, self.parameters)

    def __call__(self, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.handler(arguments or {})


def endpoint_tool(endpoint: Endpoint) -> Tool:
    """Wrap a catalog endpoint as a Tool."""
    return Tool(
        name=endpoint.name,
        description=endpoint.description,
        parameters=parameters_schema(endpoint),
        handler=partial(call_endpoint, endpoint),
        namespace=endpoint.namespace,
        endpoint=endpoint,
    )


def function_tool(
    name: str,
    description: str,
    parameters: dict[str, Any],
    func: Callable[..., dict[str, Any]],
    namespace: str = COMPOSITE_NAMESPACE,
) -> Tool:
    """
    Wrap a plain function taking keyword arguments as a Tool.

    Only declared properties reach func; stray arguments are dropped.
    """
    declared = set(parameters.get("properties", {}))

    def handler(arguments: dict[str, Any]) -> dict[str, Any]:
        try:
            validate_arguments(parameters, arguments)
        except ValueError as e:
            return DbxError(
                ErrorKind.INVALID_INPUT, str(e), details={"path": getattr(e, "path", [])}
            ).to_dict()
        ignored = set(arguments) - declared
        if ignored:
            logger.debug(f"{name}: ignoring undeclared arguments {sorted(ignored)}")
        return func(**{k: v for k, v in arguments.items() if k in declared})

    return Tool(name, description, parameters, handler, namespace)


class ToolRegistry:
    """Ordered name → Tool mapping."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def namespaces(self) -> list[str]:
        seen: dict[str, None] = {}
        for tool in self._tools.values():
            seen.setdefault(tool.namespace, None)
        return list(seen)

    def definitions(self, namespace: str | None = None) -> list[dict[str, Any]]:
        """Function-calling definitions, optionally for one namespace."""
        return [
            tool.definition
            for tool in self._tools.values()
            if namespace is None or tool.namespace == namespace
        ]

    def call(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Invoke a tool by name.

        Unknown names come back as an invalid_input error dict rather than
        raising, like every other tool failure.
        """
        tool = self._tools.get(name)
        if tool is None:
            return DbxError(ErrorKind.INVALID_INPUT, f"Unknown tool: {name}").to_dict()
        return tool(arguments)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())


def build_registry() -> ToolRegistry:
    registry = ToolRegistry()
    for endpoint in all_endpoints():
        registry.register(endpoint_tool(endpoint))

    registry.register(function_tool(
        "get_user_folders",
        composite.GET_USER_FOLDERS_DESCRIPTION,
        composite.GET_USER_FOLDERS_PARAMETERS,
        composite.get_user_folders,
    ))
    registry.register(function_tool(
        "detect_token_type",
        composite.DETECT_TOKEN_TYPE_DESCRIPTION,
        composite.DETECT_TOKEN_TYPE_PARAMETERS,
        composite.detect_token_type,
        namespace="users",
    ))
    return registry


@lru_cache(maxsize=1)
def get_registry() -> ToolRegistry:
    """The process-wide registry (built once)."""
    return build_registry()


def call_tool(name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
    """Invoke any tool by name; always returns a JSON-ready dict."""
    return get_registry().call(name, arguments)
