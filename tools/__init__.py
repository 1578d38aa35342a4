"""
Tools: the Dropbox tool catalog and the machinery that runs it.

- catalog/: declarative Endpoint table, one module per API namespace
- schema.py: JSON-schema constructors and definition shape
- execute.py: the single interpreter for catalog entries
- composite.py: tools that chain a few calls
- registry.py: name → Tool lookup used by server.py and cli.py
"""

from .execute import call_endpoint
from .registry import Tool, ToolRegistry, call_tool, get_registry

__all__ = ["call_endpoint", "call_tool", "get_registry", "Tool", "ToolRegistry"]
