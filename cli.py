#!/usr/bin/env python3
"""
CLI interface for dbx-tools.

Usage:
    dbx list [--namespace files]
    dbx describe list_folder
    dbx call list_folder --args '{"path": "/Reports"}'
    dbx whoami

This provides the same tools as the MCP server but via command line,
making them accessible to agents that don't support MCP.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from config import LOG_LEVEL
from logging_config import configure_logging
from resources.tools import tool_to_markdown
from tools import call_tool, get_registry
from tools.composite import detect_token_type


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def _load_arguments(args: argparse.Namespace) -> dict[str, Any]:
    """Tool arguments from --args, --args-file, or nothing."""
    if args.args_file:
        raw = Path(args.args_file).read_text()
    elif args.args:
        raw = args.args
    else:
        return {}
    try:
        arguments = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Arguments are not valid JSON: {e}")
    if not isinstance(arguments, dict):
        raise SystemExit("Arguments must be a JSON object")
    return arguments


def cmd_list(args: argparse.Namespace) -> None:
    """List tool names, grouped by namespace."""
    registry = get_registry()
    namespaces = [args.namespace] if args.namespace else registry.namespaces()
    for namespace in namespaces:
        names = [tool.name for tool in registry if tool.namespace == namespace]
        if not names:
            raise SystemExit(f"Unknown namespace: {namespace}")
        print(f"{namespace}:")
        for name in names:
            print(f"  {name}")


def cmd_describe(args: argparse.Namespace) -> None:
    """Print a tool's documentation."""
    tool = get_registry().get(args.tool)
    if tool is None:
        raise SystemExit(f"Unknown tool: {args.tool}")
    print(tool_to_markdown(tool))


def cmd_call(args: argparse.Namespace) -> None:
    """Call a tool and print its JSON result."""
    result = call_tool(args.tool, _load_arguments(args))
    _print_json(result)
    if result.get("error") is True:
        sys.exit(1)


def cmd_whoami(args: argparse.Namespace) -> None:
    """Show which kind of token is configured."""
    _print_json(detect_token_type())


def cmd_definitions(args: argparse.Namespace) -> None:
    """Dump function-calling definitions."""
    _print_json(get_registry().definitions(args.namespace))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Dropbox API tools from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    dbx list --namespace sharing
    dbx describe upload_file
    dbx call get_metadata --args '{"path": "/Reports/Q4.pdf"}'
    dbx call list_members --args '{"fetch_all": true}'
    dbx call upload_file --args-file upload.json
    dbx definitions > tools.json
""",
    )
    parser.add_argument("--log-level", default=LOG_LEVEL, help=f"Log level (default: {LOG_LEVEL})")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # list
    list_p = subparsers.add_parser("list", help="List available tools")
    list_p.add_argument("--namespace", help="Only this namespace (e.g. files, team_members)")
    list_p.set_defaults(func=cmd_list)

    # describe
    describe_p = subparsers.add_parser("describe", help="Show a tool's parameters")
    describe_p.add_argument("tool", help="Tool name")
    describe_p.set_defaults(func=cmd_describe)

    # call
    call_p = subparsers.add_parser("call", help="Call a tool")
    call_p.add_argument("tool", help="Tool name")
    source = call_p.add_mutually_exclusive_group()
    source.add_argument("--args", help="Arguments as a JSON object")
    source.add_argument("--args-file", help="File containing the arguments JSON")
    call_p.set_defaults(func=cmd_call)

    # whoami
    whoami_p = subparsers.add_parser("whoami", help="Detect personal or team token")
    whoami_p.set_defaults(func=cmd_whoami)

    # definitions
    defs_p = subparsers.add_parser("definitions", help="Dump tool definitions as JSON")
    defs_p.add_argument("--namespace", help="Only this namespace")
    defs_p.set_defaults(func=cmd_definitions)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
