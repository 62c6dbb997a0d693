"""Command-line entry point."""

from __future__ import annotations

import argparse
import os
import sys
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path
from typing import List, Optional

from claudeup.diagnostics import run_doctor
from claudeup.plugin_commands import (
    run_cleanup,
    run_disable,
    run_enable,
    run_plugins_list,
    run_status,
)
from claudeup.registry_commands import (
    run_marketplace_list,
    run_mcp_disable,
    run_mcp_enable,
    run_update,
)
from claudeup.updates import UpdateError

PROG = "claudeup"


def _version() -> str:
    try:
        return _dist_version(PROG)
    except PackageNotFoundError:
        return "dev"


def default_claude_dir() -> str:
    """The Claude directory: ``CLAUDE_CONFIG_DIR`` if set, else ``~/.claude``."""
    configured = os.environ.get("CLAUDE_CONFIG_DIR", "")
    if configured:
        return configured
    return str(Path.home() / ".claude")


def _help_handler(parser: argparse.ArgumentParser):
    return lambda ns: parser.print_help()


def build_parser() -> argparse.ArgumentParser:
    """The argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Manage Claude Code plugins, marketplaces, and MCP servers",
    )
    parser.add_argument("--version", action="version", version=f"{PROG} version {_version()}")
    parser.add_argument(
        "--claude-dir",
        default=default_claude_dir(),
        help="Claude installation directory",
    )
    parser.add_argument(
        "-y", "--yes", dest="assume_yes", action="store_true",
        help="Skip all prompts, use defaults",
    )
    parser.set_defaults(handler=_help_handler(parser))
    commands = parser.add_subparsers(dest="command")

    cleanup = commands.add_parser("cleanup", help="Fix and remove plugin issues")
    cleanup.add_argument("--reinstall", action="store_true",
                         help="Show reinstall commands for removed plugins")
    cleanup.add_argument("--dry-run", action="store_true",
                         help="Show what would happen without making changes")
    cleanup.add_argument("--fix-only", action="store_true",
                         help="Only fix path issues, don't remove entries")
    cleanup.add_argument("--remove-only", action="store_true",
                         help="Only remove broken entries, don't fix paths")
    cleanup.set_defaults(handler=lambda ns: run_cleanup(
        ns.claude_dir, dry_run=ns.dry_run, fix_only=ns.fix_only,
        remove_only=ns.remove_only, reinstall=ns.reinstall, assume_yes=ns.assume_yes,
    ))

    disable = commands.add_parser("disable", help="Disable a plugin")
    disable.add_argument("plugin_name")
    disable.set_defaults(handler=lambda ns: run_disable(ns.claude_dir, ns.plugin_name))

    enable = commands.add_parser("enable", help="Enable a previously disabled plugin")
    enable.add_argument("plugin_name")
    enable.set_defaults(handler=lambda ns: run_enable(ns.claude_dir, ns.plugin_name))

    doctor = commands.add_parser(
        "doctor", help="Diagnose common issues with Claude Code installation"
    )
    doctor.set_defaults(handler=lambda ns: run_doctor(ns.claude_dir))

    plugins = commands.add_parser("plugins", help="List installed plugins")
    plugins.add_argument("--summary", action="store_true",
                         help="Show only summary statistics")
    plugins.set_defaults(handler=lambda ns: run_plugins_list(ns.claude_dir, ns.summary))

    status = commands.add_parser("status", help="Show overview of Claude Code installation")
    status.set_defaults(handler=lambda ns: run_status(ns.claude_dir))

    marketplace = commands.add_parser("marketplace", help="Manage Claude Code marketplaces")
    marketplace.set_defaults(handler=_help_handler(marketplace))
    marketplace_commands = marketplace.add_subparsers(dest="marketplace_command")
    marketplace_list = marketplace_commands.add_parser("list", help="List installed marketplaces")
    marketplace_list.set_defaults(handler=lambda ns: run_marketplace_list(ns.claude_dir))

    mcp = commands.add_parser("mcp", help="Manage MCP servers")
    mcp.set_defaults(handler=_help_handler(mcp))
    mcp_commands = mcp.add_subparsers(dest="mcp_command")
    mcp_disable = mcp_commands.add_parser("disable", help="Disable a specific MCP server")
    mcp_disable.add_argument("server_ref", metavar="<plugin>:<server>")
    mcp_disable.set_defaults(handler=lambda ns: run_mcp_disable(ns.server_ref))
    mcp_enable = mcp_commands.add_parser(
        "enable", help="Enable a previously disabled MCP server"
    )
    mcp_enable.add_argument("server_ref", metavar="<plugin>:<server>")
    mcp_enable.set_defaults(handler=lambda ns: run_mcp_enable(ns.server_ref))

    update = commands.add_parser(
        "update", help="Check for and apply updates to marketplaces and plugins"
    )
    update.add_argument("--check-only", action="store_true",
                        help="Check for updates without applying them")
    update.set_defaults(handler=lambda ns: run_update(
        ns.claude_dir, check_only=ns.check_only, assume_yes=ns.assume_yes,
    ))

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line; return the process exit status."""
    args = build_parser().parse_args(argv)
    try:
        args.handler(args)
    except (RuntimeError, ValueError, OSError, UpdateError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())