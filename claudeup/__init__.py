"""Inspect, diagnose and maintain Claude Code plugins, marketplaces and MCP server settings."""

__version__ = "0.1.0"