"""Commands for marketplaces, MCP server switches and updates."""

from __future__ import annotations

from typing import List

from claudeup.config import GlobalConfig, load_config, save_config
from claudeup.marketplaces import MarketplaceRegistry, load_marketplaces
from claudeup.plugins import PluginRegistry, load_plugins, save_plugins
from claudeup.prompts import select_from_list
from claudeup.updates import (
    UpdateError,
    check_marketplace_updates,
    check_plugin_updates,
    update_marketplace,
    update_plugin,
)


def _load_marketplaces(claude_dir: str) -> MarketplaceRegistry:
    try:
        return load_marketplaces(claude_dir)
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"failed to load marketplaces: {exc}") from exc


def _load_plugins(claude_dir: str) -> PluginRegistry:
    try:
        return load_plugins(claude_dir)
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"failed to load plugins: {exc}") from exc


def _load_cfg() -> GlobalConfig:
    try:
        return load_config()
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"failed to load config: {exc}") from exc


def _save_cfg(cfg: GlobalConfig) -> None:
    try:
        save_config(cfg)
    except OSError as exc:
        raise RuntimeError(f"failed to save config: {exc}") from exc


def run_marketplace_list(claude_dir: str) -> None:
    """Print every installed marketplace, sorted by name."""
    marketplaces = _load_marketplaces(claude_dir)
    names = sorted(marketplaces)

    print(f"=== Installed Marketplaces ({len(names)}) ===\n")
    for name in names:
        marketplace = marketplaces[name]
        print(f"✓ {name}")
        print(f"   Source:     {marketplace.source.source}")
        print(f"   Repo:       {marketplace.source.repo}")
        print(f"   Location:   {marketplace.install_location}")
        print(f"   Updated:    {marketplace.last_updated}")
        print()


def run_mcp_disable(server_ref: str) -> bool:
    """Mark an MCP server as disabled; return whether anything changed."""
    cfg = _load_cfg()
    if cfg.is_mcp_server_disabled(server_ref):
        print(f"✓ MCP server {server_ref} is already disabled")
        return False

    cfg.disable_mcp_server(server_ref)
    _save_cfg(cfg)

    print(f"✓ Disabled MCP server {server_ref}\n")
    print("This MCP server will no longer be loaded")
    print(f"Run 'claudeup mcp enable {server_ref}' to re-enable")
    print("\nNote: You may need to restart Claude Code for changes to take effect")
    return True


def run_mcp_enable(server_ref: str) -> bool:
    """Re-enable a disabled MCP server; return whether anything changed."""
    cfg = _load_cfg()
    if not cfg.is_mcp_server_disabled(server_ref):
        print(f"✓ MCP server {server_ref} is already enabled")
        return False

    cfg.enable_mcp_server(server_ref)
    _save_cfg(cfg)

    print(f"✓ Enabled MCP server {server_ref}\n")
    print("This MCP server will now be loaded")
    print(f"Run 'claudeup mcp disable {server_ref}' to disable again")
    print("\nNote: You may need to restart Claude Code for changes to take effect")
    return True


def _print_available(title: str, names: List[str]) -> None:
    if names:
        print(f"\n{title}")
        for name in names:
            print(f"  • {name}")


def run_update(claude_dir: str, check_only: bool = False, assume_yes: bool = False) -> None:
    """Check marketplaces and plugins for updates and apply the chosen ones."""
    print("Checking for updates...")

    marketplaces = _load_marketplaces(claude_dir)
    plugins = _load_plugins(claude_dir)

    print("━━━ Checking Marketplaces ━━━")
    outdated_marketplaces: List[str] = []
    for update in check_marketplace_updates(marketplaces):
        if update.has_update:
            print(f"  ⚠ {update.name}: Update available")
            outdated_marketplaces.append(update.name)
        else:
            print(f"  ✓ {update.name}: Up to date")

    print("\n━━━ Checking Plugins ━━━")
    outdated_plugins: List[str] = []
    for update in check_plugin_updates(plugins, marketplaces):
        if update.has_update:
            print(f"  ⚠ {update.name}: Update available")
            outdated_plugins.append(update.name)
    if not outdated_plugins:
        print("  ✓ All plugins up to date")

    print("\n━━━ Summary ━━━")
    if not outdated_marketplaces and not outdated_plugins:
        print("✓ Everything is up to date!")
        return

    if check_only:
        _print_available("Marketplace updates available:", outdated_marketplaces)
        _print_available("Plugin updates available:", outdated_plugins)
        print("\nRun without --check-only to apply updates")
        return

    if outdated_marketplaces:
        print()
        outdated_marketplaces = select_from_list(
            "Select marketplaces to update:", outdated_marketplaces, assume_yes
        )
    if outdated_plugins:
        print()
        outdated_plugins = select_from_list(
            "Select plugins to update:", outdated_plugins, assume_yes
        )

    if not outdated_marketplaces and not outdated_plugins:
        print("No updates selected")
        return

    if outdated_marketplaces:
        print("\n━━━ Updating Marketplaces ━━━")
        for name in outdated_marketplaces:
            try:
                update_marketplace(name, marketplaces[name].install_location)
            except UpdateError as exc:
                print(f"  ✗ {name}: {exc}")
            else:
                print(f"  ✓ {name}: Updated")

    if outdated_plugins:
        print("\n━━━ Updating Plugins ━━━")
        for name in outdated_plugins:
            try:
                update_plugin(name, plugins)
            except UpdateError as exc:
                print(f"  ✗ {name}: {exc}")
            else:
                print(f"  ✓ {name}: Updated")
        try:
            save_plugins(claude_dir, plugins)
        except OSError as exc:
            raise RuntimeError(f"failed to save plugins: {exc}") from exc

    print("\n✓ Updates complete!")