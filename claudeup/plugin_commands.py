"""Commands that inspect and change the installed-plugin registry."""

from __future__ import annotations

from typing import List, Optional, Tuple

from claudeup.config import DisabledPlugin, GlobalConfig, load_config, save_config
from claudeup.diagnostics import PathIssue, analyze_path_issues
from claudeup.marketplaces import MarketplaceRegistry, load_marketplaces
from claudeup.plugins import PluginMetadata, PluginRegistry, load_plugins, save_plugins
from claudeup.prompts import confirm_yes_no

HEADER_WIDTH = 40


def _load_registry(claude_dir: str) -> PluginRegistry:
    try:
        return load_plugins(claude_dir)
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"failed to load plugins: {exc}") from exc


def _save_registry(claude_dir: str, registry: PluginRegistry) -> None:
    try:
        save_plugins(claude_dir, registry)
    except OSError as exc:
        raise RuntimeError(f"failed to save plugins: {exc}") from exc


def _load_marketplaces(claude_dir: str) -> MarketplaceRegistry:
    try:
        return load_marketplaces(claude_dir)
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"failed to load marketplaces: {exc}") from exc


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


def _load_cfg_quietly() -> Optional[GlobalConfig]:
    try:
        return load_config()
    except (OSError, ValueError):
        return None


def _print_cleanup_plan(
    fixable: List[PathIssue], unfixable: List[PathIssue], dry_run: bool
) -> None:
    if fixable:
        if dry_run:
            print(f"Would fix {len(fixable)} path issues:\n")
        else:
            print(f"Found {len(fixable)} fixable path issues:\n")
        for issue in fixable:
            print(f"  {issue.plugin_name}")
            print(f"    {issue.install_path} → {issue.expected_path}")
        print()

    if unfixable:
        if dry_run:
            print(f"Would remove {len(unfixable)} broken plugin entries:\n")
        else:
            print(f"Found {len(unfixable)} plugins to remove:\n")
        for issue in unfixable:
            print(f"  • {issue.plugin_name}")
            print(f"    Path: {issue.install_path}")
        print()


def run_cleanup(
    claude_dir: str,
    dry_run: bool = False,
    fix_only: bool = False,
    remove_only: bool = False,
    reinstall: bool = False,
    assume_yes: bool = False,
) -> Tuple[int, int]:
    """Fix correctable plugin paths and remove entries that cannot be fixed.

    Returns the number of paths fixed and entries removed.
    """
    if fix_only and remove_only:
        raise ValueError("cannot use --fix-only and --remove-only together")

    plugins = _load_registry(claude_dir)
    issues = analyze_path_issues(plugins)

    fixable = [] if remove_only else [i for i in issues if i.can_auto_fix]
    unfixable = [] if fix_only else [i for i in issues if not i.can_auto_fix]

    if not fixable and not unfixable:
        print("✓ No issues found")
        return 0, 0

    _print_cleanup_plan(fixable, unfixable, dry_run)

    if dry_run:
        print("Run without --dry-run to apply these changes")
        return 0, 0

    fixed = 0
    if fixable and confirm_yes_no("Fix these paths?", assume_yes):
        for issue in fixable:
            plugin = plugins.get_plugin(issue.plugin_name)
            if plugin is not None:
                plugin.install_path = issue.expected_path
                plugins.set_plugin(issue.plugin_name, plugin)
                fixed += 1

    removed_issues: List[PathIssue] = []
    if unfixable and confirm_yes_no("Remove broken entries?", assume_yes):
        removed_issues = [
            issue for issue in unfixable if plugins.disable_plugin(issue.plugin_name)
        ]
    removed = len(removed_issues)

    _save_registry(claude_dir, plugins)

    print()
    if fixed:
        print(f"✓ Fixed {fixed} plugin paths")
    if removed:
        print(f"✓ Removed {removed} plugin entries")

    if reinstall and removed:
        print("\nTo reinstall these plugins, use:")
        for issue in removed_issues:
            print(f"  claude plugin install {issue.plugin_name}")

    if fixed or removed:
        print("\nRun 'claudeup status' to verify the changes")

    return fixed, removed


def run_disable(claude_dir: str, plugin_name: str) -> None:
    """Remove a plugin from the registry, keeping its metadata for later."""
    cfg = _load_cfg()

    if cfg.is_plugin_disabled(plugin_name):
        print(f"✓ Plugin {plugin_name} is already disabled")
        return

    plugins = _load_registry(claude_dir)
    meta = plugins.get_plugin(plugin_name)
    if meta is None:
        raise RuntimeError(f"plugin not found: {plugin_name}")

    cfg.disable_plugin(
        plugin_name,
        DisabledPlugin(
            version=meta.version,
            installed_at=meta.installed_at,
            last_updated=meta.last_updated,
            install_path=meta.install_path,
            git_commit_sha=meta.git_commit_sha,
            is_local=meta.is_local,
        ),
    )
    plugins.disable_plugin(plugin_name)

    _save_cfg(cfg)
    _save_registry(claude_dir, plugins)

    print(f"✓ Disabled {plugin_name}\n")
    print("Plugin commands, agents, skills, and MCP servers are now unavailable")
    print(f"Run 'claudeup enable {plugin_name}' to re-enable")


def run_enable(claude_dir: str, plugin_name: str) -> None:
    """Put a previously disabled plugin back into the registry."""
    cfg = _load_cfg()

    saved = cfg.enable_plugin(plugin_name)
    if saved is None:
        raise RuntimeError(
            f"plugin {plugin_name} is not disabled (or was never installed via claudeup)"
        )

    plugins = _load_registry(claude_dir)
    if plugins.plugin_exists(plugin_name):
        raise RuntimeError(f"plugin {plugin_name} is already enabled")

    plugins.enable_plugin(
        plugin_name,
        PluginMetadata(
            version=saved.version,
            installed_at=saved.installed_at,
            last_updated=saved.last_updated,
            install_path=saved.install_path,
            git_commit_sha=saved.git_commit_sha,
            is_local=saved.is_local,
        ),
    )

    _save_cfg(cfg)
    _save_registry(claude_dir, plugins)

    print(f"✓ Enabled {plugin_name}\n")
    print("Plugin commands, agents, skills, and MCP servers are now available")
    print(f"Run 'claudeup disable {plugin_name}' to disable again")


def run_plugins_list(claude_dir: str, summary: bool = False) -> None:
    """Print every installed plugin, or only summary statistics."""
    all_plugins = _load_registry(claude_dir).get_all_plugins()
    names = sorted(all_plugins)

    local_count = sum(1 for p in all_plugins.values() if p.is_local)
    cached_count = len(all_plugins) - local_count
    existing = {name for name, p in all_plugins.items() if p.path_exists()}
    enabled_count = len(existing)
    stale_count = len(all_plugins) - enabled_count

    if summary:
        print("=== Plugin Summary ===")
        print(f"\nTotal:   {len(names)} plugins")
        print(f"Enabled: {enabled_count}")
        if stale_count:
            print(f"Stale:   {stale_count}")
        print("\nBy Type:")
        print(f"  Cached: {cached_count} (copied to ~/.claude/plugins/cache/)")
        print(f"  Local:  {local_count} (referenced from marketplace)")
        return

    print(f"=== Installed Plugins ({len(names)}) ===\n")

    for name in names:
        plugin = all_plugins[name]
        if name in existing:
            status, status_text = "✓", "enabled"
        else:
            status, status_text = "✗", "stale (path not found)"

        print(f"{status} {name}")
        print(f"   Version:    {plugin.version}")
        print(f"   Status:     {status_text}")
        print(f"   Path:       {plugin.install_path}")
        print(f"   Installed:  {plugin.installed_at}")
        print(f"   Type:       {'local' if plugin.is_local else 'cached'}")
        print()

    print("━━━ Summary ━━━")
    print(f"Total: {len(names)} plugins ({cached_count} cached, {local_count} local)")
    if stale_count:
        print(f"⚠ {stale_count} stale plugins detected")


def run_status(claude_dir: str) -> None:
    """Print an overview of marketplaces, plugins and detected issues."""
    marketplaces = _load_marketplaces(claude_dir)
    plugins = _load_registry(claude_dir)

    print_header("claudeup Status")

    cfg = _load_cfg_quietly()
    active_profile = "none"
    if cfg is not None and cfg.preferences.active_profile:
        active_profile = cfg.preferences.active_profile
    print(f"\nActive Profile: {active_profile}")

    print(f"\nMarketplaces ({len(marketplaces)})")
    for name in sorted(marketplaces):
        print(f"  ✓ {name}")

    all_plugins = plugins.get_all_plugins()
    stale = sorted(name for name, p in all_plugins.items() if not p.path_exists())
    enabled_count = len(all_plugins) - len(stale)

    print(f"\nPlugins ({len(all_plugins)} total)")
    print(f"  ✓ {enabled_count} enabled")

    print("\nMCP Servers")
    print("  → Run 'claudeup mcp list' for details")

    if stale:
        print("\nIssues Detected")
        print(f"  ⚠ {len(stale)} plugins have stale paths")
        for name in stale:
            print(f"    - {name}")
        print("  → Run 'claudeup doctor' for details")


def print_header(title: str) -> None:
    """Print ``title`` centred in a double-lined box."""
    padding = max((HEADER_WIDTH - len(title) - 2) // 2, 0)
    right = max(HEADER_WIDTH - padding - len(title), 0)
    print("╔" + "═" * HEADER_WIDTH + "╗")
    print("║" + " " * padding + title + " " * right + "║")
    print("╚" + "═" * HEADER_WIDTH + "╝")