"""Finding broken plugin paths and missing marketplaces."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Dict, List

from claudeup.marketplaces import MarketplaceRegistry, load_marketplaces
from claudeup.plugins import PluginRegistry, load_plugins

# Marketplaces whose plugins live one directory further down than recorded.
_SUBDIRECTORY_MARKERS = (
    ("claude-code-plugins", "plugins"),
    ("claude-code-templates", "plugins"),
    ("anthropic-agent-skills", "skills"),
    ("every-marketplace", "plugins"),
    ("awesome-claude-code-plugins", "plugins"),
)
_DUPLICATE_DIR_MARKER = "tanzu-cf-architect"


class IssueType(str, enum.Enum):
    """Kind of problem found with a plugin's install path."""

    MISSING_SUBDIRECTORY = "missing_subdirectory"
    NOT_FOUND = "not_found"


@dataclass
class PathIssue:
    """A plugin whose recorded install path does not exist."""

    plugin_name: str
    install_path: str
    issue_type: IssueType
    can_auto_fix: bool
    expected_path: str = ""


def _base_name(path: str) -> str:
    stripped = path.rstrip(os.sep)
    if not stripped:
        return os.sep if path else "."
    return os.path.basename(stripped)


def _join(*parts: str) -> str:
    kept = [part for part in parts if part]
    if not kept:
        return ""
    return os.path.normpath(os.path.join(*kept))


def expected_path(plugin_name: str, current_path: str) -> str:
    """Where a plugin recorded at ``current_path`` most likely really lives.

    Returns an empty string when no correction is known.
    """
    for marker, subdirectory in _SUBDIRECTORY_MARKERS:
        if marker in current_path:
            parent = os.path.dirname(current_path) or "."
            return _join(parent, subdirectory, _base_name(current_path))
    if _DUPLICATE_DIR_MARKER in current_path:
        parts = current_path.split(os.sep)
        if len(parts) >= 2 and parts[-2] == parts[-1]:
            return _join(*parts[:-1])
    return ""


def analyze_path_issues(plugins: PluginRegistry) -> List[PathIssue]:
    """Plugins whose install path is missing, sorted by plugin name."""
    issues = []
    for name, plugin in plugins.get_all_plugins().items():
        if plugin.path_exists():
            continue
        fixed = expected_path(name, plugin.install_path)
        if fixed and os.path.exists(fixed):
            issues.append(
                PathIssue(
                    plugin_name=name,
                    install_path=plugin.install_path,
                    issue_type=IssueType.MISSING_SUBDIRECTORY,
                    can_auto_fix=True,
                    expected_path=fixed,
                )
            )
        else:
            issues.append(
                PathIssue(
                    plugin_name=name,
                    install_path=plugin.install_path,
                    issue_type=IssueType.NOT_FOUND,
                    can_auto_fix=False,
                )
            )
    issues.sort(key=lambda issue: issue.plugin_name)
    return issues


def _load_plugins_or_empty(claude_dir: str) -> PluginRegistry:
    try:
        return load_plugins(claude_dir)
    except FileNotFoundError:
        return PluginRegistry()
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"failed to load plugins: {exc}") from exc


def _load_marketplaces_or_empty(claude_dir: str) -> MarketplaceRegistry:
    try:
        return load_marketplaces(claude_dir)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"failed to load marketplaces: {exc}") from exc


def _check_marketplaces(marketplaces: MarketplaceRegistry) -> int:
    problems = 0
    for name in sorted(marketplaces):
        location = marketplaces[name].install_location
        try:
            os.stat(location)
        except FileNotFoundError:
            print(f"  ✗ {name}: Directory not found at {location}")
            problems += 1
        except OSError:
            print(f"  ✓ {name}")
        else:
            print(f"  ✓ {name}")
    if problems == 0:
        print("  All marketplaces OK")
    return problems


def _report_path_issues(issues: List[PathIssue]) -> None:
    if not issues:
        print("  ✓ All plugin paths are valid")
        return

    by_type: Dict[IssueType, List[PathIssue]] = {}
    for issue in issues:
        by_type.setdefault(issue.issue_type, []).append(issue)

    fixable = by_type.get(IssueType.MISSING_SUBDIRECTORY, [])
    missing = by_type.get(IssueType.NOT_FOUND, [])

    if fixable:
        print(f"  ⚠ {len(fixable)} plugins with fixable path issues:")
        for issue in fixable:
            print(f"    - {issue.plugin_name}")
            print(f"      Current:  {issue.install_path}")
            print(f"      Expected: {issue.expected_path}")

    if missing:
        if fixable:
            print()
        print(f"  ✗ {len(missing)} plugins with missing directories:")
        for issue in missing:
            print(f"    - {issue.plugin_name}")
            print(f"      Path: {issue.install_path}")

    print("\n  → Run 'claudeup cleanup' to fix and remove these issues")
    print("     (use --fix-only or --remove-only for granular control)")


def run_doctor(claude_dir: str) -> None:
    """Print a diagnosis of marketplaces and plugin paths under ``claude_dir``.

    Missing registry files count as an empty installation; unreadable ones
    raise ``RuntimeError``.
    """
    print("Running diagnostics...")

    plugins = _load_plugins_or_empty(claude_dir)
    marketplaces = _load_marketplaces_or_empty(claude_dir)

    print("━━━ Checking Marketplaces ━━━")
    marketplace_issues = _check_marketplaces(marketplaces)
    print()

    print("━━━ Analyzing Plugin Paths ━━━")
    path_issues = analyze_path_issues(plugins)
    _report_path_issues(path_issues)
    print()

    print("━━━ Summary ━━━")
    line = f"  Marketplaces: {len(marketplaces)} installed"
    if marketplace_issues:
        line += f", {marketplace_issues} issues"
    print(line)

    line = f"  Plugins:      {len(plugins.plugins)} installed"
    if path_issues:
        line += f", {len(path_issues)} issues"
    print(line)

    if path_issues or marketplace_issues:
        print("\nRun the suggested commands to fix these issues.")
    else:
        print("\n✓ No issues detected!")