"""Checking marketplaces and plugins for newer commits and applying them."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from claudeup.marketplaces import MarketplaceRegistry
from claudeup.plugins import PluginRegistry

_SHORT_SHA = 7
_REMOTE_REFS = ("origin/HEAD", "origin/main", "origin/master")
_SOURCE_SUBDIRECTORIES = ("plugins", "skills")


class UpdateError(Exception):
    """An update could not be applied."""


@dataclass
class MarketplaceUpdate:
    """Update state of one marketplace repository."""

    name: str
    has_update: bool = False
    current_commit: str = ""
    latest_commit: str = ""


@dataclass
class PluginUpdate:
    """Update state of one installed plugin."""

    name: str
    has_update: bool = False
    current_commit: str = ""
    latest_commit: str = ""


def _run_git(repo: str, *args: str) -> str:
    """Run git in ``repo`` and return its trimmed output; raise on failure."""
    result = subprocess.run(
        ["git", "-C", repo, *args],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def _try_git(repo: str, *args: str) -> Optional[str]:
    try:
        return _run_git(repo, *args)
    except (OSError, subprocess.CalledProcessError):
        return None


def _has_git_dir(path: str) -> bool:
    return os.path.exists(os.path.join(path, ".git"))


def _fetch(repo: str) -> None:
    try:
        subprocess.run(["git", "-C", repo, "fetch", "origin"], capture_output=True)
    except OSError:
        pass


def _remote_commit(repo: str) -> Optional[str]:
    for ref in _REMOTE_REFS:
        commit = _try_git(repo, "rev-parse", ref)
        if commit is not None:
            return commit
    return None


def check_marketplace_updates(marketplaces: MarketplaceRegistry) -> List[MarketplaceUpdate]:
    """Compare each marketplace's HEAD with its remote after fetching."""
    updates = []
    for name in sorted(marketplaces):
        location = marketplaces[name].install_location
        if not _has_git_dir(location):
            updates.append(MarketplaceUpdate(name=name))
            continue

        current = _try_git(location, "rev-parse", "HEAD")
        if current is None:
            updates.append(MarketplaceUpdate(name=name))
            continue

        _fetch(location)
        remote = _remote_commit(location)
        if remote is None:
            updates.append(MarketplaceUpdate(name=name))
            continue

        updates.append(
            MarketplaceUpdate(
                name=name,
                has_update=current != remote,
                current_commit=current[:_SHORT_SHA],
                latest_commit=remote[:_SHORT_SHA],
            )
        )
    return updates


def check_plugin_updates(
    plugins: PluginRegistry, marketplaces: MarketplaceRegistry
) -> List[PluginUpdate]:
    """Plugins whose recorded commit differs from their marketplace's HEAD."""
    updates = []
    all_plugins = plugins.get_all_plugins()
    for name in sorted(all_plugins):
        plugin = all_plugins[name]
        if not plugin.path_exists():
            continue

        marketplace_path = next(
            (
                marketplaces[key].install_location
                for key in sorted(marketplaces)
                if marketplaces[key].install_location in plugin.install_path
            ),
            "",
        )
        if not marketplace_path or not _has_git_dir(marketplace_path):
            continue

        current = _try_git(marketplace_path, "rev-parse", "HEAD")
        if current is None:
            continue

        if plugin.git_commit_sha != current:
            updates.append(
                PluginUpdate(
                    name=name,
                    has_update=True,
                    current_commit=plugin.git_commit_sha[:_SHORT_SHA],
                    latest_commit=current[:_SHORT_SHA],
                )
            )
    return updates


def update_marketplace(name: str, path: str) -> None:
    """Fast-forward the marketplace repository at ``path``."""
    try:
        _run_git(path, "pull", "--ff-only")
    except (OSError, subprocess.CalledProcessError) as exc:
        raise UpdateError(f"git pull failed: {exc}") from exc


def _marketplace_root(install_path: str) -> str:
    parts = install_path.split(os.sep)
    for index, part in enumerate(parts):
        if part == "marketplaces" and index + 1 < len(parts):
            return os.sep.join(parts[: index + 2])
    return ""


def update_plugin(name: str, plugins: PluginRegistry) -> None:
    """Bring a plugin to its marketplace's current commit.

    Cached plugins are copied afresh from the marketplace. The registry
    entry's commit is updated in place; raises ``UpdateError`` on failure.
    """
    plugin = plugins.get_plugin(name)
    if plugin is None:
        raise UpdateError("plugin not found")

    marketplace_path = _marketplace_root(plugin.install_path)
    if not marketplace_path:
        raise UpdateError("marketplace not found in path")

    try:
        latest_commit = _run_git(marketplace_path, "rev-parse", "HEAD")
    except (OSError, subprocess.CalledProcessError) as exc:
        raise UpdateError(f"failed to get latest commit: {exc}") from exc

    if not plugin.is_local:
        base_name = name.split("@")[0]
        source_path = next(
            (
                candidate
                for candidate in (
                    os.path.join(marketplace_path, sub, base_name)
                    for sub in _SOURCE_SUBDIRECTORIES
                )
                if os.path.exists(candidate)
            ),
            "",
        )
        if not source_path:
            raise UpdateError("plugin source not found in marketplace")

        try:
            if os.path.lexists(plugin.install_path):
                if os.path.isdir(plugin.install_path) and not os.path.islink(
                    plugin.install_path
                ):
                    shutil.rmtree(plugin.install_path)
                else:
                    os.remove(plugin.install_path)
        except OSError as exc:
            raise UpdateError(f"failed to remove old cached plugin: {exc}") from exc

        try:
            copy_dir(source_path, plugin.install_path)
        except OSError as exc:
            raise UpdateError(f"failed to copy updated plugin: {exc}") from exc

    plugin.git_commit_sha = latest_commit
    plugins.set_plugin(name, plugin)


def copy_dir(src: "str | os.PathLike[str]", dst: "str | os.PathLike[str]") -> None:
    """Copy the tree at ``src`` into ``dst``, keeping file permissions."""
    destination = Path(dst)
    destination.mkdir(parents=True, exist_ok=True)
    with os.scandir(src) as entries:
        for entry in entries:
            target = destination / entry.name
            if entry.is_dir(follow_symlinks=False):
                copy_dir(entry.path, target)
            else:
                shutil.copyfile(entry.path, target)
                shutil.copymode(entry.path, target)