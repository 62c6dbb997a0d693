"""Reading, writing and editing the installed-plugins registry."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

PLUGINS_FILE = "installed_plugins.json"
USER_SCOPE = "user"
CURRENT_VERSION = 2


def _get_str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _get_bool(data: dict, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


@dataclass
class PluginMetadata:
    """Metadata for one installed instance of a plugin."""

    scope: str = ""
    version: str = ""
    installed_at: str = ""
    last_updated: str = ""
    install_path: str = ""
    git_commit_sha: str = ""
    is_local: bool = False

    def path_exists(self) -> bool:
        """Whether the plugin's install path exists on disk."""
        return bool(self.install_path) and os.path.exists(self.install_path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scope": self.scope,
            "version": self.version,
            "installedAt": self.installed_at,
            "lastUpdated": self.last_updated,
            "installPath": self.install_path,
            "gitCommitSha": self.git_commit_sha,
            "isLocal": self.is_local,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PluginMetadata":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("plugin entry must be an object")
        return cls(
            scope=_get_str(data, "scope"),
            version=_get_str(data, "version"),
            installed_at=_get_str(data, "installedAt"),
            last_updated=_get_str(data, "lastUpdated"),
            install_path=_get_str(data, "installPath"),
            git_commit_sha=_get_str(data, "gitCommitSha"),
            is_local=_get_bool(data, "isLocal"),
        )


@dataclass
class PluginRegistry:
    """The plugin registry: each plugin name maps to one entry per scope."""

    version: int = CURRENT_VERSION
    plugins: Dict[str, List[PluginMetadata]] = field(default_factory=dict)

    def get_plugin(self, plugin_name: str) -> Optional[PluginMetadata]:
        """Return a copy of the user-scoped entry, else the first entry, else None."""
        instances = self.plugins.get(plugin_name)
        if not instances:
            return None
        chosen = next(
            (inst for inst in instances if inst.scope in (USER_SCOPE, "")),
            instances[0],
        )
        return replace(chosen)

    def set_plugin(self, plugin_name: str, metadata: PluginMetadata) -> None:
        """Insert or replace the entry with the same scope (user by default)."""
        entry = replace(metadata, scope=metadata.scope or USER_SCOPE)
        instances = self.plugins.get(plugin_name)
        if instances is None:
            self.plugins[plugin_name] = [entry]
            return
        for index, inst in enumerate(instances):
            if inst.scope == entry.scope:
                instances[index] = entry
                return
        instances.append(entry)

    def get_all_plugins(self) -> Dict[str, PluginMetadata]:
        """Map each plugin name to the entry ``get_plugin`` would return."""
        result = {}
        for name in self.plugins:
            meta = self.get_plugin(name)
            if meta is not None:
                result[name] = meta
        return result

    def disable_plugin(self, plugin_name: str) -> bool:
        """Remove a plugin; return whether it was present."""
        return self.plugins.pop(plugin_name, None) is not None

    def enable_plugin(self, plugin_name: str, metadata: PluginMetadata) -> None:
        """Put a plugin back into the registry."""
        self.set_plugin(plugin_name, metadata)

    def plugin_exists(self, plugin_name: str) -> bool:
        return self.get_plugin(plugin_name) is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "plugins": {
                name: [inst.to_dict() for inst in self.plugins[name]]
                for name in sorted(self.plugins)
            },
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PluginRegistry":
        """Build a registry from either format; the older one is upgraded."""
        if not isinstance(data, dict):
            raise ValueError("plugin registry must be a JSON object")
        version = data.get("version")
        if version is None:
            version = 0
        if isinstance(version, bool) or not isinstance(version, int):
            raise ValueError("field 'version' must be an integer")
        plugins = data.get("plugins")
        if plugins is None:
            plugins = {}
        if not isinstance(plugins, dict):
            raise ValueError("field 'plugins' must be an object")

        is_v2_shape = all(
            entries is None or isinstance(entries, list) for entries in plugins.values()
        )
        if version == CURRENT_VERSION and is_v2_shape:
            return cls(
                version=CURRENT_VERSION,
                plugins={
                    name: [PluginMetadata.from_dict(entry) for entry in entries or []]
                    for name, entries in plugins.items()
                },
            )

        # Older format: one object per plugin and no scopes.
        converted = {}
        for name, entry in plugins.items():
            if entry is not None and not isinstance(entry, dict):
                raise ValueError(f"plugin {name!r} must be an object")
            meta = PluginMetadata.from_dict(entry)
            converted[name] = [replace(meta, scope=USER_SCOPE)]
        return cls(version=CURRENT_VERSION, plugins=converted)


def _registry_path(claude_dir: "str | os.PathLike[str]") -> Path:
    return Path(claude_dir) / "plugins" / PLUGINS_FILE


def load_plugins(claude_dir: "str | os.PathLike[str]") -> PluginRegistry:
    """Read the plugin registry under ``claude_dir``.

    Raises ``FileNotFoundError`` when the file is missing and ``ValueError``
    when its contents are not a valid registry.
    """
    data = json.loads(_registry_path(claude_dir).read_text(encoding="utf-8"))
    return PluginRegistry.from_dict(data)


def save_plugins(claude_dir: "str | os.PathLike[str]", registry: PluginRegistry) -> None:
    """Write the plugin registry under ``claude_dir``.

    The ``plugins`` directory must already exist.
    """
    text = json.dumps(registry.to_dict(), indent=2, ensure_ascii=False)
    _registry_path(claude_dir).write_text(text, encoding="utf-8")