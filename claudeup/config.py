"""The tool's own settings file, kept under the user's home directory."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


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


def _get_object(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object")
    return value


@dataclass
class DisabledPlugin:
    """Metadata kept for a plugin while it is disabled."""

    version: str = ""
    installed_at: str = ""
    last_updated: str = ""
    install_path: str = ""
    git_commit_sha: str = ""
    is_local: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "installedAt": self.installed_at,
            "lastUpdated": self.last_updated,
            "installPath": self.install_path,
            "gitCommitSha": self.git_commit_sha,
            "isLocal": self.is_local,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "DisabledPlugin":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("disabled plugin entry must be an object")
        return cls(
            version=_get_str(data, "version"),
            installed_at=_get_str(data, "installedAt"),
            last_updated=_get_str(data, "lastUpdated"),
            install_path=_get_str(data, "installPath"),
            git_commit_sha=_get_str(data, "gitCommitSha"),
            is_local=_get_bool(data, "isLocal"),
        )


@dataclass
class Preferences:
    """User preferences."""

    auto_update: bool = False
    verbose_output: bool = False
    active_profile: str = ""
    secret_backend: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "autoUpdate": self.auto_update,
            "verboseOutput": self.verbose_output,
        }
        if self.active_profile:
            result["activeProfile"] = self.active_profile
        if self.secret_backend:
            result["secretBackend"] = self.secret_backend
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "Preferences":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("preferences must be an object")
        return cls(
            auto_update=_get_bool(data, "autoUpdate"),
            verbose_output=_get_bool(data, "verboseOutput"),
            active_profile=_get_str(data, "activeProfile"),
            secret_backend=_get_str(data, "secretBackend"),
        )


@dataclass
class GlobalConfig:
    """Contents of the global settings file."""

    disabled_plugins: Dict[str, DisabledPlugin] = field(default_factory=dict)
    disabled_mcp_servers: List[str] = field(default_factory=list)
    claude_dir: str = ""
    preferences: Preferences = field(default_factory=Preferences)

    def is_plugin_disabled(self, plugin_name: str) -> bool:
        return plugin_name in self.disabled_plugins

    def get_disabled_plugin(self, plugin_name: str) -> Optional[DisabledPlugin]:
        return self.disabled_plugins.get(plugin_name)

    def is_mcp_server_disabled(self, server_ref: str) -> bool:
        return server_ref in self.disabled_mcp_servers

    def disable_plugin(self, plugin_name: str, metadata: DisabledPlugin) -> bool:
        """Record a plugin as disabled; False if it already was."""
        if self.is_plugin_disabled(plugin_name):
            return False
        self.disabled_plugins[plugin_name] = metadata
        return True

    def enable_plugin(self, plugin_name: str) -> Optional[DisabledPlugin]:
        """Forget a disabled plugin and return its saved metadata, or None."""
        return self.disabled_plugins.pop(plugin_name, None)

    def disable_mcp_server(self, server_ref: str) -> bool:
        """Record an MCP server as disabled; False if it already was."""
        if self.is_mcp_server_disabled(server_ref):
            return False
        self.disabled_mcp_servers.append(server_ref)
        return True

    def enable_mcp_server(self, server_ref: str) -> bool:
        """Remove an MCP server from the disabled list; False if absent."""
        try:
            self.disabled_mcp_servers.remove(server_ref)
        except ValueError:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "disabledPlugins": {
                name: self.disabled_plugins[name].to_dict()
                for name in sorted(self.disabled_plugins)
            },
            "disabledMcpServers": list(self.disabled_mcp_servers),
        }
        if self.claude_dir:
            result["claudeDir"] = self.claude_dir
        result["preferences"] = self.preferences.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "GlobalConfig":
        if not isinstance(data, dict):
            raise ValueError("config must be a JSON object")
        servers = data.get("disabledMcpServers")
        if servers is None:
            servers = []
        if not isinstance(servers, list) or not all(isinstance(s, str) for s in servers):
            raise ValueError("field 'disabledMcpServers' must be a list of strings")
        return cls(
            disabled_plugins={
                name: DisabledPlugin.from_dict(entry)
                for name, entry in _get_object(data, "disabledPlugins").items()
            },
            disabled_mcp_servers=list(servers),
            claude_dir=_get_str(data, "claudeDir"),
            preferences=Preferences.from_dict(data.get("preferences")),
        )


def default_config() -> GlobalConfig:
    """A fresh configuration with default values."""
    return GlobalConfig(claude_dir=str(Path.home() / ".claude"))


def config_path() -> Path:
    """Location of the global settings file."""
    return Path.home() / ".claudeup" / "config.json"


def load_config() -> GlobalConfig:
    """Read the settings file, creating it with defaults if it is missing."""
    path = config_path()
    if not path.exists():
        cfg = default_config()
        save_config(cfg)
        return cfg
    return GlobalConfig.from_dict(json.loads(path.read_text(encoding="utf-8")))


def save_config(cfg: GlobalConfig) -> None:
    """Write the settings file, creating its directory if needed."""
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")