"""Reading and writing the known-marketplaces registry."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

MARKETPLACES_FILE = "known_marketplaces.json"


def _get_str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _get_object(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object")
    return value


@dataclass
class MarketplaceSource:
    """Where a marketplace comes from."""

    source: str = ""
    repo: str = ""


@dataclass
class MarketplaceMetadata:
    """Metadata for one installed marketplace."""

    source: MarketplaceSource = field(default_factory=MarketplaceSource)
    install_location: str = ""
    last_updated: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": {"source": self.source.source, "repo": self.source.repo},
            "installLocation": self.install_location,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "MarketplaceMetadata":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("marketplace entry must be an object")
        source = _get_object(data, "source")
        return cls(
            source=MarketplaceSource(
                source=_get_str(source, "source"),
                repo=_get_str(source, "repo"),
            ),
            install_location=_get_str(data, "installLocation"),
            last_updated=_get_str(data, "lastUpdated"),
        )


MarketplaceRegistry = Dict[str, MarketplaceMetadata]


def _registry_path(claude_dir: "str | os.PathLike[str]") -> Path:
    return Path(claude_dir) / "plugins" / MARKETPLACES_FILE


def load_marketplaces(claude_dir: "str | os.PathLike[str]") -> MarketplaceRegistry:
    """Read the marketplace registry under ``claude_dir``.

    Raises ``FileNotFoundError`` when the file is missing and ``ValueError``
    when its contents are not a valid registry.
    """
    data = json.loads(_registry_path(claude_dir).read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("marketplace registry must be a JSON object")
    return {name: MarketplaceMetadata.from_dict(entry) for name, entry in data.items()}


def save_marketplaces(
    claude_dir: "str | os.PathLike[str]", registry: MarketplaceRegistry
) -> None:
    """Write the marketplace registry under ``claude_dir``.

    The ``plugins`` directory must already exist.
    """
    payload = {name: registry[name].to_dict() for name in sorted(registry)}
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    _registry_path(claude_dir).write_text(text, encoding="utf-8")