import json
from pathlib import Path

import pytest

from claudeup.config import (
    DisabledPlugin,
    GlobalConfig,
    Preferences,
    config_path,
    default_config,
    load_config,
    save_config,
)


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return tmp_path


def test_default_config():
    cfg = default_config()
    assert cfg.disabled_plugins == {}
    assert cfg.disabled_mcp_servers == []
    assert cfg.preferences.auto_update is False
    assert cfg.preferences.verbose_output is False


def test_default_config_claude_dir(home):
    assert default_config().claude_dir == str(home / ".claude")


def test_is_plugin_disabled():
    cfg = default_config()
    name = "test-plugin@test-marketplace"
    assert cfg.is_plugin_disabled(name) is False
    cfg.disabled_plugins[name] = DisabledPlugin(version="1.0.0")
    assert cfg.is_plugin_disabled(name) is True


def test_disable_plugin():
    cfg = default_config()
    name = "test-plugin@test-marketplace"
    metadata = DisabledPlugin(
        version="1.0.0",
        install_path="/path/to/plugin",
        git_commit_sha="abc123",
        is_local=True,
    )
    assert cfg.disable_plugin(name, metadata) is True
    assert cfg.disable_plugin(name, metadata) is False

    stored = cfg.get_disabled_plugin(name)
    assert stored is not None
    assert stored.version == "1.0.0"
    assert stored.git_commit_sha == "abc123"


def test_enable_plugin():
    cfg = default_config()
    name = "test-plugin@test-marketplace"
    assert cfg.enable_plugin(name) is None

    cfg.disable_plugin(name, DisabledPlugin(version="1.0.0"))
    retrieved = cfg.enable_plugin(name)
    assert retrieved is not None
    assert retrieved.version == "1.0.0"
    assert cfg.is_plugin_disabled(name) is False


def test_is_mcp_server_disabled():
    cfg = default_config()
    ref = "plugin@marketplace:server"
    assert cfg.is_mcp_server_disabled(ref) is False
    cfg.disabled_mcp_servers.append(ref)
    assert cfg.is_mcp_server_disabled(ref) is True


def test_disable_mcp_server():
    cfg = default_config()
    ref = "plugin@marketplace:server"
    assert cfg.disable_mcp_server(ref) is True
    assert cfg.is_mcp_server_disabled(ref) is True
    assert cfg.disable_mcp_server(ref) is False
    assert cfg.disabled_mcp_servers == [ref]


def test_enable_mcp_server():
    cfg = default_config()
    ref = "plugin@marketplace:server"
    assert cfg.enable_mcp_server(ref) is False
    cfg.disable_mcp_server(ref)
    assert cfg.enable_mcp_server(ref) is True
    assert cfg.is_mcp_server_disabled(ref) is False


def test_enable_mcp_server_keeps_order_of_others():
    cfg = default_config()
    for ref in ("a", "b", "c"):
        cfg.disable_mcp_server(ref)
    assert cfg.enable_mcp_server("b") is True
    assert cfg.disabled_mcp_servers == ["a", "c"]


def test_json_round_trip(tmp_path):
    cfg = default_config()
    cfg.disable_plugin("test-plugin", DisabledPlugin(version="1.0.0"))
    cfg.disable_mcp_server("test-server")

    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(cfg.to_dict(), indent=2))
    loaded = GlobalConfig.from_dict(json.loads(config_file.read_text()))

    assert loaded.is_plugin_disabled("test-plugin") is True
    assert loaded.is_mcp_server_disabled("test-server") is True
    plugin = loaded.get_disabled_plugin("test-plugin")
    assert plugin is not None
    assert plugin.version == "1.0.0"
    assert loaded == cfg


def test_get_disabled_plugin():
    cfg = default_config()
    name = "test-plugin@test-marketplace"
    assert cfg.get_disabled_plugin(name) is None

    cfg.disable_plugin(name, DisabledPlugin(version="2.0.0", install_path="/test/path"))
    retrieved = cfg.get_disabled_plugin(name)
    assert retrieved is not None
    assert retrieved.version == "2.0.0"
    assert retrieved.install_path == "/test/path"


def test_preferences_omit_empty_optional_fields():
    assert Preferences().to_dict() == {"autoUpdate": False, "verboseOutput": False}
    prefs = Preferences(active_profile="frontend", secret_backend="env")
    assert prefs.to_dict() == {
        "autoUpdate": False,
        "verboseOutput": False,
        "activeProfile": "frontend",
        "secretBackend": "env",
    }


def test_to_dict_omits_empty_claude_dir():
    assert "claudeDir" not in GlobalConfig().to_dict()
    assert GlobalConfig(claude_dir="/x").to_dict()["claudeDir"] == "/x"


def test_config_path(home):
    assert config_path() == Path(home) / ".claudeup" / "config.json"


def test_load_config_creates_default_file(home):
    cfg = load_config()
    path = home / ".claudeup" / "config.json"
    assert path.is_file()
    assert cfg == default_config()
    assert json.loads(path.read_text())["disabledMcpServers"] == []


def test_save_and_load_config(home):
    cfg = default_config()
    cfg.preferences.active_profile = "frontend"
    cfg.disable_mcp_server("p@m:server")
    save_config(cfg)
    loaded = load_config()
    assert loaded.preferences.active_profile == "frontend"
    assert loaded.disabled_mcp_servers == ["p@m:server"]


def test_load_config_missing_sections_defaults(home):
    path = home / ".claudeup" / "config.json"
    path.parent.mkdir(parents=True)
    path.write_text('{"preferences": {"activeProfile": "x"}}')
    cfg = load_config()
    assert cfg.disabled_plugins == {}
    assert cfg.disabled_mcp_servers == []
    assert cfg.preferences.active_profile == "x"
    assert cfg.disable_plugin("p", DisabledPlugin()) is True


def test_load_config_invalid_json(home):
    path = home / ".claudeup" / "config.json"
    path.parent.mkdir(parents=True)
    path.write_text("not json")
    with pytest.raises(ValueError):
        load_config()


def test_from_dict_rejects_bad_server_list():
    with pytest.raises(ValueError):
        GlobalConfig.from_dict({"disabledMcpServers": "server"})