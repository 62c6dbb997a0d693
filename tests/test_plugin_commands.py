import io
from pathlib import Path

import pytest

from claudeup.config import GlobalConfig, Preferences, load_config, save_config
from claudeup.marketplaces import MarketplaceMetadata, save_marketplaces
from claudeup.plugin_commands import (
    print_header,
    run_cleanup,
    run_disable,
    run_enable,
    run_plugins_list,
    run_status,
)
from claudeup.plugins import PluginMetadata, PluginRegistry, load_plugins, save_plugins


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    return home_dir


@pytest.fixture
def claude_dir(tmp_path, home):
    directory = tmp_path / "claude"
    (directory / "plugins").mkdir(parents=True)
    return directory


def _write_plugins(claude_dir, entries):
    registry = PluginRegistry()
    for name, meta in entries.items():
        registry.set_plugin(name, meta)
    save_plugins(claude_dir, registry)


@pytest.fixture
def broken_setup(tmp_path, claude_dir):
    market = tmp_path / "claude-code-plugins"
    fixed_target = market / "plugins" / "fixme"
    fixed_target.mkdir(parents=True)
    good = tmp_path / "good"
    good.mkdir()
    paths = {
        "fixme": str(market / "fixme"),
        "gone": str(tmp_path / "gone"),
        "good": str(good),
        "expected": str(fixed_target),
    }
    _write_plugins(
        claude_dir,
        {
            "fixme": PluginMetadata(install_path=paths["fixme"]),
            "gone": PluginMetadata(install_path=paths["gone"]),
            "good": PluginMetadata(install_path=paths["good"]),
        },
    )
    return paths


def test_cleanup_rejects_conflicting_flags(claude_dir):
    with pytest.raises(ValueError):
        run_cleanup(str(claude_dir), fix_only=True, remove_only=True)


def test_cleanup_missing_registry(tmp_path):
    with pytest.raises(RuntimeError, match="failed to load plugins"):
        run_cleanup(str(tmp_path / "nowhere"), assume_yes=True)


def test_cleanup_no_issues(tmp_path, claude_dir, capsys):
    good = tmp_path / "good"
    good.mkdir()
    _write_plugins(claude_dir, {"good": PluginMetadata(install_path=str(good))})
    assert run_cleanup(str(claude_dir), assume_yes=True) == (0, 0)
    assert "✓ No issues found" in capsys.readouterr().out


def test_cleanup_dry_run_changes_nothing(claude_dir, broken_setup, capsys):
    before = (claude_dir / "plugins" / "installed_plugins.json").read_text()
    assert run_cleanup(str(claude_dir), dry_run=True) == (0, 0)
    out = capsys.readouterr().out
    assert "Would fix 1 path issues" in out
    assert "Would remove 1 broken plugin entries" in out
    assert (claude_dir / "plugins" / "installed_plugins.json").read_text() == before


def test_cleanup_fixes_and_removes(claude_dir, broken_setup):
    assert run_cleanup(str(claude_dir), assume_yes=True) == (1, 1)
    registry = load_plugins(claude_dir)
    assert registry.get_plugin("fixme").install_path == broken_setup["expected"]
    assert not registry.plugin_exists("gone")
    assert registry.get_plugin("good").install_path == broken_setup["good"]


def test_cleanup_fix_only_keeps_broken(claude_dir, broken_setup):
    assert run_cleanup(str(claude_dir), fix_only=True, assume_yes=True) == (1, 0)
    registry = load_plugins(claude_dir)
    assert registry.plugin_exists("gone")
    assert registry.get_plugin("fixme").install_path == broken_setup["expected"]


def test_cleanup_remove_only_keeps_paths(claude_dir, broken_setup):
    assert run_cleanup(str(claude_dir), remove_only=True, assume_yes=True) == (0, 1)
    registry = load_plugins(claude_dir)
    assert registry.get_plugin("fixme").install_path == broken_setup["fixme"]
    assert not registry.plugin_exists("gone")


def test_cleanup_reinstall_hint(claude_dir, broken_setup, capsys):
    run_cleanup(str(claude_dir), reinstall=True, assume_yes=True)
    assert "claude plugin install gone" in capsys.readouterr().out


def test_cleanup_declined(claude_dir, broken_setup, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("n\nn\n"))
    assert run_cleanup(str(claude_dir)) == (0, 0)
    registry = load_plugins(claude_dir)
    assert registry.get_plugin("fixme").install_path == broken_setup["fixme"]
    assert registry.plugin_exists("gone")


def test_disable_moves_metadata_to_config(claude_dir):
    _write_plugins(
        claude_dir,
        {"hookify@mp": PluginMetadata(version="1.0.0", install_path="/test/path")},
    )
    run_disable(str(claude_dir), "hookify@mp")
    assert not load_plugins(claude_dir).plugin_exists("hookify@mp")
    saved = load_config().get_disabled_plugin("hookify@mp")
    assert saved.version == "1.0.0"
    assert saved.install_path == "/test/path"


def test_disable_unknown_plugin(claude_dir):
    _write_plugins(claude_dir, {})
    with pytest.raises(RuntimeError, match="plugin not found: missing"):
        run_disable(str(claude_dir), "missing")


def test_disable_already_disabled(claude_dir, capsys):
    _write_plugins(claude_dir, {"p": PluginMetadata(version="1.0.0")})
    run_disable(str(claude_dir), "p")
    capsys.readouterr()
    run_disable(str(claude_dir), "p")
    assert "already disabled" in capsys.readouterr().out


def test_enable_round_trip(claude_dir):
    original = PluginMetadata(
        version="1.0.0", install_path="/test/path", git_commit_sha="abc123", is_local=True
    )
    _write_plugins(claude_dir, {"p": original})
    run_disable(str(claude_dir), "p")
    run_enable(str(claude_dir), "p")
    restored = load_plugins(claude_dir).get_plugin("p")
    assert restored.version == "1.0.0"
    assert restored.install_path == "/test/path"
    assert restored.git_commit_sha == "abc123"
    assert restored.is_local is True
    assert restored.scope == "user"
    assert not load_config().is_plugin_disabled("p")


def test_enable_not_disabled(claude_dir):
    _write_plugins(claude_dir, {})
    with pytest.raises(RuntimeError, match="is not disabled"):
        run_enable(str(claude_dir), "p")


def test_enable_already_enabled(claude_dir):
    _write_plugins(claude_dir, {"p": PluginMetadata(version="1.0.0")})
    run_disable(str(claude_dir), "p")
    _write_plugins(claude_dir, {"p": PluginMetadata(version="1.0.0")})
    with pytest.raises(RuntimeError, match="already enabled"):
        run_enable(str(claude_dir), "p")


@pytest.fixture
def mixed_plugins(tmp_path, claude_dir):
    present = tmp_path / "present"
    present.mkdir()
    _write_plugins(
        claude_dir,
        {
            "alive": PluginMetadata(install_path=str(present), is_local=True),
            "dead": PluginMetadata(install_path=str(tmp_path / "dead")),
        },
    )


def test_plugins_list_summary(claude_dir, mixed_plugins, capsys):
    run_plugins_list(str(claude_dir), summary=True)
    out = capsys.readouterr().out
    assert "Total:   2 plugins" in out
    assert "Enabled: 1" in out
    assert "Stale:   1" in out


def test_plugins_list_details(claude_dir, mixed_plugins, capsys):
    run_plugins_list(str(claude_dir))
    out = capsys.readouterr().out
    assert "✓ alive" in out
    assert "✗ dead" in out
    assert "stale (path not found)" in out
    assert out.index("✓ alive") < out.index("✗ dead")


def test_plugins_list_missing_registry(tmp_path):
    with pytest.raises(RuntimeError, match="failed to load plugins"):
        run_plugins_list(str(tmp_path / "nowhere"))


def test_status_requires_marketplaces(claude_dir):
    _write_plugins(claude_dir, {})
    with pytest.raises(RuntimeError, match="failed to load marketplaces"):
        run_status(str(claude_dir))


def test_status_reports_stale_and_profile(claude_dir, mixed_plugins, capsys):
    save_marketplaces(claude_dir, {"mp": MarketplaceMetadata(install_location="/x")})
    save_config(GlobalConfig(preferences=Preferences(active_profile="work")))
    run_status(str(claude_dir))
    out = capsys.readouterr().out
    assert "Active Profile: work" in out
    assert "Marketplaces (1)" in out
    assert "plugins have stale paths" in out
    assert "    - dead" in out


def test_status_without_profile(claude_dir, capsys):
    _write_plugins(claude_dir, {})
    save_marketplaces(claude_dir, {})
    run_status(str(claude_dir))
    out = capsys.readouterr().out
    assert "Active Profile: none" in out
    assert "Issues Detected" not in out


def test_print_header_box(capsys):
    print_header("claudeup Status")
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert lines[0] == "╔" + "═" * 40 + "╗"
    assert lines[2] == "╚" + "═" * 40 + "╝"
    assert len({len(line) for line in lines}) == 1
    assert lines[1].strip("║").strip() == "claudeup Status"