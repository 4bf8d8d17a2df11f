"""Tests for config file discovery."""

from pathlib import Path

import pytest

from runr import config


@pytest.fixture
def home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv(config.ENV_VAR, raising=False)
    monkeypatch.setattr(config.sys, "platform", "linux")
    monkeypatch.chdir(tmp_path)
    return home


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("repos: []\n")
    return path


def test_explicit_path_wins(home):
    _touch(home / ".config" / "runr" / "config.yml")
    assert config.resolve_config_path("~/elsewhere.yml") == home / "elsewhere.yml"


def test_env_override(home, monkeypatch):
    monkeypatch.setenv(config.ENV_VAR, "/etc/runr.yml")
    assert config.resolve_config_path() == Path("/etc/runr.yml")


def test_xdg_config_home(home, tmp_path, monkeypatch):
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    expected = _touch(xdg / "runr" / "config.yml")
    _touch(home / ".config" / "runr" / "config.yml")
    assert config.resolve_config_path() == expected


def test_xdg_set_but_missing_falls_through(home, tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    expected = _touch(home / ".config" / "runr" / "config.yml")
    assert config.resolve_config_path() == expected


def test_dot_config(home):
    expected = _touch(home / ".config" / "runr" / "config.yml")
    assert config.resolve_config_path() == expected


def test_platform_default_on_macos(home, monkeypatch):
    monkeypatch.setattr(config.sys, "platform", "darwin")
    expected = _touch(home / "Library" / "Application Support" / "runr" / "config.yml")
    assert config.resolve_config_path() == expected


def test_platform_default_on_windows(home, tmp_path, monkeypatch):
    monkeypatch.setattr(config.sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    expected = _touch(tmp_path / "appdata" / "runr" / "config.yml")
    assert config.resolve_config_path() == expected


def test_legacy_fallback(home):
    assert config.resolve_config_path() == Path("config.yml")


def test_candidate_paths_are_unique(home):
    paths = config.candidate_paths()
    assert len(paths) == len(set(paths))
    assert paths[-1] == Path("config.yml")
    assert paths[0] == home / ".config" / "runr" / "config.yml"
