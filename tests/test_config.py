"""Tests for configuration loading."""

from __future__ import annotations

import stat

import pytest

from twofa.config import DEFAULT_DATA_DIR, Settings, ensure_data_dir, load_file_config, load_settings


def test_settings_defaults():
    s = Settings(_env_file=None)
    assert s.data_dir == DEFAULT_DATA_DIR
    assert s.data_file == DEFAULT_DATA_DIR / "accounts.json"
    assert s.watch_interval == 1.0
    assert s.selector_command[0] == "dmenu"
    assert [c[0] for c in s.clipboard_commands] == ["xclip", "xsel", "pbcopy", "wl-copy"]


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TWOFA_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TWOFA_WATCH_INTERVAL", "2.5")
    s = Settings(_env_file=None)
    assert s.data_file == tmp_path / "accounts.json"
    assert s.watch_interval == 2.5


def test_load_file_config_missing(tmp_path):
    assert load_file_config(tmp_path / "config.yaml") == {}


def test_load_file_config_not_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="mapping"):
        load_file_config(path)


def test_load_settings_merges_yaml(monkeypatch, tmp_path):
    monkeypatch.setenv("TWOFA_DATA_DIR", str(tmp_path))
    (tmp_path / "config.yaml").write_text("watch_interval: 5\nselector_command: [rofi, -dmenu]\n")
    s = load_settings()
    assert s.watch_interval == 5.0
    assert s.selector_command == ["rofi", "-dmenu"]
    assert s.data_dir == tmp_path


def test_env_beats_yaml(monkeypatch, tmp_path):
    monkeypatch.setenv("TWOFA_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TWOFA_WATCH_INTERVAL", "3")
    (tmp_path / "config.yaml").write_text("watch_interval: 5\n")
    assert load_settings().watch_interval == 3.0


def test_ensure_data_dir(tmp_path):
    target = tmp_path / "nested" / "2fa"
    ensure_data_dir(Settings(_env_file=None, data_dir=target))
    assert target.is_dir()
    assert stat.S_IMODE(target.stat().st_mode) & 0o077 == 0
