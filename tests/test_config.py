from __future__ import annotations

import json
from pathlib import Path

import pytest

from switchboard.config import AppConfig, load_config


def test_defaults(tmp_path):
    cfg = load_config(tmp_path, environ={})
    assert isinstance(cfg, AppConfig)
    assert cfg.plugin_package == "plugins"
    assert cfg.autoload == ()
    assert cfg.log_file_path is None
    assert cfg.log_level is None
    assert cfg.prompt is None
    assert cfg.enable_completion is True
    assert cfg.show_banner is True
    assert cfg.history_file_path == (Path.home() / ".switchboard_history").resolve()
    assert cfg.extra == {}


def test_file_precedence(tmp_path):
    (tmp_path / ".env").write_text('PROMPT="env> "\nLOG_LEVEL=debug\n# comment\n')
    (tmp_path / "config.ini").write_text("[console]\nprompt = ini> \nshow_banner = no\n")
    (tmp_path / "config.json").write_text(json.dumps({"prompt": "json> ", "autoload": ["sip"]}))
    (tmp_path / "config.toml").write_text('prompt = "toml> "\n')

    cfg = load_config(tmp_path, environ={})
    assert cfg.prompt == "toml> "
    assert cfg.autoload == ("sip",)
    assert cfg.show_banner is False
    assert cfg.log_level == "DEBUG"


def test_nested_toml_is_flattened(tmp_path):
    (tmp_path / "config.toml").write_text('[log]\nlevel = "warning"\nfile_path = "console.log"\n')
    cfg = load_config(tmp_path, environ={})
    assert cfg.log_level == "WARNING"
    assert cfg.log_file_path == Path("console.log").resolve()


def test_environment_overrides_files(tmp_path):
    (tmp_path / "config.toml").write_text('autoload = "sip"\n')
    cfg = load_config(tmp_path, environ={"AUTOLOAD": "dialplan, sip", "ENABLE_COMPLETION": "off"})
    assert cfg.autoload == ("dialplan", "sip")
    assert cfg.enable_completion is False


def test_prefixed_environment_wins(tmp_path):
    cfg = load_config(tmp_path, environ={"PROMPT": "bare> ", "SWITCHBOARD_PROMPT": "prefixed> "})
    assert cfg.prompt == "prefixed> "


def test_unrelated_environment_is_ignored(tmp_path):
    cfg = load_config(tmp_path, environ={"HOME": "/nowhere", "PATH": "/bin"})
    assert cfg.extra == {}


def test_unknown_file_keys_kept_in_extra(tmp_path):
    (tmp_path / "config.toml").write_text('theme = "dark"\n')
    assert load_config(tmp_path, environ={}).extra == {"THEME": "dark"}


def test_none_disables_history(tmp_path):
    cfg = load_config(tmp_path, environ={"SWITCHBOARD_HISTORY_FILE_PATH": "none"})
    assert cfg.history_file_path is None


@pytest.mark.parametrize(
    "environ",
    [
        {"LOG_LEVEL": "verbose"},
        {"SHOW_BANNER": "maybe"},
        {"PLUGIN_PACKAGE": "not a package"},
        {"AUTOLOAD": "sip, bad-name"},
    ],
)
def test_invalid_values_raise(tmp_path, environ):
    with pytest.raises(ValueError):
        load_config(tmp_path, environ=environ)


def test_broken_files_are_skipped(tmp_path):
    (tmp_path / "config.json").write_text("{not json")
    (tmp_path / "config.toml").write_text("= broken")
    assert load_config(tmp_path, environ={}).plugin_package == "plugins"
