import json

import pytest

from cloudsaver.config import Config, parse_value
from cloudsaver.errors import ConfigError


def test_defaults(config):
    assert config.cloud_provider is None
    assert config.log_level == "info"
    assert config.get("auto_sync") is False
    assert config.scan_dirs == []


def test_set_persists(config, tmp_path):
    config.set("cloud_provider", "gdrive")
    Config.reset()
    reloaded = Config(tmp_path / "cfg" / "config.json")
    assert reloaded.cloud_provider == "gdrive"


@pytest.mark.parametrize(
    "key, value",
    [
        ("no_such_key", 1),
        ("log_level", "loud"),
        ("scan_dirs", "/not/a/list"),
        ("auto_sync", "yes"),
        ("emulator_paths", {"retroarch": "/single/string"}),
        ("platform", "dreamcast"),
    ],
)
def test_set_rejects_invalid(config, key, value):
    with pytest.raises(ConfigError) as exc:
        config.set(key, value)
    assert exc.value.code == "CONFIG_ERROR"


def test_invalid_stored_values_fall_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_level": "loud", "auto_sync": True}), encoding="utf-8")
    Config.reset()
    try:
        cfg = Config(path)
        assert cfg.log_level == "info"
        assert cfg.get("auto_sync") is True
    finally:
        Config.reset()


def test_parse_value():
    assert parse_value("auto_sync", "Yes") is True
    assert parse_value("auto_sync", "off") is False
    assert parse_value("scan_dirs", '["/a", "/b"]') == ["/a", "/b"]
    assert parse_value("cloud_provider", "none") is None
    assert parse_value("log_level", "DEBUG") == "debug"
    with pytest.raises(ConfigError):
        parse_value("emulator_paths", "{broken")
    with pytest.raises(ConfigError):
        parse_value("auto_sync", "maybe")


def test_emulator_path_helpers(config):
    assert config.add_emulator_path("dolphin", "/saves/gc")
    assert not config.add_emulator_path("dolphin", "/saves/gc")
    assert config.get_emulator_paths("dolphin") == ["/saves/gc"]
    assert config.remove_emulator_path("dolphin", "/saves/gc")
    assert "dolphin" not in config.get("emulator_paths")
    assert not config.remove_emulator_path("dolphin", "/saves/gc")


def test_reset_values(config):
    config.set("auto_sync", True)
    config.reset_values()
    assert config.get("auto_sync") is False
