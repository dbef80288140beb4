import pytest
from loguru import logger

from cloudsaver.cli import main


@pytest.fixture(autouse=True)
def _close_log_sinks():
    yield
    logger.remove()


def test_config_set_and_get(config, capsys):
    assert main(["config", "set", "cloud_provider", "gdrive"]) == 0
    assert config.cloud_provider == "gdrive"

    assert main(["config", "get", "cloud_provider"]) == 0
    assert "cloud_provider: gdrive" in capsys.readouterr().out


def test_config_set_invalid_value_exits_1(config, capsys):
    assert main(["config", "set", "log_level", "loud"]) == 1
    assert "Invalid value for log_level" in capsys.readouterr().err
    assert config.log_level == "info"


def test_config_get_unknown_key(config):
    assert main(["config", "get", "nope"]) == 1


def test_config_reset(config):
    config.set("auto_sync", True)
    assert main(["config", "reset"]) == 0
    assert config.get("auto_sync") is False


def test_paths_add_list_remove(config, tmp_path, capsys):
    target = tmp_path / "gc saves"
    assert main(["paths", "add", "dolphin", str(target)]) == 0
    assert target.is_dir()
    assert config.get_emulator_paths("dolphin") == [str(target)]

    assert main(["paths", "list"]) == 0
    assert str(target) in capsys.readouterr().out

    assert main(["paths", "remove", "dolphin", str(target)]) == 0
    assert config.get_emulator_paths("dolphin") == []
    assert main(["paths", "remove", "dolphin", str(target)]) == 1


def test_paths_scan_and_ignore_dirs(config, tmp_path):
    assert main(["paths", "scan-dir", str(tmp_path / "extra")]) == 0
    assert main(["paths", "ignore-dir", str(tmp_path / "cache")]) == 0
    assert config.scan_dirs == [str(tmp_path / "extra")]
    assert config.ignore_dirs == [str(tmp_path / "cache")]


def test_detect_deep_scan(config, tmp_path, capsys):
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "mario.srm").write_bytes(b"\0")
    assert main(["detect", "--deep-scan", str(tmp_path / "lib")]) == 0
    out = capsys.readouterr().out
    assert "retroarch: 1 save files" in out
    assert "mario.srm" in out


def test_detect_deep_scan_missing_dir(config, tmp_path):
    assert main(["detect", "--deep-scan", str(tmp_path / "missing")]) == 1


def test_sync_without_provider_fails(config, capsys):
    assert main(["sync"]) == 1
    assert "No cloud provider configured" in capsys.readouterr().err
