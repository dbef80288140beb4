import pytest

from cloudsaver.core.rclone import CommandResult, RcloneManager
from cloudsaver.core.sync import SyncDirection, SyncManager
from cloudsaver.errors import SyncError
from cloudsaver.models.emulator import DetectedEmulator


class FakeRunner:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def __call__(self, args, timeout=None):
        self.calls.append(args)
        if self.results:
            return self.results.pop(0)
        return CommandResult(0)


def emulator(emulator_id, *paths):
    return DetectedEmulator(id=emulator_id, name=emulator_id.title(), save_paths=[str(p) for p in paths])


# ---------------------------------------------------------------------------
# rclone wrapper
# ---------------------------------------------------------------------------

def test_sync_builds_command():
    runner = FakeRunner()
    assert RcloneManager(runner).sync("/local", "gdrive:/saves", dry_run=True, verbose=True)
    assert runner.calls == [["rclone", "sync", "/local", "gdrive:/saves", "--dry-run", "--verbose"]]


def test_sync_reports_failures():
    assert not RcloneManager(FakeRunner(CommandResult(1, "", "boom"))).sync("/a", "r:/b")
    assert not RcloneManager(FakeRunner(CommandResult(0, "", "ERROR : x: failed"))).sync("/a", "r:/b")


def test_list_remotes():
    runner = FakeRunner(CommandResult(0, "gdrive:\nbox:\n\n"))
    assert RcloneManager(runner).list_remotes() == ["gdrive", "box"]
    assert RcloneManager(FakeRunner(CommandResult(1))).list_remotes() == []


def test_missing_binary():
    assert not RcloneManager(FakeRunner(CommandResult(127))).is_installed()


# ---------------------------------------------------------------------------
# Sync manager
# ---------------------------------------------------------------------------

@pytest.fixture
def remote_config(config):
    config.set_many({"cloud_provider": "gdrive", "sync_root": "/cloudsaver"})
    return config


def test_upload_uses_first_existing_path(remote_config, tmp_path):
    existing = tmp_path / "saves"
    existing.mkdir()
    runner = FakeRunner()
    manager = SyncManager(remote_config, RcloneManager(runner))

    assert manager.sync_emulator(emulator("retroarch", tmp_path / "missing", existing))

    assert runner.calls[-1][:4] == ["rclone", "sync", str(existing), "gdrive:/cloudsaver/retroarch"]
    assert remote_config.get("last_sync") is not None


def test_download_creates_first_path(remote_config, tmp_path):
    target = tmp_path / "new" / "saves"
    runner = FakeRunner()
    manager = SyncManager(remote_config, RcloneManager(runner))

    assert manager.sync_emulator(emulator("dolphin", target), SyncDirection.DOWNLOAD)

    assert target.is_dir()
    assert runner.calls[-1][:4] == ["rclone", "sync", "gdrive:/cloudsaver/dolphin", str(target)]


def test_dry_run_leaves_last_sync(remote_config, tmp_path):
    manager = SyncManager(remote_config, RcloneManager(FakeRunner()))
    assert manager.sync_emulator(emulator("retroarch", tmp_path), dry_run=True)
    assert remote_config.get("last_sync") is None


def test_sync_all_counts_failures(remote_config, tmp_path):
    runner = FakeRunner(CommandResult(0), CommandResult(0), CommandResult(2, "", "denied"))
    manager = SyncManager(remote_config, RcloneManager(runner))
    emulators = {
        "retroarch": emulator("retroarch", tmp_path),
        "dolphin": emulator("dolphin", tmp_path),
    }

    result = manager.sync_all(emulators)

    assert (result.synced, result.failed) == (1, 1)
    assert not result.ok
    assert result.errors == ["Sync failed for dolphin"]


def test_no_provider_raises(config):
    with pytest.raises(SyncError):
        SyncManager(config, RcloneManager(FakeRunner())).resolve_provider()


def test_missing_rclone_raises(remote_config):
    manager = SyncManager(remote_config, RcloneManager(FakeRunner(CommandResult(127))))
    with pytest.raises(SyncError):
        manager.resolve_provider()


def test_remote_path_normalises_separators(remote_config):
    remote_config.set("sync_root", "saves\\backup\\")
    manager = SyncManager(remote_config, RcloneManager(FakeRunner()))
    assert manager.remote_path("box", "pcsx2") == "box:saves/backup/pcsx2"


def test_test_remote():
    runner = FakeRunner(CommandResult(0), CommandResult(3, "", "directory not found"))
    manager = RcloneManager(runner)
    assert manager.test_remote("gdrive")
    assert not manager.test_remote("gdrive")
    assert runner.calls[0] == ["rclone", "lsd", "gdrive:"]


def test_custom_paths_override_remote_folder(remote_config, tmp_path):
    remote_config.set("custom_paths", {"dolphin": "consoles\\gamecube/"})
    runner = FakeRunner()
    manager = SyncManager(remote_config, RcloneManager(runner))

    assert manager.remote_path("gdrive", "dolphin") == "gdrive:consoles/gamecube"
    assert manager.remote_path("gdrive", "retroarch") == "gdrive:/cloudsaver/retroarch"
    assert manager.sync_emulator(emulator("dolphin", tmp_path))
    assert runner.calls[-1][3] == "gdrive:consoles/gamecube"
