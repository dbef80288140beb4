"""Sync engine: mirrors detected save folders to an rclone remote."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from loguru import logger

from cloudsaver.config import Config
from cloudsaver.core.rclone import RcloneManager
from cloudsaver.errors import SyncError
from cloudsaver.models.emulator import DetectedEmulator


def _normalise_remote(path: str) -> str:
    return path.replace("\\", "/").rstrip("/")


class SyncDirection(str, Enum):
    UPLOAD = "upload"
    DOWNLOAD = "download"


@dataclass
class SyncResult:
    """Result of a sync operation."""

    synced: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


class SyncManager:
    """Pushes or pulls each emulator's save folder through rclone."""

    def __init__(self, config: Config, rclone: RcloneManager | None = None) -> None:
        self._cfg = config
        self._rclone = rclone or RcloneManager()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def remote_path(self, provider: str, emulator_id: str) -> str:
        """``<provider>:<sync_root>/<emulator id>``, or the emulator's ``custom_paths`` entry."""
        custom = self._cfg.custom_paths.get(emulator_id)
        if custom:
            return f"{provider}:{_normalise_remote(custom)}"
        return f"{provider}:{_normalise_remote(self._cfg.sync_root)}/{emulator_id}"

    def resolve_provider(self, provider: str | None = None) -> str:
        """Pick the provider to use and make sure rclone can reach it."""
        provider = provider or self._cfg.cloud_provider
        if not provider:
            raise SyncError("No cloud provider configured. Run 'config set cloud_provider <remote>'.")
        if not self._rclone.is_installed():
            raise SyncError("rclone is not installed or not on PATH", {"provider": provider})
        return provider

    def sync_emulator(
        self,
        emulator: DetectedEmulator,
        direction: SyncDirection = SyncDirection.UPLOAD,
        provider: str | None = None,
        dry_run: bool = False,
        verbose: bool = False,
    ) -> bool:
        """Sync one emulator; returns whether rclone reported success."""
        provider = self.resolve_provider(provider)
        ok = self._sync_one(emulator, direction, provider, dry_run, verbose)
        if ok and not dry_run:
            self._touch_last_sync()
        return ok

    def sync_all(
        self,
        emulators: dict[str, DetectedEmulator],
        direction: SyncDirection = SyncDirection.UPLOAD,
        provider: str | None = None,
        dry_run: bool = False,
        verbose: bool = False,
    ) -> SyncResult:
        """Sync every emulator in *emulators*, collecting failures."""
        provider = self.resolve_provider(provider)
        result = SyncResult()
        for emulator_id, emulator in emulators.items():
            try:
                ok = self._sync_one(emulator, direction, provider, dry_run, verbose)
            except Exception as e:
                msg = f"Sync failed for {emulator_id}: {e}"
                logger.error(msg)
                result.failed += 1
                result.errors.append(msg)
                continue
            if ok:
                result.synced += 1
            else:
                result.failed += 1
                result.errors.append(f"Sync failed for {emulator_id}")

        if result.synced and not dry_run:
            self._touch_last_sync()
        logger.info(
            "Sync finished: {} synced, {} failed ({})",
            result.synced, result.failed, direction.value,
        )
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _sync_one(
        self,
        emulator: DetectedEmulator,
        direction: SyncDirection,
        provider: str,
        dry_run: bool,
        verbose: bool,
    ) -> bool:
        remote = self.remote_path(provider, emulator.id)
        log_file = None
        if verbose:
            log_dir = self._cfg.data_dir / "logs"
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = str(log_dir / "rclone.log")

        if direction == SyncDirection.UPLOAD:
            local = next((p for p in emulator.save_paths if Path(p).exists()), None)
            if local is None:
                logger.warning("No existing save path for {}, skipping upload", emulator.name)
                return False
            logger.info("Uploading {} saves: {} -> {}", emulator.name, local, remote)
            return self._rclone.sync(local, remote, dry_run, verbose, log_file)

        local = emulator.save_paths[0]
        if not dry_run:
            Path(local).mkdir(parents=True, exist_ok=True)
        logger.info("Downloading {} saves: {} -> {}", emulator.name, remote, local)
        return self._rclone.sync(remote, local, dry_run, verbose, log_file)

    def _touch_last_sync(self) -> None:
        self._cfg.set("last_sync", datetime.now().isoformat(timespec="seconds"))
