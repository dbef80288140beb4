"""Scan dispatcher: runs detection with the user's configuration merged in."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path

from loguru import logger

from cloudsaver.catalog.platforms import FORCE_EMUDECK_ENV
from cloudsaver.config import Config
from cloudsaver.core.emulator_detector import EmulatorDetector
from cloudsaver.core.fsprobe import LocalFilesystem
from cloudsaver.core.path_resolver import expand_path
from cloudsaver.core.platform_detector import PlatformDetector
from cloudsaver.core.save_finder import deep_scan_directory, find_save_files
from cloudsaver.models.emulator import DetectedEmulator
from cloudsaver.models.platform import PlatformDescriptor


class Scanner:
    """High-level scanner combining platform detection, emulator detection and config."""

    def __init__(
        self,
        config: Config,
        platform_detector: PlatformDetector | None = None,
        emulator_detector: EmulatorDetector | None = None,
        fs: LocalFilesystem | None = None,
        home: str | None = None,
    ) -> None:
        self._cfg = config
        self._fs = fs or LocalFilesystem()
        self._home = home
        self._platform_detector = platform_detector
        self._emulator_detector = emulator_detector or EmulatorDetector(fs=self._fs, home=home)
        self._platform: PlatformDescriptor | None = None
        self._detected: dict[str, DetectedEmulator] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def platform(self) -> PlatformDescriptor | None:
        return self._platform

    @property
    def detected_emulators(self) -> dict[str, DetectedEmulator]:
        return dict(self._detected)

    async def detect_platform(self, force_emudeck: bool = False) -> PlatformDescriptor:
        """Detect the platform; *force_emudeck* sets the override flag for this call."""
        if force_emudeck:
            env = dict(os.environ)
            env[FORCE_EMUDECK_ENV] = "1"
            detector = PlatformDetector(fs=self._fs, env=env, home=self._home)
        else:
            detector = self._platform_detector or PlatformDetector(fs=self._fs, home=self._home)
        self._platform = await detector.detect_platform()
        return self._platform

    async def detect_emulators(
        self, platform: PlatformDescriptor | None = None,
    ) -> dict[str, DetectedEmulator]:
        """Detect emulators, then fold in the user's configured save paths."""
        if platform is None:
            platform = self._platform or await self.detect_platform()
        detected = await self._emulator_detector.detect_emulators(
            platform, extra_scan_roots=self._cfg.scan_dirs,
        )
        self._detected = await self._merge_custom_paths(detected)
        return self.detected_emulators

    async def scan_saves(self, include_states: bool = False) -> dict[str, list[Path]]:
        """Resolve save files for every detected emulator."""
        results: dict[str, list[Path]] = {}
        for emulator_id, emulator in self._detected.items():
            logger.info("Scanning saves for {} at {}", emulator.name, emulator.save_paths)
            results[emulator_id] = await find_save_files(emulator, include_states, self._fs)
        total = sum(len(v) for v in results.values())
        logger.info("Total save files found: {}", total)
        return results

    async def deep_scan(self, directory: str) -> dict[str, list[Path]]:
        """Deep scan *directory*, skipping the configured ignore directories."""
        ignore = [expand_path(d, self._home) for d in self._cfg.ignore_dirs]
        return await deep_scan_directory(
            expand_path(directory, self._home),
            self._emulator_detector.catalog,
            ignore,
            self._fs,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _merge_custom_paths(
        self, detected: dict[str, DetectedEmulator],
    ) -> dict[str, DetectedEmulator]:
        custom = self._cfg.get("emulator_paths", {}) or {}
        if not custom:
            return detected

        merged = dict(detected)
        catalog = self._emulator_detector.catalog
        for emulator_id, paths in custom.items():
            existing: list[str] = []
            for raw in paths:
                expanded = expand_path(raw, self._home)
                if await self._fs.exists(expanded):
                    existing.append(expanded)
                else:
                    logger.warning("Custom path for {} not found: {}", emulator_id, expanded)
            if not existing:
                continue

            if emulator_id in merged:
                current = merged[emulator_id]
                paths = current.save_paths + [p for p in existing if p not in current.save_paths]
                merged[emulator_id] = dataclasses.replace(current, save_paths=paths)
                continue

            definition = catalog.get(emulator_id)
            if definition is None:
                logger.warning("Ignoring custom paths for unknown emulator: {}", emulator_id)
                continue
            merged[emulator_id] = DetectedEmulator.from_definition(definition, existing)
            logger.info("Detected emulator from custom paths: {}", definition.name)
        return merged
