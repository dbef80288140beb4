"""Emulator detection: which cataloged emulators have saves on this host."""

from __future__ import annotations

import ntpath
from collections.abc import Iterable

from loguru import logger

from cloudsaver.catalog.emulators import EmulatorCatalog, default_catalog
from cloudsaver.catalog.platforms import EMULATION_DRIVES
from cloudsaver.core.dir_scanner import scan_custom_directories
from cloudsaver.core.fsprobe import LocalFilesystem
from cloudsaver.core.path_resolver import expand_path, is_drive_rooted
from cloudsaver.models.emulator import DetectedEmulator, EmulatorDefinition
from cloudsaver.models.platform import PlatformDescriptor, PlatformType


class EmulatorDetector:
    """Resolves catalog entries to save directories that exist on disk.

    Each :meth:`detect_emulators` call works on a private copy of the
    catalog, so directories discovered while scanning only affect that run.
    """

    def __init__(
        self,
        catalog: EmulatorCatalog | None = None,
        fs: LocalFilesystem | None = None,
        home: str | None = None,
    ) -> None:
        self._catalog = catalog if catalog is not None else default_catalog()
        self._fs = fs or LocalFilesystem()
        self._home = home
        self._emulators: dict[str, DetectedEmulator] = {}
        self._run_catalog: EmulatorCatalog | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> EmulatorCatalog:
        return self._catalog

    @property
    def emulators(self) -> dict[str, DetectedEmulator]:
        return dict(self._emulators)

    @property
    def last_run_catalog(self) -> EmulatorCatalog | None:
        """The catalog copy used by the last run, including discoveries."""
        return self._run_catalog

    def get_emulator(self, emulator_id: str) -> DetectedEmulator | None:
        return self._emulators.get(emulator_id)

    async def detect_emulators(
        self,
        platform: PlatformDescriptor,
        extra_scan_roots: Iterable[str] = (),
    ) -> dict[str, DetectedEmulator]:
        """Detect emulators for *platform*.

        Parameters
        ----------
        platform : PlatformDescriptor
            Output of the platform detector.
        extra_scan_roots : Iterable[str]
            Additional directories to run the scanning heuristic on
            (user-configured scan directories).

        Returns
        -------
        dict[str, DetectedEmulator]
            Emulators with at least one existing save path, keyed by id in
            catalog order.
        """
        logger.info("Detecting emulators for platform: {}", platform.name)
        self._emulators.clear()
        catalog = self._catalog.copy()
        self._run_catalog = catalog

        for root in await self.scan_roots_for(platform):
            await scan_custom_directories(root, catalog, platform.type, self._fs)
        for root in extra_scan_roots:
            await scan_custom_directories(expand_path(root, self._home), catalog, platform.type, self._fs)

        for definition in catalog:
            try:
                detected = await self._detect_one(definition, platform.type)
            except Exception as e:
                logger.error("Error detecting emulator {}: {}", definition.id, e)
                continue
            if detected is None:
                logger.debug("Emulator {} not detected (no save paths found)", definition.id)
                continue
            self._emulators[definition.id] = detected
            logger.info("Detected emulator: {} ({} save paths)", detected.name, len(detected.save_paths))

        logger.info("Total emulators detected: {}", len(self._emulators))
        return self.emulators

    async def scan_roots_for(self, platform: PlatformDescriptor) -> list[str]:
        """Directories the scanning heuristic should visit for *platform*.

        Only Windows drive installs are scanned automatically: EmuDeck
        scans its save dir, base dir and ``emulators`` folder; the generic
        platform scans its base dir and every other drive's ``Emulation``.
        """
        roots: list[str] = []
        if not is_drive_rooted(platform.base_dir):
            return roots

        if platform.type == PlatformType.EMUDECK:
            logger.debug("Scanning EmuDeck directories on Windows")
            if platform.save_dir:
                roots.append(platform.save_dir)
            roots.append(platform.base_dir)
            emulators_dir = ntpath.join(platform.base_dir, "emulators")
            if await self._fs.exists(emulators_dir):
                logger.debug("Found emulators directory: {}", emulators_dir)
                roots.append(emulators_dir)

        elif platform.type == PlatformType.GENERIC:
            logger.debug("Scanning custom directories in Windows drives")
            roots.append(platform.base_dir)
            current_drive = platform.base_dir[:2].upper()
            for drive in EMULATION_DRIVES:
                if drive[:2].upper() == current_drive:
                    continue
                candidate = ntpath.join(drive, "Emulation")
                if await self._fs.exists(candidate):
                    logger.debug("Found additional Emulation directory: {}", candidate)
                    roots.append(candidate)

        return roots

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _detect_one(
        self, definition: EmulatorDefinition, platform_type: PlatformType,
    ) -> DetectedEmulator | None:
        existing: list[str] = []
        for template in definition.candidates_for(platform_type):
            expanded = expand_path(template, self._home)
            if expanded in existing:
                continue
            if await self._fs.exists(expanded):
                existing.append(expanded)
                logger.debug("Found save path for {}: {}", definition.id, expanded)
        if not existing:
            return None
        return DetectedEmulator.from_definition(definition, existing)
