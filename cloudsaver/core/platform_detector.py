"""Platform detection: works out which emulation setup the host runs.

The detector walks an ordered cascade of predicates (see
:data:`~cloudsaver.catalog.platforms.DETECTION_ORDER`); the first one that
recognises the host wins.  When nothing matches, a generic descriptor is
built from conventional directory names.

Override flag
~~~~~~~~~~~~~
Setting ``FORCE_EMUDECK_PLATFORM`` to any non-empty value selects EmuDeck
even without filesystem evidence.  The flag is evaluated at the end of the
EmuDeck predicate: a real EmuDeck install still produces its own
descriptor, and the forced descriptor wins over every later predicate
(RetroPie, Batocera …).
"""

from __future__ import annotations

import ntpath
import os
import platform
import posixpath
from collections.abc import Awaitable, Callable, Iterable, Mapping

from loguru import logger

from cloudsaver.catalog.platforms import (
    DETECTION_ORDER,
    EMULATION_DRIVES,
    EMUDECK_STRUCTURE,
    EMUDECK_STRUCTURE_MIN,
    FORCE_EMUDECK_ENV,
    GENERIC_BASE_DIRS,
    GENERIC_DEFAULT_BASE,
    GENERIC_NAME,
    GENERIC_ROM_NAMES,
    GENERIC_SAVE_NAMES,
    OS_RELEASE,
    PLATFORM_CATALOG,
    PlatformProfile,
    os_family,
)
from cloudsaver.core.fsprobe import LocalFilesystem
from cloudsaver.core.path_resolver import resolve_home
from cloudsaver.models.platform import PlatformDescriptor, PlatformType


class PlatformDetector:
    """Detects the emulation platform of the current host.

    Parameters
    ----------
    fs : LocalFilesystem, optional
        Filesystem probes; tests pass a fake.
    env : Mapping[str, str], optional
        Environment used for the override flag and home lookup.
    system : str, optional
        ``platform.system()`` value to assume (``"Windows"``, ``"Linux"`` …).
    home : str, optional
        Home directory; defaults to ``HOME`` / ``USERPROFILE`` from *env*.
    """

    def __init__(
        self,
        fs: LocalFilesystem | None = None,
        env: Mapping[str, str] | None = None,
        system: str | None = None,
        home: str | None = None,
    ) -> None:
        self._fs = fs or LocalFilesystem()
        self._env = os.environ if env is None else env
        self._system = system or platform.system()
        self._family = os_family(self._system)
        self._home = resolve_home(self._env) if home is None else home
        self._path = ntpath if self._family == "Windows" else posixpath
        self._predicates: dict[PlatformType, Callable[[], Awaitable[PlatformDescriptor | None]]] = {
            PlatformType.EMUDECK: self._detect_emudeck,
            PlatformType.RETROPIE: self._detect_by_markers_of(PlatformType.RETROPIE),
            PlatformType.BATOCERA: self._detect_by_markers_of(PlatformType.BATOCERA),
            PlatformType.LAKKA: self._detect_by_markers_of(PlatformType.LAKKA),
            PlatformType.EMULATIONSTATION: self._detect_by_markers_of(PlatformType.EMULATIONSTATION),
            PlatformType.BAZZITE: self._detect_by_os_release_of(PlatformType.BAZZITE),
            PlatformType.STEAMDECK: self._detect_by_os_release_of(PlatformType.STEAMDECK),
        }

    @property
    def is_windows(self) -> bool:
        return self._family == "Windows"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def detect_platform(self) -> PlatformDescriptor:
        """Return the single best-matching platform descriptor.

        Never raises: a failing predicate is logged and skipped, and if
        even the generic fallback fails a synthesized descriptor is
        returned.
        """
        logger.debug("Starting platform detection")
        try:
            for platform_type in DETECTION_ORDER:
                try:
                    found = await self._predicates[platform_type]()
                except Exception as e:
                    logger.error("Error while checking for {}: {}", platform_type.value, e)
                    continue
                if found is not None:
                    logger.info("Detected platform: {} (base {})", found.name, found.base_dir)
                    return found

            logger.info("No specific platform detected, using generic configuration")
            return await self._generic_platform()
        except Exception as e:
            logger.error("Platform detection failed, falling back to defaults: {}", e)
            return self._synthesized_generic()

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------

    def _resolve(self, template: str, base: str | None = None) -> str:
        """Fill ``{base}`` and expand ``~`` using the host's path flavour."""
        if base is not None:
            template = template.replace("{base}", base)
        if template == "~":
            return self._home
        if template.startswith("~/") or template.startswith("~\\"):
            return self._path.normpath(self._path.join(self._home, template[2:]))
        return self._path.normpath(template)

    def _join(self, *parts: str) -> str:
        return self._path.join(*parts)

    async def _first_existing(self, candidates: Iterable[str]) -> str | None:
        for candidate in candidates:
            if await self._fs.exists(candidate):
                return candidate
        return None

    async def _describe(
        self,
        platform_type: PlatformType,
        name: str,
        base: str,
        rom_templates: Iterable[str],
        save_templates: Iterable[str],
    ) -> PlatformDescriptor:
        """Build a descriptor; rom/save dirs are kept only if they exist."""
        rom_dir = await self._first_existing([self._resolve(t, base) for t in rom_templates])
        save_dir = await self._first_existing([self._resolve(t, base) for t in save_templates])
        return PlatformDescriptor(
            type=platform_type,
            name=name,
            base_dir=base,
            rom_dir=rom_dir,
            save_dir=save_dir,
        )

    def _profile_dirs(self, profile: PlatformProfile) -> tuple[tuple[str, ...], tuple[str, ...]]:
        if self.is_windows and (profile.windows_rom_dirs or profile.windows_save_dirs):
            return profile.windows_rom_dirs, profile.windows_save_dirs
        return profile.rom_dirs, profile.save_dirs

    # ------------------------------------------------------------------
    # EmuDeck
    # ------------------------------------------------------------------

    async def _detect_emudeck(self) -> PlatformDescriptor | None:
        profile = PLATFORM_CATALOG[PlatformType.EMUDECK]
        logger.debug("Checking for EmuDeck installation")

        templates = list(profile.markers)
        if self.is_windows:
            templates.extend(profile.windows_markers)

        for template in templates:
            marker = self._resolve(template)
            if not await self._fs.exists(marker):
                continue
            logger.debug("Found potential EmuDeck directory: {}", marker)

            if self.is_windows:
                # An Emulation folder next to the marker is the real base.
                emulation = await self._first_existing(
                    [self._join(drive, "Emulation") for drive in EMULATION_DRIVES]
                )
                if emulation:
                    logger.info("Detected EmuDeck on Windows with Emulation folder at {}", emulation)
                    return await self._describe(
                        PlatformType.EMUDECK, "EmuDeck (Windows)", emulation,
                        ("{base}\\roms",), ("{base}\\saves",),
                    )
                if await self._fs.exists(self._join(marker, "EmuDeck.ps1")):
                    logger.info("Detected EmuDeck on Windows at {} via EmuDeck.ps1", marker)
                    return await self._describe(
                        PlatformType.EMUDECK, "EmuDeck (Windows)", marker,
                        profile.windows_rom_dirs, profile.windows_save_dirs,
                    )

            return await self._describe(
                PlatformType.EMUDECK, profile.name, marker,
                profile.rom_dirs, profile.save_dirs,
            )

        if self.is_windows:
            found = await self._detect_emudeck_structure()
            if found is not None:
                return found

        if self._env.get(FORCE_EMUDECK_ENV):
            return await self._forced_emudeck()

        return None

    async def _detect_emudeck_structure(self) -> PlatformDescriptor | None:
        """Windows: an ``X:\\Emulation`` laid out like EmuDeck counts as EmuDeck."""
        for drive in EMULATION_DRIVES:
            emulation = self._join(drive, "Emulation")
            if not await self._fs.exists(emulation):
                continue
            logger.debug("Found Emulation directory at {}, checking for EmuDeck structure", emulation)
            matches = 0
            for folder in EMUDECK_STRUCTURE:
                if await self._fs.exists(self._join(emulation, folder)):
                    matches += 1
            if matches >= EMUDECK_STRUCTURE_MIN:
                logger.info("Detected EmuDeck by Emulation folder structure at {}", emulation)
                return await self._describe(
                    PlatformType.EMUDECK, "EmuDeck (Windows)", emulation,
                    ("{base}\\roms",), ("{base}\\saves",),
                )
        return None

    async def _forced_emudeck(self) -> PlatformDescriptor:
        logger.info("Forcing EmuDeck platform detection via {}", FORCE_EMUDECK_ENV)
        base = self._resolve("~/Emulation")
        if self.is_windows:
            emulation = await self._first_existing(
                [self._join(drive, "Emulation") for drive in EMULATION_DRIVES]
            )
            if emulation:
                base = emulation
        return await self._describe(
            PlatformType.EMUDECK, "EmuDeck (Forced)", base,
            (self._join("{base}", "roms"),), (self._join("{base}", "saves"),),
        )

    # ------------------------------------------------------------------
    # Marker and os-release predicates
    # ------------------------------------------------------------------

    def _detect_by_markers_of(
        self, platform_type: PlatformType,
    ) -> Callable[[], Awaitable[PlatformDescriptor | None]]:
        async def predicate() -> PlatformDescriptor | None:
            return await self._detect_by_markers(PLATFORM_CATALOG[platform_type])
        return predicate

    async def _detect_by_markers(self, profile: PlatformProfile) -> PlatformDescriptor | None:
        for template in profile.markers:
            marker = self._resolve(template)
            if not await self._fs.exists(marker):
                continue
            logger.debug("Found {} marker: {}", profile.name, marker)
            base = self._resolve(profile.base_dir) if profile.base_dir else marker
            rom_templates, save_templates = self._profile_dirs(profile)
            return await self._describe(profile.type, profile.name, base, rom_templates, save_templates)
        return None

    def _detect_by_os_release_of(
        self, platform_type: PlatformType,
    ) -> Callable[[], Awaitable[PlatformDescriptor | None]]:
        async def predicate() -> PlatformDescriptor | None:
            return await self._detect_by_os_release(PLATFORM_CATALOG[platform_type])
        return predicate

    async def _detect_by_os_release(self, profile: PlatformProfile) -> PlatformDescriptor | None:
        if self._family != "Linux" or not profile.os_release_token:
            return None
        text = await self._fs.read_text(OS_RELEASE)
        if not text or profile.os_release_token not in text:
            return None
        logger.debug("{} found in {}", profile.os_release_token, OS_RELEASE)
        base = self._resolve(profile.base_dir or "~")
        return await self._describe(profile.type, profile.name, base, profile.rom_dirs, profile.save_dirs)

    # ------------------------------------------------------------------
    # Generic fallback
    # ------------------------------------------------------------------

    async def _generic_platform(self) -> PlatformDescriptor:
        for template in GENERIC_BASE_DIRS[self._family]:
            base = self._resolve(template)
            if not await self._fs.exists(base):
                continue
            logger.debug("Found emulation directory: {}", base)
            rom_dir = await self._first_existing([self._join(base, n) for n in GENERIC_ROM_NAMES])
            save_dir = await self._first_existing([self._join(base, n) for n in GENERIC_SAVE_NAMES])
            return PlatformDescriptor(
                type=PlatformType.GENERIC,
                name=GENERIC_NAME,
                base_dir=base,
                rom_dir=rom_dir,
                save_dir=save_dir,
            )

        descriptor = self._synthesized_generic()
        logger.debug("No existing emulation directory found, defaulting to {}", descriptor.base_dir)
        return descriptor

    def _synthesized_generic(self) -> PlatformDescriptor:
        return PlatformDescriptor(
            type=PlatformType.GENERIC,
            name=GENERIC_NAME,
            base_dir=self._resolve(GENERIC_DEFAULT_BASE[self._family]),
        )
