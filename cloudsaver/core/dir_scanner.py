"""Directory-scanning heuristic: finds save folders the catalog does not list.

Emulator layouts differ wildly between distributions and manual installs,
so the static tables under-detect.  Starting from a root directory this
module looks for folders whose names mention a cataloged emulator id and
appends them to that emulator's candidate list in the given catalog.
False positives are accepted: a folder merely containing an id as a
substring will match.

Three independent passes run over the root:

1. ``root/saves/<dir>``: EmuDeck-style per-emulator save folders, plus a
   nested child named exactly ``save``, ``saves``, ``savegames`` or
   ``memcards``.  Added for the platform being scanned.
2. ``root/<generic name>/<dir>`` for the usual save folder names.  Added
   to the generic candidates.
3. ``root/<dir>`` itself, plus children whose name *contains* a save
   keyword.  Added to the generic candidates.

Pass 3 uses substring keywords while pass 1 uses exact names; both are
kept as they are because unifying them would change what gets detected.
"""

from __future__ import annotations

import os

from loguru import logger

from cloudsaver.catalog.emulators import EmulatorCatalog
from cloudsaver.core.fsprobe import LocalFilesystem
from cloudsaver.models.emulator import EmulatorDefinition
from cloudsaver.models.platform import PlatformType

# Pass 1: nested folder names accepted inside an emulator's save folder.
NESTED_SAVE_DIR_NAMES = frozenset({"save", "saves", "savegames", "memcards"})
# Pass 2: folders under the root that usually hold per-emulator folders.
GENERIC_SAVE_PARENTS = ("saves", "save", "SaveData", "SaveFiles", "SaveGames", "Emulators")
# Pass 3: substrings marking a child folder as save storage.
SAVE_KEYWORDS = ("save", "saves", "savegames", "savedata")


def fuzzy_match(dir_name: str, emulator_id: str) -> bool:
    """True if *dir_name* mentions *emulator_id* (case-insensitive substring)."""
    return emulator_id.lower() in dir_name.lower()


def is_nested_save_dir(dir_name: str) -> bool:
    """Exact-name check used for folders inside an emulator's save folder."""
    return dir_name.lower() in NESTED_SAVE_DIR_NAMES


def has_save_keyword(dir_name: str) -> bool:
    """Looser check: the name contains any save keyword."""
    lowered = dir_name.lower()
    return any(term in lowered for term in SAVE_KEYWORDS)


def matching_emulators(catalog: EmulatorCatalog, dir_name: str) -> list[EmulatorDefinition]:
    return [definition for definition in catalog if fuzzy_match(dir_name, definition.id)]


def _add(definition: EmulatorDefinition, platform_type: PlatformType, path: str) -> None:
    if definition.add_candidate(platform_type, path):
        logger.debug("Found custom path for {}: {}", definition.id, path)


async def scan_custom_directories(
    root: str,
    catalog: EmulatorCatalog,
    platform_type: PlatformType = PlatformType.GENERIC,
    fs: LocalFilesystem | None = None,
) -> None:
    """Run the three discovery passes over *root*, enriching *catalog* in place.

    Every filesystem error is logged where it happens; the remaining
    folders and passes still run.
    """
    fs = fs or LocalFilesystem()
    logger.info("Scanning custom directory: {}", root)

    await _scan_emulator_saves(root, catalog, platform_type, fs)
    await _scan_generic_parents(root, catalog, fs)
    await _scan_root_dirs(root, catalog, fs)


async def _scan_emulator_saves(
    root: str,
    catalog: EmulatorCatalog,
    platform_type: PlatformType,
    fs: LocalFilesystem,
) -> None:
    saves_dir = os.path.join(root, "saves")
    if not await fs.exists(saves_dir):
        return
    logger.debug("Found EmuDeck-style saves directory: {}", saves_dir)

    try:
        names = await fs.list_dirs(saves_dir)
    except OSError as e:
        logger.error("Error scanning saves directory {}: {}", saves_dir, e)
        return

    for name in names:
        matches = matching_emulators(catalog, name)
        if not matches:
            continue
        emulator_dir = os.path.join(saves_dir, name)

        nested: list[str] = []
        try:
            for child in await fs.list_dirs(emulator_dir):
                if is_nested_save_dir(child):
                    nested.append(os.path.join(emulator_dir, child))
        except OSError as e:
            logger.debug("Error scanning subdirectories of {}: {}", emulator_dir, e)

        for definition in matches:
            _add(definition, platform_type, emulator_dir)
            for path in nested:
                _add(definition, platform_type, path)


async def _scan_generic_parents(root: str, catalog: EmulatorCatalog, fs: LocalFilesystem) -> None:
    for parent_name in GENERIC_SAVE_PARENTS:
        parent = os.path.join(root, parent_name)
        try:
            if not await fs.exists(parent):
                continue
            logger.debug("Found custom save directory: {}", parent)
            for name in await fs.list_dirs(parent):
                for definition in matching_emulators(catalog, name):
                    _add(definition, PlatformType.GENERIC, os.path.join(parent, name))
        except OSError as e:
            logger.error("Error scanning custom directory {}: {}", parent, e)


async def _scan_root_dirs(root: str, catalog: EmulatorCatalog, fs: LocalFilesystem) -> None:
    try:
        if not await fs.exists(root):
            return
        names = await fs.list_dirs(root)
    except OSError as e:
        logger.error("Error scanning root directory {}: {}", root, e)
        return

    for name in names:
        matches = matching_emulators(catalog, name)
        if not matches:
            continue
        dir_path = os.path.join(root, name)
        logger.debug("Found potential emulator directory: {}", dir_path)

        save_children: list[str] = []
        try:
            for child in await fs.list_dirs(dir_path):
                if has_save_keyword(child):
                    save_children.append(os.path.join(dir_path, child))
        except OSError as e:
            logger.debug("Error scanning subdirectories of {}: {}", dir_path, e)

        for definition in matches:
            _add(definition, PlatformType.GENERIC, dir_path)
            for path in save_children:
                _add(definition, PlatformType.GENERIC, path)
