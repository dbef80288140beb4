"""Save-file lookup: per-emulator resolution and catalog-wide deep scans."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from cloudsaver.catalog.emulators import EmulatorCatalog, default_catalog
from cloudsaver.core.fsprobe import LocalFilesystem
from cloudsaver.models.emulator import DetectedEmulator


def _suffix(path: Path) -> str:
    return path.suffix.lower()


async def find_save_files(
    emulator: DetectedEmulator,
    include_states: bool = False,
    fs: LocalFilesystem | None = None,
) -> list[Path]:
    """Return every save file below the emulator's save paths.

    The walk is recursive since some emulators keep saves in per-title
    subfolders.  Extensions are compared case-insensitively.  Unreadable
    folders are logged and skipped; the function never raises.  A file
    reachable from two overlapping save paths is listed once.
    """
    fs = fs or LocalFilesystem()
    wanted = {ext.lower() for ext in emulator.save_extensions}
    if include_states:
        wanted.update(ext.lower() for ext in emulator.state_extensions)

    found: list[Path] = []
    seen: set[Path] = set()
    for save_path in emulator.save_paths:
        try:
            files = await fs.walk_files(save_path)
        except Exception as e:
            logger.error("Error finding save files for {} in {}: {}", emulator.name, save_path, e)
            continue
        for f in files:
            if _suffix(f) in wanted and f not in seen:
                seen.add(f)
                found.append(f)

    logger.info("Found {} save files for {}", len(found), emulator.name)
    return found


async def deep_scan_directory(
    directory: str | Path,
    catalog: EmulatorCatalog | None = None,
    ignore_dirs: Iterable[str] = (),
    fs: LocalFilesystem | None = None,
) -> dict[str, list[Path]]:
    """Bucket every save-looking file below *directory* by emulator id.

    A file whose extension several emulators claim goes to the first
    claiming entry in catalog order, and only to that one.  Emulators with
    no files are absent from the result.
    """
    fs = fs or LocalFilesystem()
    catalog = catalog if catalog is not None else default_catalog()
    results: dict[str, list[Path]] = {}

    logger.info("Deep scanning directory: {}", directory)
    owners: dict[str, str] = {}
    for ext in catalog.all_save_extensions():
        owner = catalog.owner_of_extension(ext)
        if owner is not None:
            owners[ext] = owner.id

    try:
        files = await fs.walk_files(str(directory), tuple(ignore_dirs))
    except Exception as e:
        logger.error("Error deep scanning directory {}: {}", directory, e)
        return results

    for f in files:
        emulator_id = owners.get(_suffix(f))
        if emulator_id is None:
            continue
        results.setdefault(emulator_id, []).append(f)

    results = {eid: results[eid] for eid in catalog.ids() if eid in results}
    for emulator_id, paths in results.items():
        logger.info("Found {} potential save files for {}", len(paths), emulator_id)
    return results
