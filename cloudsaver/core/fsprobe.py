"""Awaitable filesystem probes used by the detection engine.

Every call runs the blocking ``os`` operation through
:func:`asyncio.to_thread` and is awaited before the next one starts, so the
engine stays a single sequential flow.  Existence checks never raise: a
permission or I/O error on one candidate counts as "missing".  Directory
listings do raise ``OSError`` so each caller can log the failure in its
own context and carry on with the siblings.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from loguru import logger


def _exists(path: str) -> bool:
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except (OSError, ValueError) as e:
        logger.debug("Probe failed for {}: {}", path, e)
        return False
    return True


def _list_dirs(path: str) -> list[str]:
    names: list[str] = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                if entry.is_dir():
                    names.append(entry.name)
            except OSError as e:
                logger.debug("Cannot stat {}: {}", entry.path, e)
    return sorted(names)


def _read_text(path: str) -> str | None:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        logger.debug("Cannot read {}: {}", path, e)
        return None


def _walk_files(root: str, skip: tuple[str, ...]) -> list[Path]:
    """Depth-first listing of every regular file below *root*, sorted per directory.

    Symlinked directories are followed, but each real directory is walked
    once, so a link back to an ancestor cannot loop.
    """
    found: list[Path] = []
    visited: set[tuple[int, int]] = set()
    stack = [root]
    skip_norm = tuple(os.path.normcase(os.path.abspath(s)) for s in skip)
    while stack:
        current = stack.pop()
        if skip_norm and os.path.normcase(os.path.abspath(current)) in skip_norm:
            logger.debug("Skipping ignored directory {}", current)
            continue
        try:
            st = os.stat(current)
        except OSError as e:
            logger.error("Error reading directory {}: {}", current, e)
            continue
        key = (st.st_dev, st.st_ino)
        if key in visited:
            logger.debug("Skipping already visited directory {}", current)
            continue
        visited.add(key)
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.error("Error reading directory {}: {}", current, e)
            continue
        subdirs: list[str] = []
        for entry in entries:
            try:
                if entry.is_dir():
                    subdirs.append(entry.path)
                elif entry.is_file():
                    found.append(Path(entry.path))
            except OSError as e:
                logger.debug("Cannot stat {}: {}", entry.path, e)
        stack.extend(reversed(subdirs))
    return found


class LocalFilesystem:
    """Probes against the real host filesystem."""

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(_exists, path)

    async def list_dirs(self, path: str) -> list[str]:
        """Names of the immediate subdirectories of *path*, sorted.

        Raises ``OSError`` if *path* cannot be read.
        """
        return await asyncio.to_thread(_list_dirs, path)

    async def read_text(self, path: str) -> str | None:
        return await asyncio.to_thread(_read_text, path)

    async def walk_files(self, root: str, skip: tuple[str, ...] = ()) -> list[Path]:
        """Every file below *root*; unreadable subdirectories are logged and skipped."""
        return await asyncio.to_thread(_walk_files, root, skip)
