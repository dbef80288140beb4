from __future__ import annotations

import re
from pathlib import Path

import pytest

from cloudsaver.config import Config

_SEP_RE = re.compile(r"[\\/]")


class FakeFilesystem:
    """In-memory stand-in for LocalFilesystem.

    Paths are compared as plain strings, so tests must spell them the way
    the detector builds them (backslashes for Windows hosts).  Every
    ancestor of a registered path exists as well.
    """

    def __init__(self, paths=(), files=None, broken=False):
        self.paths: set[str] = set()
        self.files: dict[str, str] = dict(files or {})
        self.broken = broken
        for p in list(paths) + list(self.files):
            self.add(p)

    def add(self, path: str) -> None:
        sep = "\\" if "\\" in path else "/"
        parts = _SEP_RE.split(path)
        for i in range(1, len(parts) + 1):
            prefix = sep.join(parts[:i])
            if prefix:
                self.paths.add(prefix)

    async def exists(self, path: str) -> bool:
        if self.broken:
            raise RuntimeError("filesystem unavailable")
        return path in self.paths

    async def list_dirs(self, path: str) -> list[str]:
        if path not in self.paths:
            raise FileNotFoundError(path)
        names = set()
        for p in self.paths:
            for sep in ("/", "\\"):
                prefix = path.rstrip(sep) + sep
                if p.startswith(prefix) and p not in self.files:
                    rest = p[len(prefix):]
                    if rest and not _SEP_RE.search(rest):
                        names.add(rest)
        return sorted(names)

    async def read_text(self, path: str) -> str | None:
        return self.files.get(path)

    async def walk_files(self, root: str, skip=()) -> list[Path]:
        return sorted(Path(p) for p in self.files if p.startswith(root))


@pytest.fixture
def config(tmp_path):
    Config.reset()
    cfg = Config(tmp_path / "cfg" / "config.json")
    yield cfg
    Config.reset()


@pytest.fixture
def make_tree():
    """Create files (names with a suffix) or directories below a root."""
    def _make(root: Path, *relative: str) -> Path:
        for rel in relative:
            target = root / rel
            if target.suffix:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(b"\0")
            else:
                target.mkdir(parents=True, exist_ok=True)
        return root
    return _make


@pytest.fixture
def fake_fs():
    return FakeFilesystem
