"""Home-directory expansion for catalog path templates.

Catalog entries and platform markers are written as templates such as
``~/.config/retroarch/saves`` or ``E:/Emulation/saves``.  Only the leading
``~`` is rewritten; drive-letter templates are returned normalised and are
simply missing on hosts that have no such drive.

The home directory comes from ``HOME`` and then ``USERPROFILE``.  When
neither is set the shorthand expands to the empty string instead of
raising, so ``~/foo`` becomes ``foo``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

_DRIVE_ROOT_RE = re.compile(r"^[A-Za-z]:[\\/]")


def resolve_home(env: Mapping[str, str] | None = None) -> str:
    """Return the current user's home directory, or ``""`` if unknown."""
    if env is None:
        env = os.environ
    return env.get("HOME") or env.get("USERPROFILE") or ""


def expand_path(path: str, home: str | None = None) -> str:
    """Expand a leading ``~`` and normalise *path*.

    Idempotent: expanding an already-expanded path returns it unchanged.
    """
    if not path:
        return path
    if home is None:
        home = resolve_home()
    if path == "~":
        return os.path.normpath(home) if home else home
    if path.startswith("~/") or path.startswith("~\\"):
        rest = path[2:]
        return os.path.normpath(os.path.join(home, rest))
    return os.path.normpath(path)


def to_absolute(path: str, home: str | None = None) -> str:
    """Expand ``~`` and resolve relative input against the working directory."""
    return os.path.abspath(expand_path(path, home))


def is_drive_rooted(path: str) -> bool:
    """True for Windows drive paths such as ``E:\\Emulation``."""
    return bool(_DRIVE_ROOT_RE.match(path))

