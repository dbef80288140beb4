"""cloudsaver: emulator save detection and sync."""

from cloudsaver.logger import register_levels

__version__ = "0.1.0"

register_levels()
