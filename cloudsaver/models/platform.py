"""Data model for the detected emulation platform."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PlatformType(str, Enum):
    """Kind of emulation environment found on the host."""

    EMUDECK = "emudeck"
    RETROPIE = "retropie"
    BATOCERA = "batocera"
    LAKKA = "lakka"
    EMULATIONSTATION = "emulationstation"
    BAZZITE = "bazzite"
    STEAMDECK = "steamdeck"
    GENERIC = "generic"


@dataclass(frozen=True)
class PlatformDescriptor:
    """Result of one platform detection run."""

    type: PlatformType
    """Platform kind."""

    name: str
    """Human-readable label, e.g. 'EmuDeck (Windows)'."""

    base_dir: str
    """Root of the emulation install for this platform."""

    rom_dir: str | None = None
    """ROM directory, only set when it existed at detection time."""

    save_dir: str | None = None
    """Save directory, only set when it existed at detection time."""
