"""Platform catalog: filesystem markers and directory conventions.

Paths are templates: a leading ``~`` is the user's home and ``{base}`` is
the base directory the predicate settled on.  Windows entries use
backslashes and explicit drive roots.
"""

from __future__ import annotations

from dataclasses import dataclass

from cloudsaver.models.platform import PlatformType

FORCE_EMUDECK_ENV = "FORCE_EMUDECK_PLATFORM"

# Windows drives probed for an ``Emulation`` folder, most likely first.
EMULATION_DRIVES = ("E:\\", "D:\\", "C:\\")
# Drives probed for an ``EmuDeck`` marker folder.
EMUDECK_MARKER_DRIVES = ("C:\\", "D:\\", "E:\\", "F:\\")
# Folders an EmuDeck ``Emulation`` tree usually carries; two are enough.
EMUDECK_STRUCTURE = ("roms", "saves", "tools", "storage")
EMUDECK_STRUCTURE_MIN = 2

OS_RELEASE = "/etc/os-release"


@dataclass(frozen=True)
class PlatformProfile:
    """Markers and conventional directories for one platform kind."""

    type: PlatformType
    name: str
    markers: tuple[str, ...] = ()
    """Paths whose existence identifies the platform, tried in order."""

    windows_markers: tuple[str, ...] = ()
    """Extra markers only probed on Windows hosts."""

    os_release_token: str | None = None
    """Substring of /etc/os-release that identifies the platform."""

    base_dir: str | None = None
    """Fixed base directory; ``None`` means the matching marker."""

    rom_dirs: tuple[str, ...] = ()
    save_dirs: tuple[str, ...] = ()
    windows_rom_dirs: tuple[str, ...] = ()
    windows_save_dirs: tuple[str, ...] = ()


PLATFORM_CATALOG: dict[PlatformType, PlatformProfile] = {
    PlatformType.EMUDECK: PlatformProfile(
        type=PlatformType.EMUDECK,
        name="EmuDeck",
        markers=(
            "/home/deck/emudeck",
            "/home/deck/.emudeck",
            "~/emudeck",
            "~/.emudeck",
            "~/EmuDeck",
            "~/AppData/Roaming/EmuDeck",
            "~/Documents/EmuDeck",
        ),
        windows_markers=tuple(f"{drive}EmuDeck" for drive in EMUDECK_MARKER_DRIVES),
        rom_dirs=("{base}/roms", "~/Emulation/roms"),
        save_dirs=("~/Emulation/saves", "~/Emulation/storage"),
        windows_rom_dirs=("~\\Emulation\\roms", "C:\\Emulation\\roms"),
        windows_save_dirs=("~\\Emulation\\saves", "C:\\Emulation\\saves"),
    ),
    PlatformType.RETROPIE: PlatformProfile(
        type=PlatformType.RETROPIE,
        name="RetroPie",
        markers=("/opt/retropie", "/home/pi/RetroPie"),
        rom_dirs=("{base}/roms",),
        save_dirs=("~/.config/retroarch/saves",),
    ),
    PlatformType.BATOCERA: PlatformProfile(
        type=PlatformType.BATOCERA,
        name="Batocera",
        markers=("/userdata", "/usr/batocera"),
        rom_dirs=("/userdata/roms",),
        save_dirs=("/userdata/saves",),
    ),
    PlatformType.LAKKA: PlatformProfile(
        type=PlatformType.LAKKA,
        name="Lakka",
        markers=("/etc/lakka-version",),
        base_dir="/storage",
        rom_dirs=("/storage/roms",),
        save_dirs=("/storage/savefiles",),
    ),
    PlatformType.EMULATIONSTATION: PlatformProfile(
        type=PlatformType.EMULATIONSTATION,
        name="EmulationStation",
        markers=("~/.emulationstation", "/etc/emulationstation", "C:\\EmulationStation"),
        rom_dirs=("~/ROMs",),
        save_dirs=("~/.config/retroarch/saves",),
        windows_rom_dirs=("C:\\ROMs",),
        windows_save_dirs=("~\\AppData\\Roaming\\RetroArch\\saves",),
    ),
    PlatformType.BAZZITE: PlatformProfile(
        type=PlatformType.BAZZITE,
        name="Bazzite",
        os_release_token="Bazzite",
        base_dir="~/Emulation",
        rom_dirs=("{base}/roms",),
        save_dirs=("{base}/saves",),
    ),
    PlatformType.STEAMDECK: PlatformProfile(
        type=PlatformType.STEAMDECK,
        name="SteamOS",
        os_release_token="SteamOS",
        base_dir="~/Emulation",
        rom_dirs=("{base}/roms",),
        save_dirs=("{base}/saves",),
    ),
}

# Order of the predicate cascade: rare, specific setups before broad ones.
DETECTION_ORDER: tuple[PlatformType, ...] = (
    PlatformType.EMUDECK,
    PlatformType.RETROPIE,
    PlatformType.BATOCERA,
    PlatformType.LAKKA,
    PlatformType.EMULATIONSTATION,
    PlatformType.BAZZITE,
    PlatformType.STEAMDECK,
)


# ---------------------------------------------------------------------------
# Generic fallback conventions
# ---------------------------------------------------------------------------

GENERIC_NAME = "Generic Emulation Setup"

GENERIC_BASE_DIRS: dict[str, tuple[str, ...]] = {
    "Windows": (
        "E:\\Emulation",
        "E:\\Emulators",
        "D:\\Emulation",
        "D:\\Emulators",
        "C:\\Emulation",
        "C:\\Emulators",
        "~\\Emulation",
        "~\\Emulators",
    ),
    "Darwin": (
        "~/Emulation",
        "~/Documents/Emulation",
        "~/Emulators",
    ),
    "Linux": (
        "~/Emulation",
        "~/Emulators",
        "~/.local/share/cloudsaver",
    ),
}

GENERIC_DEFAULT_BASE: dict[str, str] = {
    "Windows": "~\\Emulation",
    "Darwin": "~/.local/share/cloudsaver",
    "Linux": "~/.local/share/cloudsaver",
}

GENERIC_ROM_NAMES = ("roms", "ROMs", "games", "Games")
GENERIC_SAVE_NAMES = ("saves", "save", "SaveData", "SaveFiles", "SaveGames", "Saves")


def os_family(system: str) -> str:
    """Collapse ``platform.system()`` values onto the catalog's families."""
    if system == "Windows":
        return "Windows"
    if system == "Darwin":
        return "Darwin"
    return "Linux"
