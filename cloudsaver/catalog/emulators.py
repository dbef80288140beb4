"""Emulator catalog: known emulators, their save locations and extensions.

Declaration order is significant: the deep scanner attributes a file whose
extension several emulators share (``.sav``, ``.dat``, ``.bin`` …) to the
first entry below that claims it.

:func:`default_catalog` builds a new catalog on every call; detectors work
on their own copy, so discoveries made during one run never leak into
another.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator

from cloudsaver.models.emulator import EmulatorDefinition
from cloudsaver.models.platform import PlatformType

P = PlatformType


def _drives(*suffixes: str, drives: tuple[str, ...] = ("E:", "D:", "C:")) -> list[str]:
    """``E:/<suffix>``, ``D:/<suffix>``, ``C:/<suffix>`` for each suffix, suffix-major."""
    return [f"{d}/{s}" for s in suffixes for d in drives]


def _handheld(*paths: str) -> dict[PlatformType, list[str]]:
    """Same candidates for the SteamOS-like platforms (flatpak installs)."""
    return {P.STEAMDECK: list(paths), P.BAZZITE: list(paths)}


def _definitions() -> list[EmulatorDefinition]:
    return [
        EmulatorDefinition(
            id="retroarch",
            name="RetroArch",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/retroarch/saves",
                    "~/.var/app/org.libretro.RetroArch/config/retroarch/saves",
                    *_drives("Emulation/saves/retroarch/saves", "Emulation/saves/RetroArch/saves"),
                ],
                P.RETROPIE: ["~/.config/retroarch/saves"],
                P.BATOCERA: ["/userdata/saves/retroarch"],
                P.LAKKA: ["/storage/savefiles"],
                P.EMULATIONSTATION: [
                    "~/.config/retroarch/saves",
                    "~/AppData/Roaming/RetroArch/saves",
                ],
                **_handheld(
                    "~/.var/app/org.libretro.RetroArch/config/retroarch/saves",
                    "~/Emulation/saves/retroarch/saves",
                    "~/.config/retroarch/saves",
                ),
                P.GENERIC: [
                    "~/.config/retroarch/saves",
                    "~/AppData/Roaming/RetroArch/saves",
                    "~/Library/Application Support/RetroArch/saves",
                    *_drives("Emulation/saves/retroarch"),
                    "E:/Emulation/SaveData/retroarch",
                    "E:/Emulation/retroarch/saves",
                ],
            },
            save_extensions=(".srm", ".sav", ".bsv", ".fs", ".ram", ".dsv"),
            state_extensions=(".state", ".save", ".sstate", ".rst", ".ss", ".auto"),
            config_paths=("~/.config/retroarch/retroarch.cfg",),
        ),
        EmulatorDefinition(
            id="dolphin",
            name="Dolphin",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/dolphin/Wii",
                    "~/Emulation/saves/dolphin/GC",
                    "~/.var/app/org.DolphinEmu.dolphin-emu/data/dolphin-emu/GC",
                    "~/.var/app/org.DolphinEmu.dolphin-emu/data/dolphin-emu/Wii",
                    "E:/Emulation/saves/dolphin/Wii",
                    "E:/Emulation/saves/dolphin/GC",
                    "D:/Emulation/saves/dolphin/Wii",
                    "D:/Emulation/saves/dolphin/GC",
                    "C:/Emulation/saves/dolphin/Wii",
                    "C:/Emulation/saves/dolphin/GC",
                ],
                P.RETROPIE: ["~/.config/dolphin-emu/GC", "~/.config/dolphin-emu/Wii"],
                P.BATOCERA: ["/userdata/saves/dolphin"],
                P.LAKKA: ["/storage/dolphin/User/GC", "/storage/dolphin/User/Wii"],
                P.EMULATIONSTATION: [
                    "~/.config/dolphin-emu/GC",
                    "~/.config/dolphin-emu/Wii",
                    "~/Documents/Dolphin Emulator/GC",
                    "~/Documents/Dolphin Emulator/Wii",
                ],
                **_handheld(
                    "~/.var/app/org.DolphinEmu.dolphin-emu/data/dolphin-emu/GC",
                    "~/.var/app/org.DolphinEmu.dolphin-emu/data/dolphin-emu/Wii",
                    "~/.local/share/dolphin-emu/GC",
                    "~/.local/share/dolphin-emu/Wii",
                ),
                P.GENERIC: [
                    "~/.config/dolphin-emu/GC",
                    "~/.config/dolphin-emu/Wii",
                    "~/.local/share/dolphin-emu/GC",
                    "~/.local/share/dolphin-emu/Wii",
                    "~/Documents/Dolphin Emulator/GC",
                    "~/Documents/Dolphin Emulator/Wii",
                    "~/AppData/Roaming/Dolphin Emulator/GC",
                    "~/AppData/Roaming/Dolphin Emulator/Wii",
                    "E:/Emulation/saves/dolphin",
                    "E:/Emulation/saves/dolphin/GC",
                    "E:/Emulation/saves/dolphin/Wii",
                    "E:/Emulation/dolphin/User/GC",
                    "E:/Emulation/dolphin/User/Wii",
                ],
            },
            save_extensions=(".gci", ".sav", ".dat", ".raw", ".bin"),
            state_extensions=(".gcs", ".s01", ".s02", ".s03", ".s04", ".s05", ".s06", ".s07", ".s08"),
            config_paths=("~/.config/dolphin-emu/Dolphin.ini",),
        ),
        EmulatorDefinition(
            id="pcsx2",
            name="PCSX2",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/pcsx2/memcards",
                    "~/.var/app/net.pcsx2.PCSX2/config/PCSX2/memcards",
                    *_drives(
                        "Emulation/saves/pcsx2/memcards",
                        "Emulation/saves/PCSX2/memcards",
                        "Emulation/saves/pcsx2/saves",
                    ),
                ],
                P.RETROPIE: ["~/.config/PCSX2/memcards"],
                P.BATOCERA: ["/userdata/saves/pcsx2"],
                P.LAKKA: ["/storage/pcsx2/memcards"],
                P.EMULATIONSTATION: ["~/.config/PCSX2/memcards", "~/Documents/PCSX2/memcards"],
                **_handheld(
                    "~/.var/app/net.pcsx2.PCSX2/config/PCSX2/memcards",
                    "~/.config/PCSX2/memcards",
                ),
                P.GENERIC: [
                    "~/.config/PCSX2/memcards",
                    "~/Documents/PCSX2/memcards",
                    "E:/Emulation/saves/pcsx2",
                    "E:/Emulation/saves/pcsx2/memcards",
                    "E:/Emulation/PCSX2/memcards",
                ],
            },
            save_extensions=(".ps2", ".mcd", ".mcr", ".mc"),
            state_extensions=(".p2s", ".ps2state"),
            config_paths=("~/.config/PCSX2/PCSX2.ini",),
        ),
        EmulatorDefinition(
            id="rpcs3",
            name="RPCS3",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/rpcs3/saves",
                    "~/.var/app/net.rpcs3.RPCS3/config/rpcs3/saves",
                    *_drives(
                        "Emulation/saves/rpcs3/saves",
                        "Emulation/saves/RPCS3/saves",
                        "Emulation/RPCS3/dev_hdd0/home",
                    ),
                ],
                P.RETROPIE: ["~/.config/rpcs3/saves"],
                P.BATOCERA: ["/userdata/saves/rpcs3"],
                P.LAKKA: ["/storage/rpcs3/saves"],
                P.EMULATIONSTATION: ["~/.config/rpcs3/saves", "~/Documents/RPCS3/saves"],
                P.GENERIC: [
                    "~/.config/rpcs3/saves",
                    "~/Documents/RPCS3/saves",
                    "E:/Emulation/saves/rpcs3",
                    "E:/Emulation/RPCS3/saves",
                    "E:/Emulation/RPCS3/dev_hdd0/home",
                ],
            },
            save_extensions=(".bin", ".dat", ".sav"),
            state_extensions=(".dat", ".bin"),
            config_paths=("~/.config/rpcs3/config.yml",),
        ),
        EmulatorDefinition(
            id="yuzu",
            name="Yuzu",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/yuzu/nand/user/save",
                    "~/.var/app/org.yuzu_emu.yuzu/data/yuzu/nand/user/save",
                    *_drives(
                        "Emulation/saves/yuzu/nand/user/save",
                        "Emulation/saves/Yuzu/nand/user/save",
                        "Emulation/yuzu/user/save",
                        "Emulation/saves/yuzu/saves",
                    ),
                ],
                P.RETROPIE: ["~/.local/share/yuzu/nand/user/save"],
                P.BATOCERA: ["/userdata/saves/yuzu"],
                P.LAKKA: ["/storage/yuzu/saves"],
                P.EMULATIONSTATION: [
                    "~/.local/share/yuzu/nand/user/save",
                    "~/AppData/Roaming/yuzu/nand/user/save",
                ],
                P.GENERIC: [
                    "~/.local/share/yuzu/nand/user/save",
                    "~/AppData/Roaming/yuzu/nand/user/save",
                    "E:/Emulation/saves/yuzu",
                    "E:/Emulation/yuzu/user/save",
                    "E:/Emulation/yuzu/nand/user/save",
                ],
            },
            save_extensions=(".bin", ".dat", ".sav"),
            state_extensions=(".dat",),
            config_paths=("~/.config/yuzu/config.ini",),
        ),
        EmulatorDefinition(
            id="cemu",
            name="Cemu",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/Cemu/saves",
                    *_drives("Emulation/saves/Cemu/saves", "Emulation/saves/cemu/saves"),
                ],
                P.RETROPIE: ["~/.local/share/Cemu/saves"],
                P.BATOCERA: ["/userdata/saves/cemu"],
                P.LAKKA: ["/storage/cemu/saves"],
                P.EMULATIONSTATION: ["~/.local/share/Cemu/saves", "~/Documents/Cemu/saves"],
                P.GENERIC: [
                    "~/.local/share/Cemu/saves",
                    "~/Documents/Cemu/saves",
                    "E:/Emulation/saves/Cemu",
                    "E:/Emulation/Cemu/saves",
                ],
            },
            save_extensions=(".bin", ".dat", ".sav", ".srm"),
            state_extensions=(".sav", ".save"),
            config_paths=("~/.config/Cemu/settings.xml",),
        ),
        EmulatorDefinition(
            id="duckstation",
            name="DuckStation",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/duckstation/saves",
                    *_drives("Emulation/saves/duckstation/saves"),
                ],
                P.RETROPIE: ["~/.local/share/duckstation/saves"],
                P.BATOCERA: ["/userdata/saves/duckstation"],
                P.LAKKA: ["/storage/duckstation/saves"],
                P.EMULATIONSTATION: [
                    "~/.local/share/duckstation/saves",
                    "~/Documents/DuckStation/saves",
                ],
                P.GENERIC: [
                    "~/.local/share/duckstation/saves",
                    "~/Documents/DuckStation/saves",
                    "E:/Emulation/saves/duckstation",
                    "E:/Emulation/DuckStation/saves",
                ],
            },
            save_extensions=(".mcd", ".mcr", ".mc", ".srm", ".sav"),
            state_extensions=(".sav",),
            config_paths=("~/.config/duckstation/settings.ini",),
        ),
        EmulatorDefinition(
            id="ppsspp",
            name="PPSSPP",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/ppsspp/saves",
                    *_drives("Emulation/saves/ppsspp/saves", "Emulation/saves/PPSSPP/saves"),
                ],
                P.RETROPIE: ["~/.config/ppsspp/PSP/SAVEDATA"],
                P.BATOCERA: ["/userdata/saves/ppsspp"],
                P.LAKKA: ["/storage/ppsspp/PSP/SAVEDATA"],
                P.EMULATIONSTATION: [
                    "~/.config/ppsspp/PSP/SAVEDATA",
                    "~/Documents/PPSSPP/PSP/SAVEDATA",
                ],
                **_handheld(
                    "~/.var/app/org.ppsspp.PPSSPP/config/ppsspp/PSP/SAVEDATA",
                    "~/.config/ppsspp/PSP/SAVEDATA",
                ),
                P.GENERIC: [
                    "~/.config/ppsspp/PSP/SAVEDATA",
                    "~/Documents/PPSSPP/PSP/SAVEDATA",
                    "E:/Emulation/saves/ppsspp",
                    "E:/Emulation/PPSSPP/PSP/SAVEDATA",
                ],
            },
            save_extensions=(".bin", ".sav", ".dat"),
            state_extensions=(".ppst", ".sav"),
            config_paths=("~/.config/ppsspp/PSP/SYSTEM/ppsspp.ini",),
        ),
        EmulatorDefinition(
            id="melonds",
            name="melonDS",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/melonds/saves",
                    *_drives("Emulation/saves/melonds/saves"),
                ],
                P.BATOCERA: ["/userdata/saves/nds"],
                **_handheld(
                    "~/.var/app/net.kuribo64.melonDS/data/melonDS",
                    "~/.config/melonDS",
                ),
                P.GENERIC: [
                    "~/.config/melonDS",
                    "~/AppData/Roaming/melonDS",
                    "E:/Emulation/saves/melonds",
                ],
            },
            save_extensions=(".sav", ".dsv"),
            state_extensions=(".ml1", ".ml2", ".ml3", ".ml4", ".ml5", ".ml6", ".ml7", ".ml8"),
            config_paths=("~/.config/melonDS/melonDS.toml",),
        ),
        EmulatorDefinition(
            id="citra",
            name="Citra",
            default_paths={
                P.EMUDECK: [
                    "~/Emulation/saves/citra/saves",
                    *_drives("Emulation/saves/citra/saves"),
                ],
                P.BATOCERA: ["/userdata/saves/3ds/citra"],
                P.GENERIC: [
                    "~/.local/share/citra-emu/sdmc/Nintendo 3DS",
                    "~/AppData/Roaming/Citra/sdmc/Nintendo 3DS",
                    "E:/Emulation/saves/citra",
                ],
            },
            save_extensions=(".sav", ".bin"),
            state_extensions=(".cst",),
            config_paths=("~/.config/citra-emu/qt-config.ini",),
        ),
    ]


class EmulatorCatalog:
    """Ordered, id-keyed collection of :class:`EmulatorDefinition`."""

    def __init__(self, definitions: list[EmulatorDefinition] | None = None) -> None:
        self._entries: dict[str, EmulatorDefinition] = {}
        for definition in definitions or []:
            if definition.id in self._entries:
                raise ValueError(f"Duplicate emulator id: {definition.id}")
            self._entries[definition.id] = definition

    def __iter__(self) -> Iterator[EmulatorDefinition]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, emulator_id: object) -> bool:
        return emulator_id in self._entries

    def get(self, emulator_id: str) -> EmulatorDefinition | None:
        return self._entries.get(emulator_id)

    def ids(self) -> list[str]:
        return list(self._entries)

    def copy(self) -> EmulatorCatalog:
        """Deep copy; mutating the copy's candidate lists leaves this one intact."""
        return EmulatorCatalog(copy.deepcopy(list(self._entries.values())))

    def all_save_extensions(self) -> set[str]:
        exts: set[str] = set()
        for definition in self:
            exts.update(definition.save_extensions)
        return exts

    def owner_of_extension(self, ext: str) -> EmulatorDefinition | None:
        """First entry, in declaration order, whose save extensions include *ext*."""
        ext = ext.lower()
        for definition in self:
            if definition.claims_extension(ext):
                return definition
        return None


def default_catalog() -> EmulatorCatalog:
    """A fresh catalog built from the static table."""
    return EmulatorCatalog(_definitions())
