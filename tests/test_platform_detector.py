import asyncio

from cloudsaver.catalog.platforms import FORCE_EMUDECK_ENV, GENERIC_NAME
from cloudsaver.core.platform_detector import PlatformDetector
from cloudsaver.models.platform import PlatformType

HOME = "/home/tester"
WIN_HOME = "C:\\Users\\tester"


def detect(fs, env=None, system="Linux", home=HOME):
    detector = PlatformDetector(fs=fs, env=env or {}, system=system, home=home)
    return asyncio.run(detector.detect_platform())


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------

def test_nothing_found_falls_back_to_generic(fake_fs):
    platform = detect(fake_fs())
    assert platform.type == PlatformType.GENERIC
    assert platform.name == GENERIC_NAME
    assert platform.base_dir == "/home/tester/.local/share/cloudsaver"
    assert platform.rom_dir is None and platform.save_dir is None


def test_retropie_marker(fake_fs):
    platform = detect(fake_fs(["/opt/retropie/roms"]))
    assert platform.type == PlatformType.RETROPIE
    assert platform.base_dir == "/opt/retropie"
    assert platform.rom_dir == "/opt/retropie/roms"
    assert platform.save_dir is None


def test_batocera_checked_before_lakka(fake_fs):
    platform = detect(fake_fs(["/userdata", "/etc/lakka-version"]))
    assert platform.type == PlatformType.BATOCERA


def test_lakka_uses_fixed_base(fake_fs):
    platform = detect(fake_fs(["/etc/lakka-version", "/storage/savefiles"]))
    assert platform.type == PlatformType.LAKKA
    assert platform.base_dir == "/storage"
    assert platform.save_dir == "/storage/savefiles"


def test_emulationstation_home_marker(fake_fs):
    platform = detect(fake_fs(["/home/tester/.emulationstation"]))
    assert platform.type == PlatformType.EMULATIONSTATION
    assert platform.base_dir == "/home/tester/.emulationstation"


def test_bazzite_from_os_release(fake_fs):
    fs = fake_fs(files={"/etc/os-release": 'NAME="Bazzite"\nID=bazzite\n'})
    platform = detect(fs)
    assert platform.type == PlatformType.BAZZITE
    assert platform.base_dir == "/home/tester/Emulation"


def test_steamos_from_os_release(fake_fs):
    fs = fake_fs(files={"/etc/os-release": 'NAME="SteamOS"\n'})
    assert detect(fs).type == PlatformType.STEAMDECK


def test_os_release_ignored_off_linux(fake_fs):
    fs = fake_fs(files={"/etc/os-release": 'NAME="SteamOS"\n'})
    assert detect(fs, system="Darwin").type == PlatformType.GENERIC


def test_generic_uses_existing_emulation_dir(fake_fs):
    platform = detect(fake_fs(["/home/tester/Emulation/roms"]))
    assert platform.type == PlatformType.GENERIC
    assert platform.base_dir == "/home/tester/Emulation"
    assert platform.rom_dir == "/home/tester/Emulation/roms"
    assert platform.save_dir is None


def test_failing_probes_never_raise(fake_fs):
    platform = detect(fake_fs(broken=True))
    assert platform.type == PlatformType.GENERIC
    assert platform.base_dir == "/home/tester/.local/share/cloudsaver"


# ---------------------------------------------------------------------------
# EmuDeck and the override flag
# ---------------------------------------------------------------------------

def test_emudeck_marker_on_linux(fake_fs):
    fs = fake_fs(["/home/tester/.emudeck", "/home/tester/Emulation/saves"])
    platform = detect(fs)
    assert platform.type == PlatformType.EMUDECK
    assert platform.name == "EmuDeck"
    assert platform.base_dir == "/home/tester/.emudeck"
    assert platform.save_dir == "/home/tester/Emulation/saves"


def test_forced_emudeck_beats_retropie(fake_fs):
    platform = detect(fake_fs(["/opt/retropie"]), env={FORCE_EMUDECK_ENV: "true"})
    assert platform.type == PlatformType.EMUDECK
    assert platform.name == "EmuDeck (Forced)"
    assert platform.base_dir == "/home/tester/Emulation"


def test_real_emudeck_beats_forced(fake_fs):
    fs = fake_fs(["/home/tester/emudeck"])
    platform = detect(fs, env={FORCE_EMUDECK_ENV: "1"})
    assert platform.name == "EmuDeck"
    assert platform.base_dir == "/home/tester/emudeck"


def test_empty_force_flag_is_ignored(fake_fs):
    platform = detect(fake_fs(["/opt/retropie"]), env={FORCE_EMUDECK_ENV: ""})
    assert platform.type == PlatformType.RETROPIE


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------

def test_windows_marker_with_emulation_folder(fake_fs):
    fs = fake_fs(["C:\\EmuDeck", "E:\\Emulation\\saves"])
    platform = detect(fs, system="Windows", home=WIN_HOME)
    assert platform.type == PlatformType.EMUDECK
    assert platform.name == "EmuDeck (Windows)"
    assert platform.base_dir == "E:\\Emulation"
    assert platform.save_dir == "E:\\Emulation\\saves"
    assert platform.rom_dir is None


def test_windows_marker_with_script(fake_fs):
    fs = fake_fs(["D:\\EmuDeck\\EmuDeck.ps1"])
    platform = detect(fs, system="Windows", home=WIN_HOME)
    assert platform.name == "EmuDeck (Windows)"
    assert platform.base_dir == "D:\\EmuDeck"


def test_windows_emudeck_structure(fake_fs):
    fs = fake_fs(["D:\\Emulation\\roms", "D:\\Emulation\\saves"])
    platform = detect(fs, system="Windows", home=WIN_HOME)
    assert platform.type == PlatformType.EMUDECK
    assert platform.base_dir == "D:\\Emulation"
    assert platform.rom_dir == "D:\\Emulation\\roms"


def test_windows_single_structure_folder_is_generic(fake_fs):
    fs = fake_fs(["D:\\Emulation\\roms"])
    platform = detect(fs, system="Windows", home=WIN_HOME)
    assert platform.type == PlatformType.GENERIC
    assert platform.base_dir == "D:\\Emulation"
    assert platform.rom_dir == "D:\\Emulation\\roms"


def test_windows_default_generic_base(fake_fs):
    platform = detect(fake_fs(), system="Windows", home=WIN_HOME)
    assert platform.type == PlatformType.GENERIC
    assert platform.base_dir == "C:\\Users\\tester\\Emulation"
