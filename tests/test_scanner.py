import asyncio

from cloudsaver.core.emulator_detector import EmulatorDetector
from cloudsaver.core.scanner import Scanner
from cloudsaver.models.platform import PlatformDescriptor, PlatformType


def generic(base):
    return PlatformDescriptor(type=PlatformType.GENERIC, name="Generic", base_dir=str(base))


def test_custom_paths_create_detected_entries(config, tmp_path, make_tree):
    make_tree(tmp_path, "mine/dolphin", ".config/retroarch/saves", "mine/ra")
    config.set("emulator_paths", {
        "dolphin": [str(tmp_path / "mine" / "dolphin")],
        "retroarch": [str(tmp_path / "mine" / "ra"), str(tmp_path / "nowhere")],
        "unknown-emu": [str(tmp_path / "mine")],
    })
    scanner = Scanner(config, home=str(tmp_path))

    found = asyncio.run(scanner.detect_emulators(generic(tmp_path)))

    assert found["dolphin"].save_paths == [str(tmp_path / "mine" / "dolphin")]
    assert found["dolphin"].save_extensions[0] == ".gci"
    assert found["retroarch"].save_paths == [
        str(tmp_path / ".config" / "retroarch" / "saves"),
        str(tmp_path / "mine" / "ra"),
    ]
    assert "unknown-emu" not in found


def test_custom_paths_leave_detector_records_untouched(config, tmp_path, make_tree):
    make_tree(tmp_path, ".config/retroarch/saves", "mine/ra")
    config.set("emulator_paths", {"retroarch": [str(tmp_path / "mine" / "ra")]})
    detector = EmulatorDetector(home=str(tmp_path))
    scanner = Scanner(config, emulator_detector=detector, home=str(tmp_path))

    found = asyncio.run(scanner.detect_emulators(generic(tmp_path)))

    assert found["retroarch"].save_paths[-1] == str(tmp_path / "mine" / "ra")
    assert detector.get_emulator("retroarch").save_paths == [
        str(tmp_path / ".config" / "retroarch" / "saves"),
    ]


def test_scan_dirs_feed_the_heuristic(config, tmp_path, make_tree):
    root = make_tree(tmp_path / "extra", "saves/pcsx2/memcards")
    config.set("scan_dirs", [str(root)])
    scanner = Scanner(config, home=str(tmp_path))

    found = asyncio.run(scanner.detect_emulators(generic(tmp_path)))

    assert str(root / "saves" / "pcsx2" / "memcards") in found["pcsx2"].save_paths


def test_scan_saves_over_detected(config, tmp_path, make_tree):
    make_tree(tmp_path, ".config/retroarch/saves/zelda.srm", ".config/retroarch/saves/notes.txt")
    scanner = Scanner(config, home=str(tmp_path))
    asyncio.run(scanner.detect_emulators(generic(tmp_path)))

    saves = asyncio.run(scanner.scan_saves())

    assert [p.name for p in saves["retroarch"]] == ["zelda.srm"]


def test_deep_scan_honours_ignore_dirs(config, tmp_path, make_tree):
    make_tree(tmp_path, "lib/a.srm", "lib/cache/b.srm")
    config.set("ignore_dirs", [str(tmp_path / "lib" / "cache")])
    results = asyncio.run(Scanner(config, home=str(tmp_path)).deep_scan(str(tmp_path / "lib")))
    assert [p.name for p in results["retroarch"]] == ["a.srm"]


def test_force_emudeck(config, tmp_path):
    scanner = Scanner(config, home=str(tmp_path))
    platform = asyncio.run(scanner.detect_platform(force_emudeck=True))
    assert platform.type == PlatformType.EMUDECK
    assert scanner.platform is platform
