"""Command-line interface: ``cloudsaver detect | paths | config | sync``."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from cloudsaver import __version__
from cloudsaver.catalog.emulators import default_catalog
from cloudsaver.config import Config, parse_value, valid_keys
from cloudsaver.core.path_resolver import to_absolute
from cloudsaver.core.rclone import RcloneManager
from cloudsaver.core.scanner import Scanner
from cloudsaver.core.sync import SyncDirection, SyncManager
from cloudsaver.errors import AppError
from cloudsaver.logger import set_level, setup_logger
from cloudsaver.models.emulator import DetectedEmulator
from cloudsaver.models.platform import PlatformDescriptor
from cloudsaver.models.save_file import format_size, records_from_paths

# How many file names to show per emulator before summarising.
SAMPLE_COUNT = 3


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _print_platform(platform: PlatformDescriptor) -> None:
    print(f"Detected platform: {platform.name}")
    print(f"   Base directory: {platform.base_dir}")
    if platform.rom_dir:
        print(f"   ROM directory: {platform.rom_dir}")
    if platform.save_dir:
        print(f"   Save directory: {platform.save_dir}")


def _print_samples(emulator_id: str, files: list[Path]) -> None:
    for record in records_from_paths(emulator_id, files[:SAMPLE_COUNT]):
        print(f"     - {record.path.name} ({format_size(record.size)})")
    if len(files) > SAMPLE_COUNT:
        print(f"     - ...and {len(files) - SAMPLE_COUNT} more")


def _print_emulators(emulators: dict[str, DetectedEmulator]) -> None:
    print(f"Detected {len(emulators)} emulators:")
    for emulator in emulators.values():
        print(f"\n   {emulator.name}")
        print("   Save paths:")
        for p in emulator.save_paths:
            print(f"     - {p}")


def _format_value(value: Any) -> str:
    if value is None:
        return "(not set)"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2)
    return str(value)


# ---------------------------------------------------------------------------
# detect
# ---------------------------------------------------------------------------

async def _detect(args: argparse.Namespace, config: Config) -> int:
    scanner = Scanner(config)
    print("Detecting emulation setup...")
    platform = await scanner.detect_platform(force_emudeck=args.force_emudeck)
    _print_platform(platform)

    if args.deep_scan:
        directory = to_absolute(args.deep_scan)
        print(f"\nPerforming deep scan of: {directory}")
        if not Path(directory).is_dir():
            print(f"Directory not found: {directory}")
            return 1
        results = await scanner.deep_scan(directory)
        if not results:
            print("No save files found in deep scan")
        else:
            print(f"Deep scan found save files for {len(results)} emulators:")
            for emulator_id, files in results.items():
                print(f"\n   {emulator_id}: {len(files)} save files")
                _print_samples(emulator_id, files)
        return 0

    print("\nDetecting emulators...")
    emulators = await scanner.detect_emulators(platform)
    if not emulators:
        print("No emulators detected")
        return 0
    _print_emulators(emulators)

    if args.save_files:
        saves = await scanner.scan_saves()
        for emulator_id, files in saves.items():
            name = emulators[emulator_id].name
            if files:
                print(f"\n   {name}: found {len(files)} save files")
                _print_samples(emulator_id, files)
            else:
                print(f"\n   {name}: no save files found")

    print("\nDetection complete")
    return 0


def cmd_detect(args: argparse.Namespace, config: Config) -> int:
    return asyncio.run(_detect(args, config))


# ---------------------------------------------------------------------------
# paths
# ---------------------------------------------------------------------------

def cmd_paths_add(args: argparse.Namespace, config: Config) -> int:
    path = to_absolute(args.path)
    if args.emulator not in default_catalog():
        print(f"Warning: {args.emulator} is not a known emulator id")
    if not Path(path).exists():
        print(f"Path does not exist, creating: {path}")
        Path(path).mkdir(parents=True, exist_ok=True)
    if config.add_emulator_path(args.emulator, path):
        print(f"Added path for {args.emulator}: {path}")
    else:
        print(f"Path already exists for {args.emulator}: {path}")
    return 0


def cmd_paths_remove(args: argparse.Namespace, config: Config) -> int:
    path = to_absolute(args.path)
    if not config.remove_emulator_path(args.emulator, path):
        print(f"Path not found for {args.emulator}: {path}")
        return 1
    print(f"Removed path for {args.emulator}: {path}")
    return 0


def cmd_paths_list(args: argparse.Namespace, config: Config) -> int:
    paths = config.get("emulator_paths", {})
    if not paths:
        print("No custom paths configured")
        print("   Use 'cloudsaver paths add <emulator> <path>' to add a path")
    for emulator_id, entries in paths.items():
        print(f"{emulator_id}:")
        for p in entries:
            suffix = "" if Path(p).exists() else " (not found)"
            print(f"   - {p}{suffix}")
    for label, key in (("Scan directories", "scan_dirs"), ("Ignored directories", "ignore_dirs")):
        entries = config.get(key, [])
        if entries:
            print(f"{label}:")
            for p in entries:
                print(f"   - {p}")
    return 0


def cmd_paths_scan_dir(args: argparse.Namespace, config: Config) -> int:
    directory = to_absolute(args.directory)
    if not Path(directory).exists():
        print(f"Directory does not exist, creating: {directory}")
        Path(directory).mkdir(parents=True, exist_ok=True)
    if config.add_to_list("scan_dirs", directory):
        print(f"Added scan directory: {directory}")
    else:
        print(f"Directory already in scan list: {directory}")
    return 0


def cmd_paths_ignore_dir(args: argparse.Namespace, config: Config) -> int:
    directory = to_absolute(args.directory)
    if config.add_to_list("ignore_dirs", directory):
        print(f"Added ignore directory: {directory}")
    else:
        print(f"Directory already in ignore list: {directory}")
    return 0


async def _auto_detect(args: argparse.Namespace, config: Config) -> int:
    scanner = Scanner(config)
    platform = await scanner.detect_platform(force_emudeck=args.force_emudeck)
    print(f"Detected platform: {platform.name}")
    emulators = await scanner.detect_emulators(platform)
    if not emulators:
        print("No emulators detected")
        return 0
    _print_emulators(emulators)

    if args.add:
        paths = dict(config.get("emulator_paths", {}))
        for emulator_id, emulator in emulators.items():
            current = list(paths.get(emulator_id, []))
            for p in emulator.save_paths:
                if p not in current:
                    current.append(p)
            paths[emulator_id] = current
        config.set_many({"platform": platform.type.value, "emulator_paths": paths})
        print("\nSaved detected paths to configuration")
    return 0


def cmd_paths_auto_detect(args: argparse.Namespace, config: Config) -> int:
    return asyncio.run(_auto_detect(args, config))


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

def cmd_config_get(args: argparse.Namespace, config: Config) -> int:
    if args.key is None:
        print("Current configuration:")
        for key, value in config.to_dict().items():
            print(f"{key}: {_format_value(value)}")
        return 0
    if args.key not in valid_keys():
        print(f"Invalid configuration key: {args.key}")
        print(f"Valid keys: {', '.join(valid_keys())}")
        return 1
    print(f"{args.key}: {_format_value(config.get(args.key))}")
    return 0


def cmd_config_set(args: argparse.Namespace, config: Config) -> int:
    value = parse_value(args.key, args.value)
    config.set(args.key, value)
    print(f"Set {args.key} to {_format_value(value)}")
    return 0


def cmd_config_reset(args: argparse.Namespace, config: Config) -> int:
    config.reset_values()
    print("Configuration reset to defaults")
    return 0


# ---------------------------------------------------------------------------
# sync
# ---------------------------------------------------------------------------

def _select(emulators: dict[str, DetectedEmulator], wanted: str | None) -> dict[str, DetectedEmulator]:
    if not wanted:
        return emulators
    wanted = wanted.lower()
    return {
        eid: emu for eid, emu in emulators.items()
        if eid.lower() == wanted or emu.name.lower() == wanted
    }


def cmd_sync(args: argparse.Namespace, config: Config) -> int:
    manager = SyncManager(config, RcloneManager())
    provider = manager.resolve_provider(args.provider)

    scanner = Scanner(config)
    emulators = asyncio.run(scanner.detect_emulators())
    selected = _select(emulators, args.emulator)
    if not selected:
        if args.emulator:
            print(f"No emulator found matching \"{args.emulator}\"")
        else:
            print("No emulators detected")
        return 1

    direction = SyncDirection(args.direction)
    print(f"Syncing {len(selected)} emulator(s) via {provider} ({direction.value})")
    if args.dry_run:
        print("Dry run - no files will be changed")
    result = manager.sync_all(selected, direction, provider, args.dry_run, args.verbose)
    for error in result.errors:
        print(f"   {error}")
    print(f"Sync complete: {result.synced} synced, {result.failed} failed")
    return 0 if result.ok else 1


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cloudsaver", description="Universal emulation save sync")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    ap.add_argument("--debug", action="store_true", help="Enable debug output (more detailed than verbose)")
    sub = ap.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Detect emulation platforms and emulators")
    detect.add_argument("--save-files", action="store_true", help="Also list save files (may take longer)")
    detect.add_argument("--deep-scan", metavar="DIR", help="Deep scan a directory for save files")
    detect.add_argument("--force-emudeck", action="store_true", help="Treat this host as EmuDeck")
    detect.set_defaults(func=cmd_detect)

    paths = sub.add_parser("paths", help="Manage emulator save paths")
    paths_sub = paths.add_subparsers(dest="paths_command", required=True)

    add = paths_sub.add_parser("add", help="Add a custom save path for an emulator")
    add.add_argument("emulator", help="Emulator id (e.g. retroarch, dolphin, pcsx2)")
    add.add_argument("path", help="Save directory")
    add.set_defaults(func=cmd_paths_add)

    remove = paths_sub.add_parser("remove", help="Remove a custom save path")
    remove.add_argument("emulator")
    remove.add_argument("path")
    remove.set_defaults(func=cmd_paths_remove)

    paths_sub.add_parser("list", help="List configured save paths").set_defaults(func=cmd_paths_list)

    scan_dir = paths_sub.add_parser("scan-dir", help="Add a directory to scan for emulator folders")
    scan_dir.add_argument("directory")
    scan_dir.set_defaults(func=cmd_paths_scan_dir)

    ignore_dir = paths_sub.add_parser("ignore-dir", help="Add a directory to skip during deep scans")
    ignore_dir.add_argument("directory")
    ignore_dir.set_defaults(func=cmd_paths_ignore_dir)

    auto = paths_sub.add_parser("auto-detect", help="Detect save paths and optionally store them")
    auto.add_argument("--add", action="store_true", help="Add detected paths to the configuration")
    auto.add_argument("--force-emudeck", action="store_true", help="Treat this host as EmuDeck")
    auto.set_defaults(func=cmd_paths_auto_detect)

    cfg = sub.add_parser("config", help="Manage configuration settings")
    cfg_sub = cfg.add_subparsers(dest="config_command", required=True)
    get = cfg_sub.add_parser("get", help="Show one or all configuration values")
    get.add_argument("key", nargs="?")
    get.set_defaults(func=cmd_config_get)
    set_ = cfg_sub.add_parser("set", help="Set a configuration value")
    set_.add_argument("key")
    set_.add_argument("value")
    set_.set_defaults(func=cmd_config_set)
    cfg_sub.add_parser("reset", help="Reset configuration to defaults").set_defaults(func=cmd_config_reset)

    sync = sub.add_parser("sync", help="Sync emulator save files with an rclone remote")
    sync.add_argument("--provider", help="rclone remote to use (defaults to cloud_provider)")
    sync.add_argument("--emulator", help="Only sync this emulator (id or name)")
    sync.add_argument(
        "--direction",
        choices=[d.value for d in SyncDirection],
        default=SyncDirection.UPLOAD.value,
    )
    sync.add_argument("--dry-run", action="store_true", help="Show what would change without syncing")
    sync.set_defaults(func=cmd_sync)

    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = Config()
    setup_logger(config.data_dir / "logs", config.log_level)
    if args.debug:
        set_level("debug")
    elif args.verbose:
        set_level("verbose")
    logger.info("Executing command: {}", args.command)

    try:
        return args.func(args, config)
    except AppError as e:
        logger.error("{} ({})", e.message, e.code)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.log("FATAL", "Unexpected error: {}", e)
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
