"""Detection engine and sync services."""

from __future__ import annotations

from cloudsaver.core.emulator_detector import EmulatorDetector
from cloudsaver.core.platform_detector import PlatformDetector
from cloudsaver.core.save_finder import deep_scan_directory, find_save_files
from cloudsaver.models.emulator import DetectedEmulator
from cloudsaver.models.platform import PlatformDescriptor

__all__ = [
    "EmulatorDetector",
    "PlatformDetector",
    "deep_scan_directory",
    "detect_emulators",
    "detect_platform",
    "find_save_files",
]


async def detect_platform() -> PlatformDescriptor:
    """Detect the current platform with a freshly built detector."""
    return await PlatformDetector().detect_platform()


async def detect_emulators(platform: PlatformDescriptor) -> dict[str, DetectedEmulator]:
    """Detect emulators for *platform* against a fresh catalog."""
    return await EmulatorDetector().detect_emulators(platform)
