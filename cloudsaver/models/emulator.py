"""Data model for emulator catalog entries and detection results."""

from __future__ import annotations

from dataclasses import dataclass, field

from cloudsaver.models.platform import PlatformType


@dataclass
class EmulatorDefinition:
    """Static description of an emulator and where it keeps its saves."""

    id: str
    """Stable lowercase identifier (e.g. 'retroarch')."""

    name: str
    """Display name of the emulator (e.g. 'RetroArch')."""

    default_paths: dict[PlatformType, list[str]] = field(default_factory=dict)
    """Candidate save directories per platform; may contain ``~`` and drive letters."""

    save_extensions: tuple[str, ...] = ()
    """Lowercase save-data suffixes including the leading dot."""

    state_extensions: tuple[str, ...] = ()
    """Lowercase save-state suffixes including the leading dot."""

    config_paths: tuple[str, ...] = ()
    """The emulator's own configuration files (informational only)."""

    seeded_from_generic: set[PlatformType] = field(default_factory=set, repr=False)
    """Platform types whose list began as a copy of the generic list."""

    def candidates_for(self, platform_type: PlatformType) -> list[str]:
        """Candidate paths for *platform_type*, falling back to the generic list."""
        if platform_type in self.default_paths:
            return self.default_paths[platform_type]
        return self.default_paths.get(PlatformType.GENERIC, [])

    def add_candidate(self, platform_type: PlatformType, path: str) -> bool:
        """Append *path* to the candidates of *platform_type* unless already listed.

        A platform without its own list starts from a copy of the generic
        list, so a discovery never hides the generic candidates.  Later
        generic additions are mirrored into every list seeded that way.
        """
        if platform_type not in self.default_paths:
            generic = self.default_paths.get(PlatformType.GENERIC, [])
            self.default_paths[platform_type] = list(generic)
            if platform_type != PlatformType.GENERIC:
                self.seeded_from_generic.add(platform_type)
        paths = self.default_paths[platform_type]
        if path in paths:
            return False
        paths.append(path)
        if platform_type == PlatformType.GENERIC:
            for seeded in self.seeded_from_generic:
                if path not in self.default_paths[seeded]:
                    self.default_paths[seeded].append(path)
        return True

    def claims_extension(self, ext: str) -> bool:
        return ext.lower() in self.save_extensions


@dataclass
class DetectedEmulator:
    """An emulator with at least one save directory present on disk."""

    id: str
    name: str
    save_paths: list[str]
    """Expanded save directories verified to exist; never empty."""

    save_extensions: tuple[str, ...] = ()
    state_extensions: tuple[str, ...] = ()
    config_paths: tuple[str, ...] = ()
    default_paths: dict[PlatformType, list[str]] = field(default_factory=dict)

    @classmethod
    def from_definition(
        cls, definition: EmulatorDefinition, save_paths: list[str],
    ) -> DetectedEmulator:
        if not save_paths:
            raise ValueError(f"{definition.id}: a detected emulator needs at least one save path")
        return cls(
            id=definition.id,
            name=definition.name,
            save_paths=list(save_paths),
            save_extensions=definition.save_extensions,
            state_extensions=definition.state_extensions,
            config_paths=definition.config_paths,
            default_paths={k: list(v) for k, v in definition.default_paths.items()},
        )
