"""Application configuration management."""

import json
import os
import platform
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from cloudsaver.errors import ConfigError

PLATFORM_VALUES = (
    "emudeck",
    "retropie",
    "batocera",
    "lakka",
    "emulationstation",
    "bazzite",
    "steamdeck",
    "generic",
)
LOG_LEVEL_VALUES = ("debug", "verbose", "info", "warn", "error")


def default_data_dir() -> Path:
    """Return the default configuration directory for the application."""
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / "CloudSaver"
    elif platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "CloudSaver"
    else:
        return Path.home() / ".config" / "cloudsaver"


def _default_config() -> dict[str, Any]:
    return {
        "cloud_provider": None,
        "sync_root": str(Path.home() / ".cloudsaver"),
        "log_level": "info",
        "custom_paths": {},
        "emulator_paths": {},
        "scan_dirs": [],
        "ignore_dirs": [],
        "platform": None,
        "auto_sync": False,
        "last_sync": None,
    }


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

def _optional_str(value: Any) -> bool:
    return value is None or isinstance(value, str)


def _str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _str_dict(value: Any) -> bool:
    return isinstance(value, dict) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    )


def _path_lists(value: Any) -> bool:
    return isinstance(value, dict) and all(
        isinstance(k, str) and _str_list(v) for k, v in value.items()
    )


_SCHEMA: dict[str, tuple[Callable[[Any], bool], str]] = {
    "cloud_provider": (_optional_str, "a string"),
    "sync_root": (lambda v: isinstance(v, str) and bool(v), "a non-empty string"),
    "log_level": (lambda v: v in LOG_LEVEL_VALUES, f"one of {', '.join(LOG_LEVEL_VALUES)}"),
    "custom_paths": (_str_dict, "a mapping of strings"),
    "emulator_paths": (_path_lists, "a mapping of emulator id to a list of paths"),
    "scan_dirs": (_str_list, "a list of paths"),
    "ignore_dirs": (_str_list, "a list of paths"),
    "platform": (lambda v: v is None or v in PLATFORM_VALUES, f"one of {', '.join(PLATFORM_VALUES)}"),
    "auto_sync": (lambda v: isinstance(v, bool), "true or false"),
    "last_sync": (_optional_str, "an ISO timestamp"),
}


def valid_keys() -> list[str]:
    return list(_SCHEMA)


def validate(key: str, value: Any) -> None:
    """Raise :class:`ConfigError` unless *value* is acceptable for *key*."""
    if key not in _SCHEMA:
        raise ConfigError(f"Invalid configuration key: {key}", {"key": key})
    check, expected = _SCHEMA[key]
    if not check(value):
        raise ConfigError(
            f"Invalid value for {key}: expected {expected}",
            {"key": key, "value": value},
        )


def parse_value(key: str, raw: str) -> Any:
    """Convert a command-line string into the type *key* expects."""
    if key not in _SCHEMA:
        raise ConfigError(f"Invalid configuration key: {key}", {"key": key})
    if key == "auto_sync":
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
        raise ConfigError(f"Invalid value for {key}: expected true or false", {"key": key})
    if key in ("custom_paths", "emulator_paths", "scan_dirs", "ignore_dirs"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON for {key}: {e}", {"key": key}) from e
    if key in ("cloud_provider", "platform", "last_sync") and raw.strip().lower() in ("", "none", "null"):
        return None
    if key in ("log_level", "platform"):
        return raw.strip().lower()
    return raw


# ---------------------------------------------------------------------------
# Config store
# ---------------------------------------------------------------------------

class Config:
    """Singleton application configuration backed by a JSON file."""

    _instance: Optional["Config"] = None
    _data: dict[str, Any]
    _path: Path
    _data_dir: Path

    def __new__(cls, config_path: Optional[Path] = None) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if self._initialized:  # type: ignore[has-type]
            return
        self._initialized = True
        self._data_dir = config_path.parent if config_path else default_data_dir()
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._path = config_path or (self._data_dir / "config.json")
        self._data = _default_config()
        self._load()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def cloud_provider(self) -> str | None:
        return self._data.get("cloud_provider")

    @property
    def sync_root(self) -> str:
        return self._data.get("sync_root") or _default_config()["sync_root"]

    @property
    def log_level(self) -> str:
        return self._data.get("log_level", "info")

    @property
    def custom_paths(self) -> dict[str, str]:
        return dict(self._data.get("custom_paths", {}))

    @property
    def scan_dirs(self) -> list[str]:
        return list(self._data.get("scan_dirs", []))

    @property
    def ignore_dirs(self) -> list[str]:
        return list(self._data.get("ignore_dirs", []))

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        validate(key, value)
        self._data[key] = value
        self._save()
        logger.debug("Set config value for {}: {!r}", key, value)

    def set_many(self, values: dict[str, Any]) -> None:
        for key, value in values.items():
            validate(key, value)
        self._data.update(values)
        self._save()

    def reset_values(self) -> None:
        """Restore every key to its default and persist."""
        self._data = _default_config()
        self._save()
        logger.info("Configuration reset to defaults")

    def get_emulator_paths(self, emulator_id: str) -> list[str]:
        """Get user-configured custom save paths for a specific emulator."""
        return list(self._data.get("emulator_paths", {}).get(emulator_id, []))

    def add_emulator_path(self, emulator_id: str, path: str) -> bool:
        """Add *path* for *emulator_id*; returns False if it was already present."""
        paths = dict(self._data.get("emulator_paths", {}))
        current = list(paths.get(emulator_id, []))
        if path in current:
            return False
        current.append(path)
        paths[emulator_id] = current
        self.set("emulator_paths", paths)
        return True

    def remove_emulator_path(self, emulator_id: str, path: str) -> bool:
        """Remove *path* for *emulator_id*; returns False if it was not configured."""
        paths = dict(self._data.get("emulator_paths", {}))
        current = list(paths.get(emulator_id, []))
        if path not in current:
            return False
        current.remove(path)
        if current:
            paths[emulator_id] = current
        else:
            del paths[emulator_id]
        self.set("emulator_paths", paths)
        return True

    def add_to_list(self, key: str, value: str) -> bool:
        """Append *value* to the list setting *key* (``scan_dirs`` / ``ignore_dirs``)."""
        current = list(self._data.get(key, []))
        if value in current:
            return False
        current.append(value)
        self.set(key, current)
        return True

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                saved = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load config, using defaults: {}", e)
            return
        if not isinstance(saved, dict):
            logger.warning("Config file {} is not a JSON object, using defaults", self._path)
            return
        for key, value in saved.items():
            try:
                validate(key, value)
            except ConfigError as e:
                logger.warning("Ignoring stored config value: {}", e)
                continue
            self._data[key] = value
        logger.debug("Configuration loaded from {}", self._path)

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=4, ensure_ascii=False)
        except OSError as e:
            logger.error("Failed to save config: {}", e)
            raise ConfigError(f"Failed to save config: {e}", {"path": str(self._path)}) from e

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None
