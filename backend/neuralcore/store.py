"""
Settings persistence — the host's key-value storage for the settings blob.

The blob is read once at startup and written after user edits and after every
successful failover. Stores hold plain JSON-compatible values keyed by name.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from neuralcore.config import SETTINGS_KEY, STATE_DIR
from neuralcore.profile import OrchestratorSettings, load_profile

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class SettingsStore(ABC):
    """Minimal named-blob storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore(SettingsStore):
    """In-process store. Values are round-tripped through JSON like the file store."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, str] = {
            key: json.dumps(value) for key, value in (initial or {}).items()
        }
        self.writes = 0

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)
        self.writes += 1


class JsonFileStore(SettingsStore):
    """One ``<key>.json`` file per key under a state directory."""

    def __init__(self, directory: Path = STATE_DIR):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            return None

    def set(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(value, indent=2))
        tmp.replace(path)


# ── Settings blob ──

def load_settings(store: SettingsStore,
                  defaults: Optional[OrchestratorSettings] = None) -> OrchestratorSettings:
    """Read the settings blob, falling back to the bootstrap profile."""
    base = defaults if defaults is not None else load_profile()
    raw = store.get(SETTINGS_KEY)
    if raw is None:
        logger.info("No stored settings — using profile defaults")
        return base
    if not isinstance(raw, dict):
        logger.warning("Stored settings blob is not a mapping — using profile defaults")
        return base
    return OrchestratorSettings.from_dict(raw, defaults=base)


def save_settings(store: SettingsStore, settings: OrchestratorSettings) -> None:
    store.set(SETTINGS_KEY, settings.to_dict())
    logger.debug("Settings saved (active=%s)", settings.active_backend.value)
