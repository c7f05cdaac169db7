"""Runtime settings for the command registry.

Centralizes the knobs the registry components read at construction time
(history bound, result cap, shortcut sentinel, collision policy). Defaults come
from ``palette.config.settings`` which honours environment overrides.

Settings can be persisted to a small JSON file so an embedding application can
keep user preferences between sessions. Only settings are stored here; the
command set and execution history are never persisted.

Design principles (shared with the rest of the service layer):
- Explicit schema with version field to allow future migrations.
- Graceful fallback: corrupt or incompatible files produce defaults instead of raising.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

from ..config import settings as defaults

__all__ = [
    "RegistrySettings",
    "COLLISION_POLICIES",
    "SETTINGS_VERSION",
    "load_settings",
    "save_settings",
]

_log = logging.getLogger(__name__)

SETTINGS_VERSION = 1
DEFAULT_FILENAME = "palette_settings.json"
COLLISION_POLICIES = ("replace", "reject")


@dataclass
class RegistrySettings:
    """Registry configuration.

    Attributes:
        history_limit: Maximum number of entries kept by the history ledger.
        search_limit: Maximum number of commands returned by ``search``.
        shortcut_prefix: Sentinel marking shortcut-style input (``":d"``).
        collision_policy: ``"replace"`` lets a later registration win over an
            existing name or alias; ``"reject"`` raises ``InvalidCommandError``.
        shortcut_alias_prefix: When True, shortcut queries with no exact alias
            hit fall back to alias-prefix matches (":do" finds ":doc").
        log_capacity: Ring buffer size of the in-process logging service.
    """

    version: int = SETTINGS_VERSION
    history_limit: int = defaults.DEFAULT_HISTORY_LIMIT
    search_limit: int = defaults.DEFAULT_SEARCH_LIMIT
    shortcut_prefix: str = defaults.DEFAULT_SHORTCUT_PREFIX
    collision_policy: str = defaults.DEFAULT_COLLISION_POLICY
    shortcut_alias_prefix: bool = defaults.DEFAULT_SHORTCUT_ALIAS_PREFIX
    log_capacity: int = defaults.DEFAULT_LOG_CAPACITY

    def __post_init__(self) -> None:
        if self.collision_policy not in COLLISION_POLICIES:
            raise ValueError(
                f"collision_policy must be one of {COLLISION_POLICIES}, got {self.collision_policy!r}"
            )
        if self.history_limit < 1 or self.search_limit < 1:
            raise ValueError("history_limit and search_limit must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegistrySettings":
        """Build settings from a mapping, keeping defaults for bad or missing values."""
        base = cls()
        values: Dict[str, Any] = {}
        for key, default in base.to_dict().items():
            if key not in data:
                continue
            raw = data[key]
            try:
                if isinstance(default, bool):
                    value: Any = raw if isinstance(raw, bool) else str(raw).lower() in (
                        "1",
                        "true",
                        "yes",
                        "on",
                    )
                elif isinstance(default, int):
                    value = int(raw)
                else:
                    value = str(raw)
            except (TypeError, ValueError):
                _log.warning("Ignoring invalid setting %s=%r", key, raw)
                continue
            values[key] = value
        if values.get("collision_policy", base.collision_policy) not in COLLISION_POLICIES:
            _log.warning("Ignoring unknown collision policy %r", values["collision_policy"])
            values.pop("collision_policy")
        for key in ("history_limit", "search_limit", "log_capacity"):
            if key in values and values[key] < 1:
                _log.warning("Ignoring non-positive %s=%r", key, values[key])
                values.pop(key)
        if "shortcut_prefix" in values and not values["shortcut_prefix"]:
            values.pop("shortcut_prefix")
        return cls(**values)


def _resolve_path(path: str | Path | None) -> Path:
    if path is None:
        return Path.cwd() / DEFAULT_FILENAME
    p = Path(path)
    return p / DEFAULT_FILENAME if p.is_dir() else p


def load_settings(path: str | Path | None = None) -> RegistrySettings:
    """Load settings from a JSON file (or a directory containing the default file)."""
    file_path = _resolve_path(path)
    if not file_path.exists():
        return RegistrySettings()
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings root must be an object")
    except (OSError, ValueError) as exc:
        _log.warning("Unreadable settings file %s (%s); using defaults", file_path, exc)
        return RegistrySettings()
    try:
        version = int(data.get("version", SETTINGS_VERSION))
    except (TypeError, ValueError):
        _log.warning("Invalid settings version in %s; using defaults", file_path)
        return RegistrySettings()
    if version != SETTINGS_VERSION:
        _log.info("Settings version mismatch in %s; using defaults", file_path)
        return RegistrySettings()
    return RegistrySettings.from_dict(data)


def save_settings(cfg: RegistrySettings, path: str | Path | None = None) -> Path:
    """Persist settings atomically. Returns the path written."""
    file_path = _resolve_path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    tmp = file_path.with_suffix(file_path.suffix + ".tmp")
    tmp.write_text(json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(file_path)
    return file_path
