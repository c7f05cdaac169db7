"""Per-context service container.

``palette.init()`` creates one ``ServiceLocator`` per ``PaletteContext`` and
files the shared objects under string keys (``command_registry``,
``event_bus``, ``logging_service`` ...). Feature modules that are handed the
locator can look services up without importing the bootstrap.

    registry = ctx.services.get_typed("command_registry", CommandRegistry)

Tests swap implementations for the duration of a block:

    with ctx.services.override_context(command_registry=FakeRegistry()):
        ...
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

T = TypeVar("T")

__all__ = ["ServiceLocator", "ServiceAlreadyRegisteredError", "ServiceNotFoundError"]

_MISSING = object()


class ServiceAlreadyRegisteredError(RuntimeError):
    """A key was registered twice without ``allow_override``."""


class ServiceNotFoundError(KeyError):
    """No service is registered under the requested key."""


@dataclass(frozen=True)
class ServiceEntry:
    value: Any
    origin: Optional[str] = None  # who registered it: module name, "override", "temp"


class ServiceLocator:
    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: Dict[str, ServiceEntry] = {}

    def register(
        self, key: str, value: Any, *, allow_override: bool = False, origin: str | None = None
    ) -> None:
        with self._lock:
            if not allow_override and key in self._entries:
                raise ServiceAlreadyRegisteredError(f"Service '{key}' already registered")
            self._entries[key] = ServiceEntry(value, origin)

    def get(self, key: str) -> Any:
        value = self.try_get(key, _MISSING)
        if value is _MISSING:
            raise ServiceNotFoundError(key)
        return value

    def get_typed(self, key: str, expected_type: Type[T]) -> T:
        """Like ``get`` but raise ``TypeError`` unless the service is an ``expected_type``."""
        value = self.get(key)
        if isinstance(value, expected_type):
            return value
        raise TypeError(
            f"Service '{key}' expected type {expected_type.__name__} but got {type(value).__name__}"
        )

    def try_get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
        return default if entry is None else entry.value

    def override(self, key: str, value: Any) -> None:
        """Replace an existing service; unknown keys raise ``ServiceNotFoundError``."""
        with self._lock:
            if key not in self._entries:
                raise ServiceNotFoundError(key)
            self._entries[key] = ServiceEntry(value, "override")

    @contextmanager
    def override_context(self, **overrides: Any) -> Iterator[None]:
        """Swap services for the duration of the block.

        Keys that did not exist beforehand are removed again on exit.
        """
        with self._lock:
            saved = {key: self._entries.get(key) for key in overrides}
            for key, value in overrides.items():
                self._entries[key] = ServiceEntry(value, "temp" if saved[key] is None else "override")
        try:
            yield
        finally:
            with self._lock:
                for key, entry in saved.items():
                    if entry is None:
                        self._entries.pop(key, None)
                    else:
                        self._entries[key] = entry

    def unregister(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def list_keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def origin(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            raise ServiceNotFoundError(key)
        return entry.origin

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
