"""In-process capture of the ``palette`` log stream.

Every palette module logs through ``logging.getLogger(__name__)``. The
``LoggingService`` hangs a handler on the package logger (or the root logger)
and keeps the most recent records in memory, so a diagnostics view or a test
can see what the registry did without configuring file handlers. Captured
records can be exported as JSON Lines for bug reports.
"""

from __future__ import annotations

import json
import logging
import os
from collections import deque
from dataclasses import asdict, dataclass
from threading import RLock
from typing import Any, Deque, Dict, List, Optional

from ..config import settings

__all__ = ["LogEntry", "LoggingService", "PACKAGE_LOGGER"]

PACKAGE_LOGGER = "palette"
DEFAULT_EXPORT_NAME = "palette_logs.jsonl"


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float
    file: str
    line: int

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEntry":
        return cls(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
            file=record.pathname,
            line=record.lineno,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class _CaptureHandler(logging.Handler):
    def __init__(self, sink: "LoggingService") -> None:
        super().__init__(level=logging.DEBUG)
        self._sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        self._sink._append(LogEntry.from_record(record))


class LoggingService:
    """Bounded buffer of recent log records.

    ``attach`` lowers the target logger to DEBUG when needed and ``detach``
    restores the level it found.
    """

    def __init__(self, capacity: int = settings.DEFAULT_LOG_CAPACITY) -> None:
        self._lock = RLock()
        self._buffer: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _CaptureHandler(self)
        self._target: Optional[logging.Logger] = None
        self._saved_level = logging.NOTSET

    @property
    def capacity(self) -> Optional[int]:
        return self._buffer.maxlen

    # Attachment ---------------------------------------------------
    def attach(self, logger_name: Optional[str] = PACKAGE_LOGGER) -> None:
        """Start capturing from ``logger_name`` (``None`` is the root logger)."""
        if self._target is not None:
            return
        target = logging.getLogger(logger_name)
        self._saved_level = target.level
        if target.level == logging.NOTSET or target.level > logging.DEBUG:
            target.setLevel(logging.DEBUG)
        target.addHandler(self._handler)
        self._target = target

    def attach_root(self) -> None:
        self.attach(None)

    def detach(self) -> None:
        target = self._target
        if target is None:
            return
        target.removeHandler(self._handler)
        target.setLevel(self._saved_level)
        self._target = None

    @property
    def attached(self) -> bool:
        return self._target is not None

    def _append(self, entry: LogEntry) -> None:
        with self._lock:
            self._buffer.append(entry)

    # Queries ------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        """Captured entries, oldest first; ``limit`` keeps only the newest ones."""
        with self._lock:
            entries = list(self._buffer)
        if limit is None:
            return entries
        return entries[-limit:] if limit > 0 else []

    def filter(
        self, *, level: str | None = None, name_contains: str | None = None
    ) -> List[LogEntry]:
        return [
            e
            for e in self.recent()
            if (not level or e.level == level)
            and (not name_contains or name_contains in e.name)
        ]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    # Export -------------------------------------------------------
    def export_jsonl(
        self,
        path: str | None = None,
        *,
        level: str | None = None,
        name_contains: str | None = None,
        append: bool = False,
    ) -> int:
        """Write matching entries as JSON Lines and return how many were written."""
        entries = self.filter(level=level, name_contains=name_contains)
        target = path or os.path.join(os.getcwd(), DEFAULT_EXPORT_NAME)
        with open(target, "a" if append else "w", encoding="utf-8") as fh:
            fh.writelines(json.dumps(e.to_dict(), sort_keys=True) + "\n" for e in entries)
        return len(entries)
