"""Error journal for failed command executions.

Passive observer of the dispatcher's ``error`` notifications. Keeps a short
ring buffer of structured ``ErrorRecord`` entries so a toast host or a
diagnostics view can show recent failures without every caller of
``execute`` handling errors itself.

Repeated failures with the same kind and message aggregate into a
``DedupEntry`` (first record + running count); each occurrence still lands in
the raw ring buffer until evicted.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from .command_errors import CommandError
from .event_bus import CommandEvent, Event, Subscription

__all__ = ["ErrorRecord", "DedupEntry", "ErrorJournal", "EFFECT_ERROR_KIND"]

EFFECT_ERROR_KIND = "EffectError"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured capture of one failed execution.

    Attributes
    ----------
    input: str
        Raw input passed to ``execute``.
    kind: str
        Taxonomy kind (``CommandNotFound`` ...) or ``EffectError`` for
        exceptions raised by a command's own effect.
    message: str
        ``str(error)``.
    exc_type: type
        Exception class.
    timestamp: float
        POSIX timestamp when recorded.
    iso_time: str
        ISO 8601 timestamp (UTC).
    """

    input: str
    kind: str
    message: str
    exc_type: type
    timestamp: float
    iso_time: str

    def summary(self, max_len: int = 120) -> str:
        msg = f"{self.kind}: {self.message}"
        if len(msg) > max_len:
            return msg[: max_len - 3] + "..."
        return msg


@dataclass
class DedupEntry:
    key: str
    first: ErrorRecord
    count: int
    last_timestamp: float


class ErrorJournal:
    """Attachable recorder of dispatcher ``error`` events.

    Usage
    -----
    journal = ErrorJournal(capacity=20)
    journal.attach(registry)
    ... run palette ...
    journal.detach()
    """

    def __init__(self, *, capacity: int = 20, logger: Optional[logging.Logger] = None) -> None:
        self._capacity = max(1, capacity)
        self._errors: Deque[ErrorRecord] = deque(maxlen=self._capacity)
        self._dedup: Dict[str, DedupEntry] = {}
        self._logger = logger or logging.getLogger(__name__)
        self._source: Any = None
        self._subscription: Optional[Subscription] = None

    # Attachment ---------------------------------------------------
    def attach(self, source: Any) -> None:
        """Subscribe to ``error`` events of a registry or dispatcher."""
        if self._subscription is not None:
            return
        self._source = source
        self._subscription = source.subscribe(CommandEvent.ERROR, self._on_error)

    def detach(self) -> None:
        if self._subscription is None:
            return
        self._source.unsubscribe(self._subscription)
        self._subscription = None
        self._source = None

    @property
    def attached(self) -> bool:
        return self._subscription is not None

    def _on_error(self, event: Event) -> None:
        payload = event.payload or {}
        self.record(str(payload.get("input", "")), payload.get("error"))

    # Recording ----------------------------------------------------
    def record(self, raw_input: str, error: BaseException) -> ErrorRecord:
        kind = error.kind if isinstance(error, CommandError) else EFFECT_ERROR_KIND
        now = datetime.now(timezone.utc)
        rec = ErrorRecord(
            input=raw_input,
            kind=kind,
            message=str(error),
            exc_type=type(error),
            timestamp=now.timestamp(),
            iso_time=now.isoformat().replace("+00:00", "Z"),
        )
        self._errors.append(rec)
        key = f"{rec.kind}|{rec.message}"
        group = self._dedup.setdefault(
            key, DedupEntry(key=key, first=rec, count=0, last_timestamp=rec.timestamp)
        )
        group.count += 1
        group.last_timestamp = rec.timestamp
        self._logger.debug("Journaled %s for input %r", rec.kind, raw_input)
        return rec

    # Queries ------------------------------------------------------
    def recent_errors(self) -> List[ErrorRecord]:
        return list(self._errors)

    def dedup_entries(self) -> List[DedupEntry]:
        """Aggregated groups in first-seen order."""
        return list(self._dedup.values())

    def clear(self) -> None:
        self._errors.clear()
        self._dedup.clear()
