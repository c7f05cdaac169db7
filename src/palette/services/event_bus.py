"""Observer notifications for the command dispatcher.

A small synchronous publish/subscribe hub. The dispatcher publishes
``execute`` and ``error``; status bars, toast hosts and the error journal
subscribe without the registry knowing about any of them.

Delivery rules:
 - handlers run in subscription order on the publishing thread
 - a handler that raises is recorded in ``errors`` and the next one still runs
 - ``once`` subscriptions are dropped after their first delivery
 - the subscriber list is copied before delivery, so handlers may subscribe or
   unsubscribe while an event is in flight

Tracing keeps a bounded history of published events (name, time, short
payload summary) for diagnostics; it is off by default.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Deque, Dict, List, Protocol

__all__ = [
    "CommandEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "HandlerFailure",
    "Subscription",
    "TraceEntry",
]

_SUMMARY_WIDTH = 40


class CommandEvent(str, Enum):
    EXECUTE = "execute"
    ERROR = "error"


@dataclass
class Event:
    name: str
    payload: Any
    timestamp: float


class EventHandler(Protocol):
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass(eq=False)
class Subscription:
    """Handle returned by ``subscribe``; pass it back to ``unsubscribe``."""

    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


@dataclass(frozen=True)
class HandlerFailure:
    event: Event
    error: Exception


@dataclass(frozen=True)
class TraceEntry:
    name: str
    timestamp: float
    summary: str


def _event_key(name: "str | CommandEvent") -> str:
    return name.value if isinstance(name, CommandEvent) else name


def _summarize(payload: Any) -> str:
    if payload is None:
        return "-"
    text = str(payload)
    if len(text) > _SUMMARY_WIDTH:
        return text[: _SUMMARY_WIDTH - 3] + "..."
    return text


class EventBus:
    DEFAULT_TRACE_CAPACITY = 50

    def __init__(self) -> None:
        self._lock = RLock()
        self._handlers: Dict[str, List[Subscription]] = {}
        self._failures: List[HandlerFailure] = []
        self._tracing = False
        self._trace_log: Deque[TraceEntry] = deque(maxlen=self.DEFAULT_TRACE_CAPACITY)

    # Subscriptions ------------------------------------------------
    def subscribe(
        self, name: "str | CommandEvent", handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(event=_event_key(name), handler=handler, once=once)
        with self._lock:
            self._handlers.setdefault(sub.event, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        sub.active = False
        self._drop(sub.event, [sub])

    def clear(self) -> None:
        """Remove every subscription and forget recorded handler failures."""
        with self._lock:
            self._handlers.clear()
            self._failures.clear()

    def _drop(self, key: str, subs: List[Subscription]) -> None:
        with self._lock:
            remaining = [s for s in self._handlers.get(key, ()) if all(s is not d for d in subs)]
            if remaining:
                self._handlers[key] = remaining
            else:
                self._handlers.pop(key, None)

    # Publishing ---------------------------------------------------
    def publish(self, name: "str | CommandEvent", payload: Any = None) -> Event:
        event = Event(name=_event_key(name), payload=payload, timestamp=perf_counter())
        with self._lock:
            targets = list(self._handlers.get(event.name, ()))
            if self._tracing:
                self._trace_log.append(
                    TraceEntry(name=event.name, timestamp=event.timestamp, summary=_summarize(payload))
                )

        spent: List[Subscription] = []
        for sub in targets:
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as exc:  # noqa: BLE001 - observers must not break publishers
                with self._lock:
                    self._failures.append(HandlerFailure(event=event, error=exc))
            if sub.once:
                sub.active = False
                spent.append(sub)
        if spent:
            self._drop(event.name, spent)
        return event

    # Introspection ------------------------------------------------
    def subscriber_count(self, name: "str | CommandEvent") -> int:
        with self._lock:
            return len(self._handlers.get(_event_key(name), ()))

    def list_events(self) -> List[str]:
        with self._lock:
            return list(self._handlers)

    @property
    def errors(self) -> List[HandlerFailure]:
        with self._lock:
            return list(self._failures)

    # Tracing ------------------------------------------------------
    def enable_tracing(self, enabled: bool = True, *, capacity: int | None = None) -> None:
        """Toggle tracing; ``capacity`` resizes the trace buffer keeping the newest entries."""
        with self._lock:
            self._tracing = enabled
            if capacity is not None and capacity != self._trace_log.maxlen:
                self._trace_log = deque(self._trace_log, maxlen=capacity)

    def clear_traces(self) -> None:
        with self._lock:
            self._trace_log.clear()

    def recent_trace_entries(self) -> List[TraceEntry]:
        with self._lock:
            return list(self._trace_log)

    @property
    def tracing_enabled(self) -> bool:
        with self._lock:
            return self._tracing
