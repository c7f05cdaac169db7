"""History ledger.

Maintains a fixed-size MRU (most recently used) list of executed raw inputs.
Re-executing an input moves it to the front instead of duplicating it; the
oldest entries are evicted once ``max_items`` is exceeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..config import settings

__all__ = ["HistoryLedger"]


@dataclass
class HistoryLedger:
    max_items: int = settings.DEFAULT_HISTORY_LIMIT
    _entries: List[str] = field(default_factory=list)  # most recent first

    def record(self, raw_input: str) -> None:
        try:
            self._entries.remove(raw_input)
        except ValueError:
            pass
        self._entries.insert(0, raw_input)
        if len(self._entries) > self.max_items:
            del self._entries[self.max_items :]

    def all(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
