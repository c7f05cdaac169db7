"""Command Registry Service

Central registry for commands exposed to the command palette. Composes the
command table, parser, ranker, dispatcher and history ledger behind one
explicitly constructed object; there is no module-level instance; the
application builds one in ``palette.app.bootstrap.init`` and passes it to the
modules that register commands or drive the palette.

Responsibilities:
 - Register / unregister commands with aliases, categories, parameters and
   availability conditions
 - Parse free text into a command name plus arguments (longest match first)
 - Rank commands for interactive search (exact, prefix, substring, multi-word,
   alias and subsequence signals)
 - Execute input with parameter validation, history tracking and
   ``execute`` / ``error`` notifications

Thread-safety: Not thread-safe; intended for a single event-loop caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from .command_dispatcher import CommandDispatcher
from .command_model import Command, ParseResult
from .command_parser import CommandParser
from .command_ranker import CommandRanker, fuzzy_match
from .command_table import CommandTable
from .event_bus import CommandEvent, EventBus, EventHandler, Subscription
from .history_ledger import HistoryLedger
from .settings_service import RegistrySettings

__all__ = ["CommandRegistry", "RegistryStats"]


@dataclass(frozen=True)
class RegistryStats:
    total_commands: int
    total_aliases: int
    total_categories: int
    history_length: int
    available_commands: int


class CommandRegistry:
    def __init__(
        self, settings: Optional[RegistrySettings] = None, *, bus: Optional[EventBus] = None
    ) -> None:
        self.settings = settings or RegistrySettings()
        self._table = CommandTable(collision_policy=self.settings.collision_policy)
        self._history = HistoryLedger(max_items=self.settings.history_limit)
        self._parser = CommandParser(
            self._table.names_and_aliases, shortcut_prefix=self.settings.shortcut_prefix
        )
        self._ranker = CommandRanker(
            self._table.iter_commands,
            self._table.get_all,
            limit=self.settings.search_limit,
            shortcut_prefix=self.settings.shortcut_prefix,
            shortcut_alias_prefix=self.settings.shortcut_alias_prefix,
        )
        self._dispatcher = CommandDispatcher(
            self._parser.parse, self._table.get, self._history, bus=bus
        )

    # Registration -------------------------------------------------
    def register(self, command: "Command | Mapping[str, Any]") -> Command:
        return self._table.register(command)

    def register_many(self, commands: Iterable["Command | Mapping[str, Any]"]) -> List[Command]:
        return self._table.register_many(commands)

    def unregister(self, name: str) -> bool:
        return self._table.unregister(name)

    # Lookup -------------------------------------------------------
    def get(self, name_or_alias: str) -> Optional[Command]:
        return self._table.get(name_or_alias)

    def has(self, name_or_alias: str) -> bool:
        return self._table.has(name_or_alias)

    def get_all(self) -> List[Command]:
        return self._table.get_all()

    def get_by_category(self, category: str) -> List[Command]:
        return self._table.get_by_category(category)

    def categories(self) -> List[str]:
        return self._table.categories()

    def count(self) -> int:
        return self._table.count()

    # Parse / Search -----------------------------------------------
    def parse(self, raw_input: str) -> ParseResult:
        return self._parser.parse(raw_input)

    def search(self, query: str) -> List[Command]:
        return self._ranker.search(query)

    def ranked(self, query: str) -> List[tuple[int, Command]]:
        return self._ranker.ranked(query)

    @staticmethod
    def fuzzy_match(text: str, query: str) -> bool:
        return fuzzy_match(text, query)

    # Execution ----------------------------------------------------
    async def execute(self, raw_input: str) -> Any:
        return await self._dispatcher.execute(raw_input)

    def subscribe(
        self, event: "str | CommandEvent", handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        return self._dispatcher.subscribe(event, handler, once=once)

    def unsubscribe(self, subscription: Subscription) -> None:
        self._dispatcher.unsubscribe(subscription)

    @property
    def bus(self) -> EventBus:
        return self._dispatcher.bus

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    # History ------------------------------------------------------
    @property
    def history(self) -> HistoryLedger:
        return self._history

    # Stats --------------------------------------------------------
    def stats(self) -> RegistryStats:
        return RegistryStats(
            total_commands=self._table.count(),
            total_aliases=self._table.alias_count(),
            total_categories=self._table.category_count(),
            history_length=len(self._history),
            available_commands=len(self._table.get_all()),
        )
