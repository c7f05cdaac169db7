"""Command table: canonical storage for registered commands.

Maintains three indices kept in lock-step on every mutation:
 - name -> Command (insertion ordered)
 - alias -> owning command name
 - category -> ordered list of command names

Only the registry mutates these; callers receive ``Command`` records (frozen
dataclasses) and never the underlying dicts.

Thread-safety: Not thread-safe; callers serialize registration relative to
search/execute.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .command_errors import InvalidCommandError
from .command_model import Command

__all__ = ["CommandTable", "coerce_command", "sort_by_name"]

_log = logging.getLogger(__name__)


def coerce_command(value: "Command | Mapping[str, Any]") -> Command:
    if isinstance(value, Command):
        return value
    if isinstance(value, Mapping):
        return Command.from_mapping(value)
    raise InvalidCommandError(f"Cannot register {type(value).__name__} as a command")


def sort_by_name(commands: Iterable[Command]) -> List[Command]:
    return sorted(commands, key=lambda c: (c.name.casefold(), c.name))


class CommandTable:
    def __init__(self, collision_policy: str = "replace") -> None:
        self._commands: Dict[str, Command] = {}
        self._aliases: Dict[str, str] = {}
        self._categories: Dict[str, List[str]] = {}
        self._collision_policy = collision_policy

    # Registration -------------------------------------------------
    def register(self, command: "Command | Mapping[str, Any]") -> Command:
        """Register a command, returning the stored record.

        Raises ``InvalidCommandError`` (before any mutation) when the name is
        blank, the effect is missing, an alias is blank, or a collision occurs
        under the ``reject`` policy.
        """
        cmd = coerce_command(command)
        if not isinstance(cmd.name, str) or not cmd.name.strip():
            raise InvalidCommandError("Command must have name and handler")
        if cmd.effect is None or not callable(cmd.effect):
            raise InvalidCommandError("Command must have name and handler")
        for alias in cmd.aliases:
            if not isinstance(alias, str) or not alias.strip():
                raise InvalidCommandError(f"Command {cmd.name!r} has a blank alias")

        collisions = self._collisions(cmd)
        if collisions:
            if self._collision_policy == "reject":
                raise InvalidCommandError(
                    f"Command {cmd.name!r} collides with existing entries: {', '.join(collisions)}"
                )
            for detail in collisions:
                _log.warning("Registration of %r overrides %s", cmd.name, detail)

        if cmd.name in self._commands:
            self._detach(cmd.name)
        # A name shadowing another command's alias would be unreachable via get()
        self._aliases.pop(cmd.name, None)

        stored = cmd.stamped()
        self._commands[stored.name] = stored
        for alias in stored.aliases:
            self._aliases[alias] = stored.name
        self._categories.setdefault(stored.category, []).append(stored.name)
        _log.debug(
            "Registered command %r (category=%s, aliases=%s)",
            stored.name,
            stored.category,
            list(stored.aliases),
        )
        return stored

    def register_many(self, commands: Iterable["Command | Mapping[str, Any]"]) -> List[Command]:
        return [self.register(c) for c in commands]

    def unregister(self, name: str) -> bool:
        if name not in self._commands:
            return False
        self._detach(name)
        _log.debug("Unregistered command %r", name)
        return True

    def _collisions(self, cmd: Command) -> List[str]:
        found: List[str] = []
        if cmd.name in self._commands:
            found.append(f"command name {cmd.name!r}")
        if cmd.name in self._aliases and self._aliases[cmd.name] != cmd.name:
            found.append(f"alias {cmd.name!r} of {self._aliases[cmd.name]!r}")
        for alias in cmd.aliases:
            owner = self._aliases.get(alias)
            if owner is not None and owner != cmd.name:
                found.append(f"alias {alias!r} of {owner!r}")
            if alias in self._commands and alias != cmd.name:
                found.append(f"command name {alias!r}")
        return found

    def _detach(self, name: str) -> None:
        cmd = self._commands.pop(name)
        for alias in cmd.aliases:
            # Only drop aliases still owned by this command
            if self._aliases.get(alias) == name:
                del self._aliases[alias]
        bucket = self._categories.get(cmd.category)
        if bucket is not None:
            try:
                bucket.remove(name)
            except ValueError:
                pass
            if not bucket:
                del self._categories[cmd.category]

    # Lookup -------------------------------------------------------
    def get(self, name_or_alias: str) -> Optional[Command]:
        actual = self._aliases.get(name_or_alias, name_or_alias)
        return self._commands.get(actual)

    def has(self, name_or_alias: str) -> bool:
        return self.get(name_or_alias) is not None

    def get_all(self) -> List[Command]:
        """Available commands sorted by name."""
        return sort_by_name(c for c in self._commands.values() if c.is_available())

    def get_by_category(self, category: str) -> List[Command]:
        names = self._categories.get(category, [])
        cmds = (self._commands.get(n) for n in names)
        return sort_by_name(c for c in cmds if c is not None and c.is_available())

    def categories(self) -> List[str]:
        return sorted(self._categories)

    def iter_commands(self) -> List[Command]:
        """All registered commands in registration order, regardless of availability."""
        return list(self._commands.values())

    def names_and_aliases(self) -> List[str]:
        return [*self._commands.keys(), *self._aliases.keys()]

    # Stats --------------------------------------------------------
    def count(self) -> int:
        return len(self._commands)

    def alias_count(self) -> int:
        return len(self._aliases)

    def category_count(self) -> int:
        return len(self._categories)
