"""Command dispatcher.

Resolves parsed input to a command, validates declared parameters, records
history, invokes the command's effect and notifies observers.

Execution steps:
 1. parse the raw input
 2. resolve name or alias (``CommandNotFoundError`` when absent)
 3. check availability (``CommandUnavailableError``)
 4. validate parameters when the command declares any
 5. record the raw input in the history ledger
 6. invoke the effect, awaiting it when it returns an awaitable
 7. publish ``execute`` with ``{"command", "args", "result"}``

Any exception raised along the way, including one raised by the effect itself,
is published as ``error`` with ``{"input", "error"}`` and re-raised unchanged.
The dispatcher imposes no timeout or cancellation on effects.
"""

from __future__ import annotations

import inspect
import logging
import re
from typing import Any, Callable, List, Optional

from .command_errors import (
    CommandNotFoundError,
    CommandUnavailableError,
    InvalidParameterTypeError,
    MissingParametersError,
)
from .command_model import Command, ParameterType, ParseResult
from .event_bus import CommandEvent, EventBus, EventHandler, Subscription
from .history_ledger import HistoryLedger

__all__ = [
    "CommandDispatcher",
    "validate_parameters",
    "validate_parameter_type",
    "BOOLEAN_TOKENS",
]

_log = logging.getLogger(__name__)

BOOLEAN_TOKENS = frozenset({"true", "false", "1", "0", "yes", "no"})

_RADIX_LITERAL = re.compile(r"^0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
_INFINITY = re.compile(r"^[+-]?Infinity$")
# ASCII digits only; "1e400" overflows to Infinity and still counts as a number
_DECIMAL_LITERAL = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")


def _is_number(value: str) -> bool:
    text = value.strip()
    return any(p.match(text) for p in (_DECIMAL_LITERAL, _RADIX_LITERAL, _INFINITY))


def validate_parameter_type(value: str, ptype: Optional[ParameterType]) -> bool:
    if ptype is None or ptype is ParameterType.STRING:
        return True
    if ptype is ParameterType.NUMBER:
        return _is_number(value)
    if ptype is ParameterType.BOOLEAN:
        return value.lower() in BOOLEAN_TOKENS
    return True


def validate_parameters(command: Command, args: List[str]) -> None:
    """Raise if ``args`` do not satisfy ``command.parameters``.

    Arguments beyond the declared parameter list pass through unchecked.
    """
    required = command.required_parameters
    if len(args) < len(required):
        missing = [p.name for p in required[len(args) :]]
        raise MissingParametersError(command.name, missing)
    for param, value in zip(command.parameters, args):
        if param.type is not None and not validate_parameter_type(value, param.type):
            raise InvalidParameterTypeError(param.name, param.type.value, value)


class CommandDispatcher:
    def __init__(
        self,
        parse: Callable[[str], ParseResult],
        resolve: Callable[[str], Optional[Command]],
        history: HistoryLedger,
        bus: Optional[EventBus] = None,
    ) -> None:
        self._parse = parse
        self._resolve = resolve
        self._history = history
        self._bus = bus or EventBus()

    @property
    def bus(self) -> EventBus:
        return self._bus

    # Observers ----------------------------------------------------
    def subscribe(
        self, event: "str | CommandEvent", handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        key = event.value if isinstance(event, CommandEvent) else event
        if key not in (CommandEvent.EXECUTE.value, CommandEvent.ERROR.value):
            raise ValueError(f"Unknown command event {event!r}; expected 'execute' or 'error'")
        return self._bus.subscribe(key, handler, once=once)

    def unsubscribe(self, subscription: Subscription) -> None:
        self._bus.unsubscribe(subscription)

    # Execution ----------------------------------------------------
    async def execute(self, raw_input: str) -> Any:
        try:
            parsed = self._parse(raw_input)
            command = self._resolve(parsed.name)
            if command is None:
                raise CommandNotFoundError(parsed.name)
            if not command.is_available():
                raise CommandUnavailableError(parsed.name)
            if command.parameters:
                validate_parameters(command, parsed.args)

            self._history.record(raw_input)

            result = command.effect(parsed.args, parsed)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            _log.warning("Command input %r failed: %s", raw_input, exc)
            self._bus.publish(CommandEvent.ERROR, {"input": raw_input, "error": exc})
            raise

        _log.info("Executed command %r with args %s", command.name, parsed.args)
        self._bus.publish(
            CommandEvent.EXECUTE, {"command": command, "args": parsed.args, "result": result}
        )
        return result
