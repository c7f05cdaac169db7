"""Error taxonomy for command registration and dispatch.

Each error class exposes a stable ``kind`` string so observers (toast hosts,
error journals, CLI front ends) can branch on the failure category without
importing the concrete classes.
"""

from __future__ import annotations

from typing import Sequence

__all__ = [
    "CommandError",
    "InvalidCommandError",
    "CommandNotFoundError",
    "CommandUnavailableError",
    "MissingParametersError",
    "InvalidParameterTypeError",
]


class CommandError(Exception):
    """Base class for every failure raised by the registry itself."""

    kind: str = "CommandError"


class InvalidCommandError(CommandError, ValueError):
    """Raised when a command definition is rejected at registration."""

    kind = "InvalidCommand"


class CommandNotFoundError(CommandError, LookupError):
    kind = "CommandNotFound"

    def __init__(self, name: str) -> None:
        super().__init__(f'Command "{name}" not found')
        self.name = name


class CommandUnavailableError(CommandError):
    kind = "CommandUnavailable"

    def __init__(self, name: str) -> None:
        super().__init__(f'Command "{name}" is not available in current context')
        self.name = name


class MissingParametersError(CommandError):
    """Fewer arguments were supplied than the command requires.

    ``missing`` holds the unfilled required parameter names in declared order.
    """

    kind = "MissingParameters"

    def __init__(self, command_name: str, missing: Sequence[str]) -> None:
        super().__init__(f"Missing required parameters: {', '.join(missing)}")
        self.command_name = command_name
        self.missing = list(missing)


class InvalidParameterTypeError(CommandError):
    kind = "InvalidParameterType"

    def __init__(self, parameter: str, expected: str, value: str) -> None:
        super().__init__(f'Parameter "{parameter}" must be of type {expected}')
        self.parameter = parameter
        self.expected = expected
        self.value = value
