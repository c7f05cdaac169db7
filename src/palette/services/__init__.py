"""Service layer exports.

Responsibilities:
 - Command registry (table, parser, ranker, dispatcher, history ledger)
 - EventBus publish/subscribe core used for ``execute`` / ``error`` notifications
 - Per-context service locator
"""

from .command_errors import (  # noqa: F401
    CommandError,
    CommandNotFoundError,
    CommandUnavailableError,
    InvalidCommandError,
    InvalidParameterTypeError,
    MissingParametersError,
)
from .command_model import Command, Parameter, ParameterType, ParseResult  # noqa: F401
from .command_registry import CommandRegistry, RegistryStats  # noqa: F401
from .event_bus import CommandEvent, EventBus  # noqa: F401
from .service_locator import ServiceLocator  # noqa: F401
from .settings_service import RegistrySettings  # noqa: F401

__all__ = [
    "Command",
    "CommandError",
    "CommandEvent",
    "CommandNotFoundError",
    "CommandRegistry",
    "CommandUnavailableError",
    "EventBus",
    "InvalidCommandError",
    "InvalidParameterTypeError",
    "MissingParametersError",
    "Parameter",
    "ParameterType",
    "ParseResult",
    "RegistrySettings",
    "RegistryStats",
    "ServiceLocator",
]
