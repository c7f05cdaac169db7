"""Command palette core: command registry, parser, ranker and dispatcher."""

from .app.bootstrap import PaletteContext, init  # noqa: F401
from .services import (  # noqa: F401
    Command,
    CommandRegistry,
    Parameter,
    ParameterType,
    RegistrySettings,
)

__version__ = "0.1.0"

__all__ = [
    "Command",
    "CommandRegistry",
    "PaletteContext",
    "Parameter",
    "ParameterType",
    "RegistrySettings",
    "init",
]
