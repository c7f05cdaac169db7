"""Command data model.

Plain dataclasses shared by the table, parser, ranker and dispatcher. Kept free
of any UI dependency so feature modules can build command records at import
time and hand them to the registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from ..config import settings
from .command_errors import InvalidCommandError

__all__ = [
    "ParameterType",
    "Parameter",
    "Availability",
    "PredicateCondition",
    "ALWAYS_AVAILABLE",
    "as_condition",
    "Effect",
    "Command",
    "ParseResult",
]


class ParameterType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class Parameter:
    name: str
    required: bool = False
    type: Optional[ParameterType] = None
    description: str = ""

    @classmethod
    def from_value(cls, value: "Parameter | Mapping[str, Any]") -> "Parameter":
        if isinstance(value, Parameter):
            return value
        if not isinstance(value, Mapping) or not value.get("name"):
            raise InvalidCommandError(f"Invalid parameter descriptor: {value!r}")
        raw_type = value.get("type")
        ptype: Optional[ParameterType] = None
        if raw_type is not None:
            try:
                ptype = ParameterType(raw_type)
            except ValueError as exc:
                raise InvalidCommandError(
                    f"Unknown parameter type {raw_type!r} for parameter {value['name']!r}"
                ) from exc
        return cls(
            name=str(value["name"]),
            required=bool(value.get("required", False)),
            type=ptype,
            description=str(value.get("description", "")),
        )


@runtime_checkable
class Availability(Protocol):
    """Capability check deciding whether a command can currently run."""

    def is_available(self) -> bool: ...  # pragma: no cover - structural


class _AlwaysAvailable:
    def is_available(self) -> bool:
        return True

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "ALWAYS_AVAILABLE"


ALWAYS_AVAILABLE: Availability = _AlwaysAvailable()


@dataclass(frozen=True)
class PredicateCondition:
    """Adapts a zero-argument predicate (e.g. ``auth.is_signed_in``)."""

    predicate: Callable[[], bool]

    def is_available(self) -> bool:
        return bool(self.predicate())


def as_condition(value: Any) -> Availability:
    if value is None:
        return ALWAYS_AVAILABLE
    if isinstance(value, Availability):
        return value
    if callable(value):
        return PredicateCondition(value)
    raise InvalidCommandError(f"Command condition must be callable or Availability, got {value!r}")


# (args, parse_result) -> result or awaitable result
Effect = Callable[[List[str], "ParseResult"], Any]


@dataclass(frozen=True)
class ParseResult:
    name: str
    args: List[str] = field(default_factory=list)
    raw_input: str = ""
    clean_input: str = ""


@dataclass(frozen=True)
class Command:
    """A named, invocable unit of behaviour.

    ``aliases`` and ``parameters`` accept any sequence (parameters may also be
    plain mappings) and are normalized to tuples. ``condition`` accepts an
    ``Availability`` object or a bare predicate.
    """

    name: str
    effect: Optional[Effect] = None
    description: str = ""
    category: str = settings.DEFAULT_CATEGORY
    aliases: Sequence[str] = ()
    parameters: Sequence[Parameter] = ()
    condition: Any = None
    icon: str = settings.DEFAULT_ICON
    shortcut: str = ""
    registered_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.description:
            object.__setattr__(self, "description", f"Execute {self.name}")
        if not self.category:
            object.__setattr__(self, "category", settings.DEFAULT_CATEGORY)
        aliases = (self.aliases,) if isinstance(self.aliases, str) else tuple(self.aliases or ())
        object.__setattr__(self, "aliases", aliases)
        object.__setattr__(
            self, "parameters", tuple(Parameter.from_value(p) for p in self.parameters or ())
        )
        object.__setattr__(self, "condition", as_condition(self.condition))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Command":
        """Build a command from a plain dict (``handler`` is accepted for ``effect``)."""
        effect = data.get("effect", data.get("handler"))
        return cls(
            name=str(data.get("name") or ""),
            effect=effect,
            description=str(data.get("description") or ""),
            category=str(data.get("category") or settings.DEFAULT_CATEGORY),
            aliases=data.get("aliases") or (),
            parameters=tuple(data.get("parameters") or ()),
            condition=data.get("condition"),
            icon=str(data.get("icon") or settings.DEFAULT_ICON),
            shortcut=str(data.get("shortcut") or ""),
        )

    def is_available(self) -> bool:
        return self.condition.is_available()

    def stamped(self) -> "Command":
        """Copy with ``registered_at`` set to the current UTC time."""
        return replace(self, registered_at=datetime.now(timezone.utc))

    @property
    def required_parameters(self) -> List[Parameter]:
        return [p for p in self.parameters if p.required]
