"""Registry introspection commands available in every palette.

``help``, ``history``, ``clear history`` and ``categories`` only look at the
registry itself, so they can be registered before any feature module loads.
"""

from __future__ import annotations

from typing import List

from .command_errors import CommandNotFoundError
from .command_model import Command, Parameter, ParameterType, ParseResult
from .command_registry import CommandRegistry

__all__ = ["builtin_commands", "register_builtin_commands", "format_usage"]


def format_usage(command: Command) -> str:
    parts = [command.name]
    for p in command.parameters:
        parts.append(f"<{p.name}>" if p.required else f"[{p.name}]")
    return " ".join(parts)


def builtin_commands(registry: CommandRegistry) -> List[Command]:
    def _help(args: List[str], parsed: ParseResult) -> List[str]:
        if not args:
            return [f"{c.name} - {c.description}" for c in registry.get_all()]
        target_name = " ".join(args)
        target = registry.get(target_name)
        if target is None:
            raise CommandNotFoundError(target_name)
        lines = [f"Usage: {format_usage(target)}", target.description]
        if target.aliases:
            lines.append(f"Aliases: {', '.join(target.aliases)}")
        lines.append(f"Category: {target.category}")
        for p in target.parameters:
            kind = p.type.value if p.type else "any"
            flag = "required" if p.required else "optional"
            detail = f" - {p.description}" if p.description else ""
            lines.append(f"  {p.name} ({kind}, {flag}){detail}")
        return lines

    def _history(args: List[str], parsed: ParseResult) -> List[str]:
        return registry.history.all()

    def _clear_history(args: List[str], parsed: ParseResult) -> int:
        removed = len(registry.history)
        registry.history.clear()
        return removed

    def _categories(args: List[str], parsed: ParseResult) -> List[str]:
        return registry.categories()

    return [
        Command(
            name="help",
            effect=_help,
            description="Show available commands or details for one command",
            category="about",
            aliases=(":h",),
            parameters=(
                Parameter("command", required=False, type=ParameterType.STRING,
                          description="Command to describe"),
            ),
        ),
        Command(
            name="history",
            effect=_history,
            description="Show recently executed commands",
        ),
        Command(
            name="clear history",
            effect=_clear_history,
            description="Forget recently executed commands",
        ),
        Command(
            name="categories",
            effect=_categories,
            description="List command categories",
        ),
    ]


def register_builtin_commands(registry: CommandRegistry) -> List[Command]:
    return registry.register_many(builtin_commands(registry))
