"""Free-text command parser.

Turns raw palette input into a ``ParseResult`` (command name + argument list).

Resolution is longest-match-first over every registered name and alias so
that multi-word commands win over single-word commands that prefix them
("search advanced now" resolves to ``search advanced`` with args ``["now"]``,
not ``search`` with ``["advanced", "now"]``). A candidate only matches on a
word boundary: the rest of the input must be empty or start with whitespace.

Input carrying the shortcut sentinel (``:test``) is matched with the sentinel
stripped, and sentinel-prefixed aliases are compared without their sentinel.

Parsing never fails. When nothing matches, the first whitespace-delimited
token is taken as the name and the dispatcher reports ``CommandNotFound``.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Tuple

from .command_model import ParseResult

__all__ = ["CommandParser", "split_head"]

_log = logging.getLogger(__name__)


def split_head(text: str) -> Tuple[str, str]:
    """Split ``text`` at its first whitespace run: ``("head", "rest")``.

    Leading whitespace is not stripped; callers decide whether it matters.
    """
    for i, ch in enumerate(text):
        if ch.isspace():
            return text[:i], text[i:].strip()
    return text, ""


class CommandParser:
    """Parser bound to a source of candidate names.

    ``candidates`` is called on every parse so the parser always reflects the
    current table contents.
    """

    def __init__(self, candidates: Callable[[], Iterable[str]], shortcut_prefix: str = ":") -> None:
        self._candidates = candidates
        self._prefix = shortcut_prefix

    @property
    def shortcut_prefix(self) -> str:
        return self._prefix

    def is_shortcut(self, text: str) -> bool:
        return bool(self._prefix) and text.startswith(self._prefix)

    def parse(self, raw_input: str) -> ParseResult:
        trimmed = raw_input.strip()
        is_shortcut = self.is_shortcut(trimmed)
        search_input = trimmed[len(self._prefix) :] if is_shortcut else trimmed

        # Longest first; sorted() is stable so equal lengths keep table order
        ordered = sorted(self._candidates(), key=len, reverse=True)
        for candidate in ordered:
            check = candidate
            if is_shortcut and candidate.startswith(self._prefix):
                check = candidate[len(self._prefix) :]
            if not check or search_input[: len(check)].lower() != check.lower():
                continue
            remainder = search_input[len(check) :]
            if remainder and not remainder[0].isspace():
                continue
            args = remainder.split()
            _log.debug("Parsed %r as command %r with args %s", raw_input, candidate, args)
            return ParseResult(
                name=candidate, args=args, raw_input=raw_input, clean_input=search_input
            )

        parts: List[str] = search_input.split()
        head = parts[0] if parts else ""
        name = f"{self._prefix}{head}" if is_shortcut else head
        _log.debug("No registered name matched %r; falling back to %r", raw_input, name)
        return ParseResult(name=name, args=parts[1:], raw_input=raw_input, clean_input=search_input)
