"""Relevance ranking for interactive command search.

Runs on every palette keystroke, so scoring is a single pass over the table
with no caching between calls.

Scoring (higher is better, summed across independent signals):
 - Name tier (strongest applicable): exact 1000, prefix 800, substring 600
 - Multi-word: all query words prefix some name word 750, else 400 + 100 per matching word
   (only when both query and name have two or more words)
 - First name word starts with query: 550
 - Per alias, cumulative: exact 900, prefix 700, substring 500
 - Description contains query: 200
 - Category contains query: 100
 - Subsequence fallback, only while the sum is still 0 and the query has two or
   more characters: name 300, else description 100

Shortcut queries (starting with the sentinel, e.g. ``:d``) are alias lookups:
an exact alias hit scores 2000 so typed shortcuts always win; otherwise only
alias matching is considered and names/descriptions never match.

The weights are a compatibility contract; ordering tests depend on them.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Tuple

from .command_model import Command
from .command_parser import split_head

__all__ = [
    "CommandRanker",
    "fuzzy_match",
    "score_command",
    "SHORTCUT_EXACT_SCORE",
]

_log = logging.getLogger(__name__)

SHORTCUT_EXACT_SCORE = 2000
SHORTCUT_ALIAS_EXACT = 1500
SHORTCUT_ALIAS_PREFIX = 1000

NAME_EXACT = 1000
NAME_PREFIX = 800
NAME_CONTAINS = 600
MULTI_WORD_ALL = 750
MULTI_WORD_SOME_BASE = 400
MULTI_WORD_PER_WORD = 100
FIRST_WORD_PREFIX = 550
ALIAS_EXACT = 900
ALIAS_PREFIX = 700
ALIAS_CONTAINS = 500
DESCRIPTION_CONTAINS = 200
CATEGORY_CONTAINS = 100
FUZZY_NAME = 300
FUZZY_DESCRIPTION = 100


def fuzzy_match(text: str, query: str) -> bool:
    """True if every character of ``query`` appears in ``text`` in order (case-insensitive)."""
    t = text.lower()
    q = query.lower()
    t_idx = 0
    q_idx = 0
    while t_idx < len(t) and q_idx < len(q):
        if t[t_idx] == q[q_idx]:
            q_idx += 1
        t_idx += 1
    return q_idx == len(q)


def score_command(
    command: Command, query: str, *, shortcut: bool = False, alias_prefix: bool = False
) -> int:
    """Relevance of ``command`` for an already lower-cased ``query`` (0 = no match)."""
    score = 0

    if shortcut:
        for alias in command.aliases:
            alias_lower = alias.lower()
            if alias_lower == query:
                score += SHORTCUT_ALIAS_EXACT
            elif alias_prefix and alias_lower.startswith(query):
                score += SHORTCUT_ALIAS_PREFIX
        return score

    name = command.name.lower()
    description = command.description.lower()
    category = command.category.lower()

    if name == query:
        score += NAME_EXACT
    elif name.startswith(query):
        score += NAME_PREFIX
    elif query in name:
        score += NAME_CONTAINS

    name_words = name.split()
    query_words = query.split()
    if len(query_words) > 1 and len(name_words) > 1:
        matching = [q for q in query_words if any(n.startswith(q) for n in name_words)]
        if len(matching) == len(query_words):
            score += MULTI_WORD_ALL
        elif matching:
            score += MULTI_WORD_SOME_BASE + len(matching) * MULTI_WORD_PER_WORD

    if name_words and name_words[0].startswith(query):
        score += FIRST_WORD_PREFIX

    for alias in command.aliases:
        alias_lower = alias.lower()
        if alias_lower == query:
            score += ALIAS_EXACT
        elif alias_lower.startswith(query):
            score += ALIAS_PREFIX
        elif query in alias_lower:
            score += ALIAS_CONTAINS

    if query in description:
        score += DESCRIPTION_CONTAINS
    if query in category:
        score += CATEGORY_CONTAINS

    if score == 0 and len(query) >= 2:
        if fuzzy_match(name, query):
            score += FUZZY_NAME
        elif fuzzy_match(description, query):
            score += FUZZY_DESCRIPTION

    return score


class CommandRanker:
    """Scores and orders commands for a query.

    ``commands`` returns every registered command (availability is checked
    here); ``listing`` returns the name-sorted available commands used for
    blank queries.
    """

    def __init__(
        self,
        commands: Callable[[], List[Command]],
        listing: Callable[[], List[Command]],
        *,
        limit: int = 10,
        shortcut_prefix: str = ":",
        shortcut_alias_prefix: bool = False,
    ) -> None:
        self._commands = commands
        self._listing = listing
        self._limit = limit
        self._prefix = shortcut_prefix
        self._alias_prefix = shortcut_alias_prefix

    @property
    def limit(self) -> int:
        return self._limit

    def ranked(self, query: str) -> List[Tuple[int, Command]]:
        """All matching available commands with their scores, best first (uncapped)."""
        is_shortcut = bool(self._prefix) and query.startswith(self._prefix)
        if is_shortcut:
            token, _ = split_head(query)
            search_query = token.lower()
        else:
            search_query = query.lower()

        results: List[Tuple[int, Command]] = []
        for command in self._commands():
            if not command.is_available():
                continue
            if is_shortcut and any(a.lower() == search_query for a in command.aliases):
                score = SHORTCUT_EXACT_SCORE
            else:
                score = score_command(
                    command,
                    search_query,
                    shortcut=is_shortcut,
                    alias_prefix=self._alias_prefix,
                )
            if score > 0:
                results.append((score, command))
        results.sort(key=lambda t: (-t[0], t[1].name))
        return results

    def search(self, query: str) -> List[Command]:
        if not query.strip():
            return self._listing()[: self._limit]
        ranked = self.ranked(query)
        _log.debug("Search %r matched %d command(s)", query, len(ranked))
        return [cmd for _, cmd in ranked[: self._limit]]
