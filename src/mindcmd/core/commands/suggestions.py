"""
Command name suggestions for unknown or partial input.
"""

from __future__ import annotations

from collections.abc import Iterable

from mindcmd.constants import DEFAULT_MAX_EDIT_DISTANCE, DEFAULT_SUGGESTION_LIMIT
from mindcmd.core.domain.commands.command import Command


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit cost for substitution/insertion/deletion."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(a) + 1))
    for j in range(1, len(b) + 1):
        current = [j] + [0] * len(a)
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            current[i] = min(
                current[i - 1] + 1,
                previous[i] + 1,
                previous[i - 1] + cost,
            )
        previous = current

    return previous[len(a)]


def generate_suggestions(
    input_str: str,
    commands: Iterable[Command],
    *,
    limit: int = DEFAULT_SUGGESTION_LIMIT,
    max_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
) -> list[str]:
    """
    Rank command names that could be meant by ``input_str``.

    Order: names starting with the query, then aliases starting with it
    (both in registration order), then names within ``max_distance`` edits.
    Matching is case-insensitive; results are de-duplicated and capped at
    ``limit``. An empty query returns the first ``limit`` names unranked.
    """
    available = list(commands)
    query = input_str.strip().lower()
    if not query:
        return [cmd.name for cmd in available[:limit]]

    suggestions: list[str] = []

    for cmd in available:
        if cmd.name.lower().startswith(query):
            suggestions.append(cmd.name)

    for cmd in available:
        for alias in cmd.aliases:
            if alias.lower().startswith(query):
                suggestions.append(alias)

    for cmd in available:
        if len(suggestions) >= limit:
            break
        if levenshtein_distance(query, cmd.name.lower()) <= max_distance:
            suggestions.append(cmd.name)

    return list(dict.fromkeys(suggestions))[:limit]
