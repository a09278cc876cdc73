"""
Modal (vim-style) key-sequence recognition.

The matcher is a pure function of the buffered sequence and a pattern table
supplied by the host. ``KeySequenceBuffer`` adds the per-input-stream state.

States, by buffer content:
- idle: empty buffer
- count-pending: only a count prefix (``[1-9][0-9]*``)
- chord-pending: a strict prefix of at least one pattern
- complete: a full pattern, ``<count>m`` or ``.``
- invalid: anything else; the buffer must be cleared
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from mindcmd.constants import (
    DEFAULT_KEY_PATTERNS,
    DOT_REPEAT_KEY,
    ESCAPE_KEY,
    NUMBERED_LIST_KEY,
)
from mindcmd.core.common.exceptions import KeySequenceError
from mindcmd.core.domain.parsed_command import KeySequenceResult

logger = logging.getLogger(__name__)

_COUNT_PREFIX = re.compile(r"^([1-9][0-9]*)(.*)$", re.DOTALL)

NUMBERED_SEPARATOR = ":"


class KeyPatternTable:
    """
    Immutable mapping of key sequences to key-command identifiers.

    Raises:
        KeySequenceError: If a sequence is empty or starts with a digit 1-9,
            which would be read as a count prefix and never match.
    """

    def __init__(self, patterns: Mapping[str, str]) -> None:
        for sequence, identifier in patterns.items():
            if not sequence:
                raise KeySequenceError("Key sequence must not be empty")
            if sequence[0] in "123456789":
                raise KeySequenceError(
                    f"Key sequence '{sequence}' starts with a count digit",
                    details={"sequence": sequence},
                )
            if not identifier:
                raise KeySequenceError(
                    f"Key sequence '{sequence}' maps to an empty command",
                    details={"sequence": sequence},
                )

        self._patterns: dict[str, str] = dict(patterns)
        self._partials: frozenset[str] = frozenset(
            sequence[:i]
            for sequence in self._patterns
            for i in range(1, len(sequence))
        )
        self._keys: frozenset[str] = frozenset(
            key for sequence in self._patterns for key in sequence
        )

    @classmethod
    def default(cls) -> KeyPatternTable:
        return cls(DEFAULT_KEY_PATTERNS)

    def __contains__(self, sequence: object) -> bool:
        return sequence in self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    def lookup(self, sequence: str) -> str | None:
        return self._patterns.get(sequence)

    def is_prefix(self, sequence: str) -> bool:
        """Return True if ``sequence`` is a strict prefix of a pattern."""
        return sequence in self._partials

    @property
    def keys(self) -> frozenset[str]:
        return self._keys

    def items(self) -> Iterable[tuple[str, str]]:
        return self._patterns.items()


class KeySequenceMatcher:
    """Recognizes counts, chords, ``<count>m`` and dot-repeat in a key buffer."""

    def __init__(
        self,
        table: KeyPatternTable | None = None,
        *,
        numbered_key: str = NUMBERED_LIST_KEY,
    ) -> None:
        self.table = table if table is not None else KeyPatternTable.default()
        self.numbered_key = numbered_key

    def match(self, sequence: str) -> KeySequenceResult:
        normalized = sequence.strip()

        count: int | None = None
        command_part = normalized
        count_match = _COUNT_PREFIX.match(normalized)
        if count_match:
            count = int(count_match.group(1))
            command_part = count_match.group(2)
            if not command_part:
                return KeySequenceResult(is_partial=True, count=count)

        if count is not None and command_part == self.numbered_key:
            return KeySequenceResult(
                is_complete=True,
                command=f"{self.numbered_key}{NUMBERED_SEPARATOR}{count}",
                count=count,
            )

        if command_part == DOT_REPEAT_KEY:
            return KeySequenceResult(
                is_complete=True,
                command=DOT_REPEAT_KEY,
                count=count,
                is_dot_repeat=True,
            )

        identifier = self.table.lookup(command_part)
        if identifier is not None:
            return KeySequenceResult(is_complete=True, command=identifier, count=count)

        if self.table.is_prefix(command_part):
            return KeySequenceResult(is_partial=True, count=count)

        return KeySequenceResult(should_clear=True)

    def is_valid_key(self, key: str) -> bool:
        return key in self.table.keys

    def known_keys(self) -> list[str]:
        """Return every key used by a pattern plus digits and escape."""
        keys = set(self.table.keys)
        keys.add(ESCAPE_KEY)
        keys.update("0123456789")
        return sorted(keys)

    def can_continue(self, sequence: str, key: str) -> bool:
        result = self.match(sequence + key)
        return result.is_complete or result.is_partial


class KeySequenceBuffer:
    """
    Accumulates keystrokes for one input stream.

    The buffer is cleared whenever a sequence completes or turns invalid,
    and on ``escape``.
    """

    def __init__(self, matcher: KeySequenceMatcher | None = None) -> None:
        self.matcher = matcher if matcher is not None else KeySequenceMatcher()
        self._buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer

    def reset(self) -> None:
        self._buffer = ""

    def feed(self, key: str) -> KeySequenceResult:
        if key.lower() == ESCAPE_KEY:
            self.reset()
            return KeySequenceResult(should_clear=True)

        candidate = self._buffer + key
        result = self.matcher.match(candidate)

        if result.is_partial:
            self._buffer = candidate
        else:
            if result.should_clear:
                logger.debug("Discarding key sequence: %r", candidate)
            self.reset()

        return result
