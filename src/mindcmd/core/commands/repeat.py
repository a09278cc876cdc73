"""
Memory of the last repeatable change, replayed by dot-repeat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from mindcmd.core.domain.model_bases import InternalDTO
from mindcmd.core.domain.parsed_command import ArgsMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepeatRecord(InternalDTO):
    command_name: str
    args: ArgsMap = field(default_factory=dict)
    count: int | None = None


class RepeatRegistry:
    """Holds the most recent repeatable command invocation."""

    def __init__(self) -> None:
        self._last: RepeatRecord | None = None

    def record(
        self, command_name: str, args: ArgsMap | None = None, count: int | None = None
    ) -> RepeatRecord:
        self._last = RepeatRecord(
            command_name=command_name, args=dict(args or {}), count=count
        )
        logger.debug("Recorded repeatable change: %s", self._last)
        return self._last

    def last(self) -> RepeatRecord | None:
        return self._last

    def clear(self) -> None:
        self._last = None
