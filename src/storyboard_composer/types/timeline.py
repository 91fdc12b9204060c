"""Per-property command timelines."""

from __future__ import annotations

import bisect
from typing import Iterable, Optional, Union

from .commands import CommandKind, ParameterCommand, ParameterType, ValueCommand

TimelineKey = Union[CommandKind, ParameterType]
TimelineCommand = Union[ValueCommand, ParameterCommand]


class PropertyTimeline:
    """Commands for a single sprite property, ordered by start time."""

    def __init__(self, key: TimelineKey, commands: Optional[Iterable[TimelineCommand]] = None):
        """Initialize the timeline.

        Args:
            key: The property this timeline animates.
            commands: Initial commands, in insertion order.
        """
        self.key = key
        self._commands: list[TimelineCommand] = []
        self._spans: list[tuple[int, int]] = []
        for command in commands or ():
            self.add(command)

    def add(self, command: TimelineCommand) -> None:
        """Insert a command, keeping insertion order among equal spans."""
        span = (command.start_time, command.end_time)
        index = bisect.bisect_right(self._spans, span)
        self._spans.insert(index, span)
        self._commands.insert(index, command)

    @property
    def commands(self) -> tuple[TimelineCommand, ...]:
        return tuple(self._commands)

    @property
    def has_commands(self) -> bool:
        return bool(self._commands)

    @property
    def has_overlap(self) -> bool:
        """Whether any two commands run at the same time.

        Commands that only touch at a boundary instant do not overlap.
        """
        latest_end: Optional[int] = None
        for command in self._commands:
            if latest_end is not None and command.start_time < latest_end:
                return True
            if latest_end is None or command.end_time > latest_end:
                latest_end = command.end_time
        return False

    @property
    def start_time(self) -> int:
        return self._commands[0].start_time

    @property
    def end_time(self) -> int:
        return max(c.end_time for c in self._commands)

    def value_at(self, time: float):
        """Get the property value at a time.

        Before the first command its start value holds; between commands the
        most recently ended command's end value holds.

        Args:
            time: Time in milliseconds.

        Returns:
            The property value.

        Raises:
            ValueError: If the timeline has no commands.
        """
        if not self._commands:
            raise ValueError(f"Timeline {self.key} has no commands")

        first = self._commands[0]
        if time < first.start_time:
            return first.value_at(first.start_time)

        index = bisect.bisect_right(self._spans, (time, float("inf"))) - 1
        return self._commands[index].value_at(time)

    def __len__(self) -> int:
        return len(self._commands)

    def __repr__(self) -> str:
        return f"PropertyTimeline({self.key}, {len(self._commands)} commands)"
