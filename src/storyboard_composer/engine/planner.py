"""Fragmentation planning: candidate split times and segment windows."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from storyboard_composer.types import Command

from .classifier import is_splittable


class CandidateTimes:
    """Set of integer times at which a fragment may start or end.

    Backed by a boolean mask over the inclusive range [first, last].
    """

    def __init__(self, first: int, last: int):
        """Initialize with every time in [first, last] available.

        Args:
            first: Earliest candidate time.
            last: Latest candidate time.
        """
        if last < first:
            raise ValueError(f"Empty candidate range: {first}..{last}")
        self._offset = int(first)
        self._mask = np.ones(int(last) - int(first) + 1, dtype=bool)

    @classmethod
    def spanning(cls, commands: Sequence[Command]) -> "CandidateTimes":
        """Create candidates covering every command's time span."""
        if not commands:
            raise ValueError("Cannot plan fragments for an empty command list")
        first = min(c.start_time for c in commands)
        last = max(c.end_time for c in commands)
        return cls(math.floor(first), math.ceil(last))

    def copy(self) -> "CandidateTimes":
        clone = CandidateTimes.__new__(CandidateTimes)
        clone._offset = self._offset
        clone._mask = self._mask.copy()
        return clone

    def _index(self, time: float) -> int:
        return int(time) - self._offset

    def remove_between(self, start: float, end: float, below: Optional[float] = None) -> None:
        """Remove times strictly between start and end.

        Args:
            start: Exclusive lower bound.
            end: Exclusive upper bound.
            below: If given, only times strictly below this are removed.
        """
        if below is not None:
            end = min(end, below)
        low = max(math.floor(start) + 1 - self._offset, 0)
        high = min(math.ceil(end) - 1 - self._offset, len(self._mask) - 1)
        if low <= high:
            self._mask[low:high + 1] = False

    def remove_below(self, time: float) -> None:
        """Remove every time strictly before the given time."""
        high = min(math.ceil(time) - self._offset, len(self._mask))
        if high > 0:
            self._mask[:high] = False

    def _times(self) -> np.ndarray:
        return np.flatnonzero(self._mask) + self._offset

    @property
    def first(self) -> int:
        """Smallest remaining time."""
        times = self._times()
        if times.size == 0:
            raise ValueError("No candidate times left")
        return int(times[0])

    @property
    def last(self) -> int:
        """Largest remaining time."""
        times = self._times()
        if times.size == 0:
            raise ValueError("No candidate times left")
        return int(times[-1])

    def largest_below(self, time: float) -> Optional[int]:
        """Largest remaining time strictly below the given time."""
        times = self._times()
        times = times[times < time]
        return int(times[-1]) if times.size else None

    def smallest_above(self, time: float) -> Optional[int]:
        """Smallest remaining time strictly above the given time."""
        times = self._times()
        times = times[times > time]
        return int(times[0]) if times.size else None

    def __contains__(self, time: object) -> bool:
        if not isinstance(time, (int, float, np.integer)) or time != int(time):
            return False
        index = self._index(time)
        return 0 <= index < len(self._mask) and bool(self._mask[index])

    def __len__(self) -> int:
        return int(np.count_nonzero(self._mask))

    def __iter__(self):
        return iter(int(t) for t in self._times())

    def __repr__(self) -> str:
        return f"CandidateTimes({len(self)} times)"


def fragmentation_times(commands: Sequence[Command]) -> CandidateTimes:
    """Compute the times at which fragments may be split.

    Every integer time over the commands' span is a candidate, except the
    interior of commands that cannot be clipped.

    Args:
        commands: The sprite's commands.

    Returns:
        The candidate times.
    """
    candidates = CandidateTimes.spanning(commands)
    for command in commands:
        if not is_splittable(command):
            candidates.remove_between(command.start_time, command.end_time)
    return candidates


def target_size(remaining_count: int, max_command_count: int) -> int:
    """Number of commands the next fragment should hold.

    The last two fragments are balanced instead of leaving a small
    trailing remainder.
    """
    if max_command_count < remaining_count < max_command_count * 2:
        return math.ceil(remaining_count / 2)
    return max_command_count


def plan_window(
    remaining: Sequence[Command],
    candidates: CandidateTimes,
    max_command_count: int,
    reserved: int = 0,
) -> tuple[int, int]:
    """Choose the [start, end) window of the next fragment.

    The window ends where the first command that no longer fits starts,
    snapped down to a candidate time.

    Args:
        remaining: Commands not yet fully consumed.
        candidates: Remaining candidate split times.
        max_command_count: Renderer command limit.
        reserved: Slots taken by continuity commands at the window start.

    Returns:
        Tuple of (start_time, end_time).
    """
    start_time = candidates.first
    size = target_size(len(remaining), max_command_count)
    capacity = max(size - reserved, 1)

    if len(remaining) < size or len(remaining) <= capacity:
        return start_time, candidates.last + 1

    ordered = sorted(remaining, key=lambda c: c.start_time)
    cut_time = ordered[capacity].start_time
    if cut_time in candidates:
        end_time = cut_time
    else:
        end_time = candidates.largest_below(cut_time)

    if end_time is None or end_time <= start_time:
        # Too many commands start at the window start; take the next safe time
        end_time = candidates.smallest_above(start_time)
        if end_time is None:
            end_time = candidates.last + 1

    return start_time, end_time
