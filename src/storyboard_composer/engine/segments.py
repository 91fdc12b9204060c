"""Builds one fragment's commands from a planned time window."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from storyboard_composer.errors import ExportError
from storyboard_composer.types import (
    VALUE_KINDS,
    Command,
    LoopCommand,
    OsbEasing,
    ParameterCommand,
    PropertyTimeline,
    TimelineKey,
    TriggerCommand,
    ValueCommand,
)

from .classifier import is_splittable

KNOWN_COMMAND_TYPES = (ValueCommand, ParameterCommand, LoopCommand, TriggerCommand)


@dataclass(frozen=True)
class Fragment:
    """Commands making up one output sprite, and their time window."""

    start_time: int
    end_time: int
    commands: tuple[Command, ...]

    def __len__(self) -> int:
        return len(self.commands)


def clip_command(command: Command, start_time: int, end_time: int) -> Command:
    """Clip a command to a fragment window.

    Args:
        command: The command to clip.
        start_time: Fragment start.
        end_time: Fragment end.

    Returns:
        The command itself if it fits the window, else a narrowed copy.

    Raises:
        ExportError: If the command kind is not recognized.
        AssertionError: If a command that cannot be split straddles the window.
    """
    if not isinstance(command, KNOWN_COMMAND_TYPES):
        raise ExportError("Unrecognized command kind", command=command)

    clipped_start = max(start_time, command.start_time)
    clipped_end = min(end_time, command.end_time)
    if clipped_start == command.start_time and clipped_end == command.end_time:
        return command

    if not is_splittable(command):
        raise AssertionError(
            f"Fragment window [{start_time}, {end_time}) cuts through {command!r}"
        )
    return command.clipped(clipped_start, clipped_end)


def continuity_commands(
    timelines: Mapping[TimelineKey, PropertyTimeline],
    start_time: int,
    commands: Sequence[Command],
) -> list[ValueCommand]:
    """Create instant commands carrying property state into a new fragment.

    Each fragment becomes an independent renderer object, so every animated
    property that has no command at the fragment start is seeded with its
    value on the source timeline.

    Args:
        timelines: The source sprite's timelines.
        start_time: Fragment start.
        commands: Commands in the fragment, clipped or not; a command
            starting at or before the fragment start sets its property there.

    Returns:
        The synthesized commands, in property-group order.
    """
    started = {c.kind for c in commands if c.start_time <= start_time}
    synthesized = []
    for kind in VALUE_KINDS:
        timeline = timelines.get(kind)
        if timeline is None or not timeline.has_commands or kind in started:
            continue
        value = timeline.value_at(start_time)
        synthesized.append(
            ValueCommand(kind, OsbEasing.NONE, start_time, start_time, value, value)
        )
    return synthesized


def build_fragment(
    window: tuple[int, int],
    remaining: Sequence[Command],
    timelines: Mapping[TimelineKey, PropertyTimeline],
) -> tuple[Fragment, list[Command]]:
    """Materialize the fragment for a window.

    Args:
        window: The (start_time, end_time) window, end exclusive.
        remaining: Commands not yet fully consumed, in input order.
        timelines: The source sprite's timelines.

    Returns:
        Tuple of (fragment, commands still remaining afterwards).
    """
    start_time, end_time = window
    selected = [c for c in remaining if c.start_time < end_time]
    clipped = [clip_command(c, start_time, end_time) for c in selected]
    seeded = continuity_commands(timelines, start_time, clipped)

    # Commands ending inside the window are done; instants at the end carry over
    leftover = [c for c in remaining if not (c.start_time < end_time and c.end_time <= end_time)]
    return Fragment(start_time, end_time, tuple(seeded + clipped)), leftover
