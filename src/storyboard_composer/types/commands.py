"""Sprite command types.

Every command is an immutable, timed change to one sprite property. The
closed set of kinds is `CommandKind`; interpolated properties share
`ValueCommand`, flags use `ParameterCommand`, and loops/triggers group
nested commands.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Iterator

from .easing import OsbEasing, ease
from .values import Color, CommandValue, Vector2, lerp_value


class CommandKind(Enum):
    """Kinds of sprite commands, in property-group order."""

    MOVE = "move"
    MOVE_X = "move_x"
    MOVE_Y = "move_y"
    ROTATE = "rotate"
    SCALE = "scale"
    SCALE_VEC = "scale_vec"
    FADE = "fade"
    COLOR = "color"
    PARAMETER = "parameter"
    LOOP = "loop"
    TRIGGER = "trigger"

    @property
    def order(self) -> int:
        """Position of this kind in property-group order."""
        return _KIND_ORDER[self]


_KIND_ORDER = {kind: index for index, kind in enumerate(CommandKind)}

VALUE_KINDS: dict[CommandKind, type] = {
    CommandKind.MOVE: Vector2,
    CommandKind.MOVE_X: float,
    CommandKind.MOVE_Y: float,
    CommandKind.ROTATE: float,
    CommandKind.SCALE: float,
    CommandKind.SCALE_VEC: Vector2,
    CommandKind.FADE: float,
    CommandKind.COLOR: Color,
}


class ParameterType(Enum):
    """Flags set by parameter commands."""

    FLIP_H = "H"
    FLIP_V = "V"
    ADDITIVE = "A"


@dataclass(frozen=True)
class Command(ABC):
    """Base class for all commands."""

    kind: ClassVar[CommandKind]

    @property
    @abstractmethod
    def start_time(self) -> int:
        """Time the command starts, in milliseconds."""

    @property
    @abstractmethod
    def end_time(self) -> int:
        """Time the command ends, in milliseconds."""

    @property
    def duration(self) -> int:
        """Length of the command in milliseconds."""
        return self.end_time - self.start_time

    @property
    def is_compound(self) -> bool:
        """Whether this command groups nested commands."""
        return False

    @property
    def command_count(self) -> int:
        """Number of commands including nested ones."""
        return 1


def _check_times(start_time: int, end_time: int) -> None:
    if end_time < start_time:
        raise ValueError(f"Command ends before it starts: {start_time} > {end_time}")


@dataclass(frozen=True)
class ValueCommand(Command):
    """An interpolated change to a move/rotate/scale/fade/color property."""

    property_kind: CommandKind
    easing: OsbEasing
    start: int
    end: int
    start_value: CommandValue
    end_value: CommandValue

    def __post_init__(self):
        if self.property_kind not in VALUE_KINDS:
            raise ValueError(f"{self.property_kind} is not an interpolated property")
        _check_times(self.start, self.end)

    @property
    def kind(self) -> CommandKind:  # type: ignore[override]
        return self.property_kind

    @property
    def start_time(self) -> int:
        return self.start

    @property
    def end_time(self) -> int:
        return self.end

    def value_at(self, time: float) -> CommandValue:
        """Get the rendered value at a time.

        Outside the command's span the nearer endpoint's value holds.

        Args:
            time: Time in milliseconds.

        Returns:
            The eased value.
        """
        if time >= self.end:
            return self.end_value
        if time <= self.start:
            return self.start_value
        progress = (time - self.start) / (self.end - self.start)
        return lerp_value(self.start_value, self.end_value, ease(self.easing, progress))

    def clipped(self, start_time: int, end_time: int) -> "ValueCommand":
        """Narrow the command to [start_time, end_time].

        Values at the new bounds are taken from this command's own curve.
        """
        return replace(
            self,
            start=start_time,
            end=end_time,
            start_value=self.value_at(start_time),
            end_value=self.value_at(end_time),
        )


@dataclass(frozen=True)
class ParameterCommand(Command):
    """Sets a flip/additive flag for its time span."""

    kind: ClassVar[CommandKind] = CommandKind.PARAMETER

    parameter: ParameterType
    start: int
    end: int
    easing: OsbEasing = OsbEasing.NONE

    def __post_init__(self):
        _check_times(self.start, self.end)

    @property
    def start_time(self) -> int:
        return self.start

    @property
    def end_time(self) -> int:
        return self.end

    def value_at(self, time: float) -> ParameterType:
        """Parameters are never interpolated."""
        return self.parameter

    def clipped(self, start_time: int, end_time: int) -> "ParameterCommand":
        """Narrow the command's time span."""
        return replace(self, start=start_time, end=end_time)


@dataclass(frozen=True)
class LoopCommand(Command):
    """Repeats a group of commands.

    Nested command times are relative to the loop start.
    """

    kind: ClassVar[CommandKind] = CommandKind.LOOP

    start: int
    loop_count: int
    commands: tuple[Command, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.loop_count < 1:
            raise ValueError(f"Loop count must be positive: {self.loop_count}")
        object.__setattr__(self, "commands", tuple(self.commands))

    @property
    def start_time(self) -> int:
        return self.start

    @property
    def commands_end_time(self) -> int:
        """End of one iteration, relative to the loop start."""
        return max((c.end_time for c in self.commands), default=0)

    @property
    def end_time(self) -> int:
        return self.start + self.commands_end_time * self.loop_count

    @property
    def is_compound(self) -> bool:
        return True

    @property
    def command_count(self) -> int:
        return 1 + sum(c.command_count for c in self.commands)


@dataclass(frozen=True)
class TriggerCommand(Command):
    """Runs a group of commands when a named gameplay trigger fires."""

    kind: ClassVar[CommandKind] = CommandKind.TRIGGER

    trigger_name: str
    start: int
    end: int
    group: int = 0
    commands: tuple[Command, ...] = field(default_factory=tuple)

    def __post_init__(self):
        _check_times(self.start, self.end)
        object.__setattr__(self, "commands", tuple(self.commands))

    @property
    def start_time(self) -> int:
        return self.start

    @property
    def end_time(self) -> int:
        return self.end

    @property
    def is_compound(self) -> bool:
        return True

    @property
    def command_count(self) -> int:
        return 1 + sum(c.command_count for c in self.commands)


def iter_commands(commands) -> Iterator[Command]:
    """Iterate over commands depth-first, including nested ones."""
    for command in commands:
        yield command
        if command.is_compound:
            yield from iter_commands(command.commands)
