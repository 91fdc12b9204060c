"""Storyboard sprite and animation objects."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from .commands import (
    Command,
    CommandKind,
    LoopCommand,
    ParameterCommand,
    ParameterType,
    TriggerCommand,
    ValueCommand,
)
from .easing import OsbEasing
from .timeline import PropertyTimeline, TimelineKey
from .values import Color, CommandValue, Vector2

DEFAULT_MAX_COMMAND_COUNT = 300
DEFAULT_POSITION = Vector2(320, 240)


class Origin(Enum):
    """Anchor point of a sprite's texture."""

    TOP_LEFT = "TopLeft"
    TOP_CENTRE = "TopCentre"
    TOP_RIGHT = "TopRight"
    CENTRE_LEFT = "CentreLeft"
    CENTRE = "Centre"
    CENTRE_RIGHT = "CentreRight"
    BOTTOM_LEFT = "BottomLeft"
    BOTTOM_CENTRE = "BottomCentre"
    BOTTOM_RIGHT = "BottomRight"


class LoopType(Enum):
    """How a frame animation repeats."""

    LOOP_FOREVER = "LoopForever"
    LOOP_ONCE = "LoopOnce"


class OsbLayer(Enum):
    """Renderer layers, in the order they are exported."""

    BACKGROUND = "Background"
    FAIL = "Fail"
    PASS = "Pass"
    FOREGROUND = "Foreground"

    @property
    def index(self) -> int:
        return list(OsbLayer).index(self)


TIMELINE_KEYS: tuple[TimelineKey, ...] = (
    CommandKind.MOVE,
    CommandKind.MOVE_X,
    CommandKind.MOVE_Y,
    CommandKind.ROTATE,
    CommandKind.SCALE,
    CommandKind.SCALE_VEC,
    CommandKind.FADE,
    CommandKind.COLOR,
    ParameterType.FLIP_H,
    ParameterType.FLIP_V,
    ParameterType.ADDITIVE,
)


def timeline_key(command: Command) -> Optional[TimelineKey]:
    """Get the timeline a top-level command belongs to, if any."""
    if isinstance(command, ParameterCommand):
        return command.parameter
    if isinstance(command, ValueCommand):
        return command.kind
    return None


class Sprite:
    """A textured storyboard object driven by commands."""

    def __init__(
        self,
        texture_path: str,
        origin: Origin = Origin.CENTRE,
        initial_position: Vector2 = DEFAULT_POSITION,
        max_command_count: int = DEFAULT_MAX_COMMAND_COUNT,
    ):
        """Initialize the sprite.

        Args:
            texture_path: Path of the texture, relative to the mapset.
            origin: Texture anchor.
            initial_position: Position before any move command.
            max_command_count: Renderer limit on commands per object.
        """
        if max_command_count < 1:
            raise ValueError(f"max_command_count must be positive: {max_command_count}")
        self.texture_path = texture_path
        self.origin = origin
        self.initial_position = initial_position
        self.max_command_count = max_command_count
        self._commands: list[Command] = []
        self._timelines: dict[TimelineKey, PropertyTimeline] = {
            key: PropertyTimeline(key) for key in TIMELINE_KEYS
        }
        self._open_group: Optional[Union[LoopCommand, TriggerCommand]] = None
        self._group_commands: list[Command] = []

    # Command access

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def command_count(self) -> int:
        """Number of commands, nested group commands included."""
        return sum(c.command_count for c in self._commands)

    @property
    def timelines(self) -> dict[TimelineKey, PropertyTimeline]:
        return dict(self._timelines)

    def timeline(self, key: TimelineKey) -> PropertyTimeline:
        return self._timelines[key]

    @property
    def has_commands(self) -> bool:
        return bool(self._commands)

    @property
    def start_time(self) -> int:
        return min(c.start_time for c in self._commands)

    @property
    def end_time(self) -> int:
        return max(c.end_time for c in self._commands)

    def add_command(self, command: Command) -> Command:
        """Add a command to the sprite, or to the open loop/trigger group."""
        if self._open_group is not None:
            if command.is_compound:
                raise ValueError("Loop and trigger groups cannot be nested")
            self._group_commands.append(command)
            return command

        self._commands.append(command)
        key = timeline_key(command)
        if key is not None:
            self._timelines[key].add(command)
        return command

    # Authoring API

    def _value(
        self,
        kind: CommandKind,
        start_time: int,
        end_time: int,
        start_value: CommandValue,
        end_value: Optional[CommandValue],
        easing: OsbEasing,
    ) -> Command:
        if end_value is None:
            end_value = start_value
        return self.add_command(
            ValueCommand(kind, easing, start_time, end_time, start_value, end_value)
        )

    def move(self, start_time, end_time, start_value: Vector2, end_value=None, easing=OsbEasing.NONE):
        return self._value(CommandKind.MOVE, start_time, end_time, start_value, end_value, easing)

    def move_x(self, start_time, end_time, start_value: float, end_value=None, easing=OsbEasing.NONE):
        return self._value(CommandKind.MOVE_X, start_time, end_time, start_value, end_value, easing)

    def move_y(self, start_time, end_time, start_value: float, end_value=None, easing=OsbEasing.NONE):
        return self._value(CommandKind.MOVE_Y, start_time, end_time, start_value, end_value, easing)

    def rotate(self, start_time, end_time, start_value: float, end_value=None, easing=OsbEasing.NONE):
        return self._value(CommandKind.ROTATE, start_time, end_time, start_value, end_value, easing)

    def scale(self, start_time, end_time, start_value: float, end_value=None, easing=OsbEasing.NONE):
        return self._value(CommandKind.SCALE, start_time, end_time, start_value, end_value, easing)

    def scale_vec(self, start_time, end_time, start_value: Vector2, end_value=None, easing=OsbEasing.NONE):
        return self._value(CommandKind.SCALE_VEC, start_time, end_time, start_value, end_value, easing)

    def fade(self, start_time, end_time, start_value: float, end_value=None, easing=OsbEasing.NONE):
        return self._value(CommandKind.FADE, start_time, end_time, start_value, end_value, easing)

    def color(self, start_time, end_time, start_value: Color, end_value=None, easing=OsbEasing.NONE):
        return self._value(CommandKind.COLOR, start_time, end_time, start_value, end_value, easing)

    def flip_h(self, start_time: int, end_time: int) -> Command:
        return self.add_command(ParameterCommand(ParameterType.FLIP_H, start_time, end_time))

    def flip_v(self, start_time: int, end_time: int) -> Command:
        return self.add_command(ParameterCommand(ParameterType.FLIP_V, start_time, end_time))

    def additive(self, start_time: int, end_time: int) -> Command:
        return self.add_command(ParameterCommand(ParameterType.ADDITIVE, start_time, end_time))

    def start_loop_group(self, start_time: int, loop_count: int) -> None:
        """Open a loop group; following commands are relative to start_time."""
        self._open(LoopCommand(start_time, loop_count))

    def start_trigger_group(
        self, trigger_name: str, start_time: int, end_time: int, group: int = 0
    ) -> None:
        """Open a trigger group."""
        self._open(TriggerCommand(trigger_name, start_time, end_time, group))

    def end_group(self) -> Command:
        """Close the open group and add it to the sprite.

        Returns:
            The completed loop or trigger command.
        """
        if self._open_group is None:
            raise ValueError("No open loop or trigger group")
        group = self._open_group
        commands = tuple(self._group_commands)
        self._open_group = None
        self._group_commands = []
        if isinstance(group, LoopCommand):
            completed = LoopCommand(group.start, group.loop_count, commands)
        else:
            completed = TriggerCommand(group.trigger_name, group.start, group.end, group.group, commands)
        return self.add_command(completed)

    def _open(self, group: Union[LoopCommand, TriggerCommand]) -> None:
        if self._open_group is not None:
            raise ValueError("Loop and trigger groups cannot be nested")
        self._open_group = group
        self._group_commands = []

    def copy_empty(self) -> "Sprite":
        """Create a sprite with the same header and no commands."""
        return Sprite(
            self.texture_path,
            origin=self.origin,
            initial_position=self.initial_position,
            max_command_count=self.max_command_count,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.texture_path!r}, {len(self._commands)} commands)"


class Animation(Sprite):
    """A sprite cycling through numbered texture frames."""

    def __init__(
        self,
        texture_path: str,
        frame_count: int,
        frame_delay: float,
        loop_type: LoopType = LoopType.LOOP_FOREVER,
        origin: Origin = Origin.CENTRE,
        initial_position: Vector2 = DEFAULT_POSITION,
        max_command_count: int = DEFAULT_MAX_COMMAND_COUNT,
    ):
        """Initialize the animation.

        Args:
            texture_path: Texture path; the renderer appends the frame number.
            frame_count: Number of frames in one cycle.
            frame_delay: Milliseconds per frame.
            loop_type: Whether the cycle repeats.
            origin: Texture anchor.
            initial_position: Position before any move command.
            max_command_count: Renderer limit on commands per object.
        """
        super().__init__(texture_path, origin, initial_position, max_command_count)
        if frame_count < 1:
            raise ValueError(f"frame_count must be positive: {frame_count}")
        if frame_delay < 0:
            raise ValueError(f"frame_delay cannot be negative: {frame_delay}")
        self.frame_count = frame_count
        self.frame_delay = frame_delay
        self.loop_type = loop_type

    @property
    def loop_duration(self) -> float:
        """Length of one frame cycle in milliseconds."""
        return self.frame_count * self.frame_delay

    @property
    def animation_end_time(self) -> float:
        """Time the frame cycling stops mattering."""
        if self.loop_type == LoopType.LOOP_ONCE:
            return self.start_time + self.loop_duration
        return self.end_time

    def copy_empty(self) -> "Animation":
        return Animation(
            self.texture_path,
            self.frame_count,
            self.frame_delay,
            loop_type=self.loop_type,
            origin=self.origin,
            initial_position=self.initial_position,
            max_command_count=self.max_command_count,
        )
