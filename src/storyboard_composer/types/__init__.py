"""Type definitions for Storyboard Composer."""

from .values import (
    Vector2,
    Color,
    CommandValue,
    lerp_value,
)
from .easing import (
    OsbEasing,
    ease,
)
from .commands import (
    Command,
    CommandKind,
    ValueCommand,
    ParameterCommand,
    ParameterType,
    LoopCommand,
    TriggerCommand,
    VALUE_KINDS,
    iter_commands,
)
from .timeline import (
    PropertyTimeline,
    TimelineKey,
)
from .sprites import (
    Sprite,
    Animation,
    Origin,
    LoopType,
    OsbLayer,
    TIMELINE_KEYS,
    DEFAULT_MAX_COMMAND_COUNT,
    timeline_key,
)

__all__ = [
    # Values
    "Vector2",
    "Color",
    "CommandValue",
    "lerp_value",
    # Easing
    "OsbEasing",
    "ease",
    # Commands
    "Command",
    "CommandKind",
    "ValueCommand",
    "ParameterCommand",
    "ParameterType",
    "LoopCommand",
    "TriggerCommand",
    "VALUE_KINDS",
    "iter_commands",
    # Timelines
    "PropertyTimeline",
    "TimelineKey",
    # Sprites
    "Sprite",
    "Animation",
    "Origin",
    "LoopType",
    "OsbLayer",
    "TIMELINE_KEYS",
    "DEFAULT_MAX_COMMAND_COUNT",
    "timeline_key",
]
