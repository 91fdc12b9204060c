"""Decides which commands and sprites can be fragmented."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storyboard_composer.types import Command, OsbEasing, ParameterCommand, ValueCommand

if TYPE_CHECKING:
    from storyboard_composer.types import Sprite


def is_splittable(command: Command) -> bool:
    """Check whether a command may be cut at an arbitrary time.

    Only linear commands, instants and parameter flags can be clipped
    without changing the rendered curve. Loop and trigger groups never can.

    Args:
        command: The command to check.

    Returns:
        True if a fragment boundary may fall inside the command.
    """
    if isinstance(command, ParameterCommand):
        return True
    if not isinstance(command, ValueCommand):
        return False
    if command.start_time == command.end_time:
        return True
    return command.easing == OsbEasing.NONE


def is_fragmentable(sprite: Sprite) -> bool:
    """Check whether a sprite is eligible for fragmentation.

    Args:
        sprite: The sprite to check.

    Returns:
        True if the sprite reaches its command limit and none of its
        timelines overlap.
    """
    if sprite.command_count < sprite.max_command_count:
        return False
    return not any(timeline.has_overlap for timeline in sprite.timelines.values())
