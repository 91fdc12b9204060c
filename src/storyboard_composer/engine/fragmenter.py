"""Splits sprites that exceed the renderer's command limit."""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from storyboard_composer.types import Animation, Command, LoopType, Sprite

from .classifier import is_fragmentable
from .planner import CandidateTimes, fragmentation_times, plan_window
from .segments import Fragment, build_fragment, continuity_commands

logger = logging.getLogger(__name__)


class SpriteFragmenter:
    """Splits a sprite's commands into fragments under its command limit.

    The source sprite is never modified; every output sprite is new.
    """

    def __init__(self, sprite: Sprite):
        """Initialize the fragmenter.

        Args:
            sprite: The sprite to split.
        """
        self.sprite = sprite

    def fragmentation_times(self) -> CandidateTimes:
        """Times at which a fragment may start or end."""
        return fragmentation_times(self.sprite.commands)

    def needs_fragmenting(self) -> bool:
        """Check whether the sprite exceeds its limit and allows fragmentation."""
        sprite = self.sprite
        return is_fragmentable(sprite) and len(sprite.commands) > sprite.max_command_count

    def fragments(self) -> Iterator[Fragment]:
        """Plan and build fragments until every command is consumed.

        Yields:
            Fragments in time order.
        """
        commands = list(self.sprite.commands)
        if not commands:
            return

        candidates = self.fragmentation_times() if self.needs_fragmenting() else None
        if candidates is None or len(candidates) < 2:
            logger.debug("Not fragmenting %r", self.sprite)
            yield Fragment(self.sprite.start_time, self.sprite.end_time, tuple(commands))
            return

        timelines = self.sprite.timelines
        remaining: Sequence[Command] = commands
        while remaining:
            reserved = len(continuity_commands(timelines, candidates.first, remaining))
            window = plan_window(
                remaining, candidates, self.sprite.max_command_count, reserved=reserved
            )
            fragment, remaining = build_fragment(window, remaining, timelines)
            candidates.remove_below(window[1])
            yield fragment

    def fragment(self) -> list[Sprite]:
        """Split the sprite.

        Returns:
            One sprite per fragment; a single copy when no split is needed.
        """
        if not self.sprite.has_commands:
            return [self.sprite.copy_empty()]

        sprites = [self.create_sprite(fragment.commands) for fragment in self.fragments()]
        if len(sprites) > 1:
            logger.debug(
                "Split %r (%d commands) into %d sprites",
                self.sprite,
                self.sprite.command_count,
                len(sprites),
            )
        return sprites

    def create_sprite(self, commands: Sequence[Command]) -> Sprite:
        """Create an output sprite holding the given commands."""
        sprite = self.sprite.copy_empty()
        for command in commands:
            sprite.add_command(command)
        return sprite


class AnimationFragmenter(SpriteFragmenter):
    """Fragmenter for frame animations.

    Fragments may only start on a loop cycle boundary, because frame timing
    restarts with every new animation object.
    """

    sprite: Animation

    def fragmentation_times(self) -> CandidateTimes:
        candidates = super().fragmentation_times()
        animation = self.sprite
        loop_duration = animation.loop_duration
        if loop_duration <= 0:
            return candidates

        last = candidates.last
        end_time = animation.animation_end_time
        cycle_start = float(animation.start_time)
        while cycle_start < end_time:
            candidates.remove_between(cycle_start, cycle_start + loop_duration, below=last)
            cycle_start += loop_duration
        return candidates

    def create_sprite(self, commands: Sequence[Command]) -> Sprite:
        animation = self.sprite
        if (
            commands
            and animation.loop_type == LoopType.LOOP_ONCE
            and animation.loop_duration > 0
            and min(c.start_time for c in commands) >= animation.animation_end_time
        ):
            # The single cycle is over; frame cycling no longer matters
            sprite = Sprite.copy_empty(animation)
            for command in commands:
                sprite.add_command(command)
            return sprite
        return super().create_sprite(commands)


def fragmenter_for(sprite: Sprite) -> SpriteFragmenter:
    """Get the fragmenter matching a sprite's type."""
    if isinstance(sprite, Animation):
        return AnimationFragmenter(sprite)
    return SpriteFragmenter(sprite)


def fragment_sprite(sprite: Sprite) -> list[Sprite]:
    """Split a sprite into sprites that respect its command limit.

    Args:
        sprite: The sprite to split.

    Returns:
        The output sprites, in time order.
    """
    return fragmenter_for(sprite).fragment()
