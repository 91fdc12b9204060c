"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from storyboard_composer.types import (
    Animation,
    LoopType,
    OsbEasing,
    Sprite,
    Vector2,
)


def add_moves(sprite: Sprite, count: int, step: int, duration: int, offset: int = 0) -> None:
    """Add linear move commands walking right one unit per command."""
    for i in range(count):
        start = offset + i * step
        sprite.move(start, start + duration, Vector2(i, 0), Vector2(i + 1, 0))


@pytest.fixture
def small_sprite() -> Sprite:
    """Create a sprite well under its command limit."""
    sprite = Sprite("sb/dot.png")
    add_moves(sprite, 100, step=20, duration=20)
    sprite.fade(0, 2000, 0.0, 1.0)
    return sprite


@pytest.fixture
def long_move_sprite() -> Sprite:
    """Create a sprite with 450 contiguous linear moves over 0-9000ms."""
    sprite = Sprite("sb/dot.png")
    add_moves(sprite, 450, step=20, duration=20)
    return sprite


@pytest.fixture
def faded_move_sprite() -> Sprite:
    """Create a sprite with an early fade-in followed by 450 moves."""
    sprite = Sprite("sb/dot.png")
    sprite.fade(0, 100, 0.0, 1.0)
    add_moves(sprite, 450, step=20, duration=20)
    return sprite


@pytest.fixture
def long_fade_sprite() -> Sprite:
    """Create a sprite with one fade spanning 450 moves."""
    sprite = Sprite("sb/dot.png")
    sprite.fade(0, 9000, 1.0, 0.0)
    add_moves(sprite, 450, step=20, duration=20)
    return sprite


@pytest.fixture
def eased_rotate_sprite() -> Sprite:
    """Create a sprite with an eased rotation followed by 400 moves."""
    sprite = Sprite("sb/dot.png")
    sprite.rotate(0, 5000, 0.0, 3.0, easing=OsbEasing.OUT_QUAD)
    add_moves(sprite, 400, step=10, duration=10, offset=5000)
    return sprite


@pytest.fixture
def loop_once_animation() -> Animation:
    """Create a single-loop animation whose commands run to 4800ms."""
    animation = Animation("sb/spark.png", frame_count=10, frame_delay=100, loop_type=LoopType.LOOP_ONCE)
    add_moves(animation, 400, step=12, duration=12)
    return animation


@pytest.fixture
def loop_forever_animation() -> Animation:
    """Create a repeating animation whose commands run to 4800ms."""
    animation = Animation("sb/spark.png", frame_count=10, frame_delay=100)
    add_moves(animation, 400, step=12, duration=12)
    return animation
