"""Fragmentation engine for Storyboard Composer."""

from __future__ import annotations

from .classifier import is_splittable, is_fragmentable
from .planner import CandidateTimes, fragmentation_times, plan_window, target_size
from .segments import Fragment, build_fragment, clip_command, continuity_commands
from .fragmenter import (
    SpriteFragmenter,
    AnimationFragmenter,
    fragmenter_for,
    fragment_sprite,
)

__all__ = [
    "is_splittable",
    "is_fragmentable",
    "CandidateTimes",
    "fragmentation_times",
    "plan_window",
    "target_size",
    "Fragment",
    "build_fragment",
    "clip_command",
    "continuity_commands",
    "SpriteFragmenter",
    "AnimationFragmenter",
    "fragmenter_for",
    "fragment_sprite",
]
