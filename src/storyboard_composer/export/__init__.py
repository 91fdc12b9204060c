"""Storyboard export for Storyboard Composer."""

from __future__ import annotations

from .settings import ExportSettings
from .osb_writer import (
    OsbSpriteWriter,
    OsbAnimationWriter,
    COMMAND_KEYWORDS,
    writer_for,
    write_sprite,
)
from .storyboard import (
    Storyboard,
    StoryboardLayer,
    ExportCancelled,
    resolve_osb_path,
)

__all__ = [
    "ExportSettings",
    "OsbSpriteWriter",
    "OsbAnimationWriter",
    "COMMAND_KEYWORDS",
    "writer_for",
    "write_sprite",
    "Storyboard",
    "StoryboardLayer",
    "ExportCancelled",
    "resolve_osb_path",
]
