"""Exception types for Storyboard Composer."""

from __future__ import annotations

from typing import Any, Optional


class StoryboardError(Exception):
    """Base class for storyboard errors."""


class ExportError(StoryboardError):
    """Raised when a sprite cannot be exported.

    Attributes:
        message: The error without sprite or command details.
        sprite: The sprite being exported, if known.
        command: The offending command, if known.
    """

    def __init__(
        self,
        message: str,
        sprite: Optional[Any] = None,
        command: Optional[Any] = None,
    ):
        self.message = message
        self.sprite = sprite
        self.command = command
        details = []
        if sprite is not None:
            details.append(f"sprite={sprite!r}")
        if command is not None:
            details.append(f"command={command!r}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)
