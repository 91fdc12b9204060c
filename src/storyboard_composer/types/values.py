"""Command value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Vector2:
    """2D vector used for positions and scale vectors."""

    x: float
    y: float

    def lerp(self, other: "Vector2", t: float) -> "Vector2":
        """Interpolate towards another vector."""
        return Vector2(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
        )


@dataclass(frozen=True)
class Color:
    """RGB color with channels in the 0-1 range."""

    r: float
    g: float
    b: float

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "Color":
        """Create a color from 0-255 channels."""
        return cls(r / 255.0, g / 255.0, b / 255.0)

    def to_rgb(self) -> tuple[int, int, int]:
        """Get the 0-255 channels, clamped."""
        return tuple(
            max(0, min(255, int(round(channel * 255))))
            for channel in (self.r, self.g, self.b)
        )

    def lerp(self, other: "Color", t: float) -> "Color":
        """Interpolate towards another color."""
        return Color(
            self.r + (other.r - self.r) * t,
            self.g + (other.g - self.g) * t,
            self.b + (other.b - self.b) * t,
        )


CommandValue = Union[float, Vector2, Color]


def lerp_value(start: CommandValue, end: CommandValue, t: float) -> CommandValue:
    """Interpolate between two command values of the same type.

    Args:
        start: Value at t = 0.
        end: Value at t = 1.
        t: Eased progress.

    Returns:
        The interpolated value.
    """
    if isinstance(start, (Vector2, Color)):
        return start.lerp(end, t)
    return start + (end - start) * t
