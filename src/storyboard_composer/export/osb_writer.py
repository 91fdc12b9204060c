"""Writes sprites and animations in the storyboard text format."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, TextIO

from storyboard_composer.engine import fragment_sprite
from storyboard_composer.errors import ExportError
from storyboard_composer.types import (
    Animation,
    Color,
    Command,
    CommandKind,
    LoopCommand,
    OsbLayer,
    ParameterCommand,
    ParameterType,
    Sprite,
    TriggerCommand,
    ValueCommand,
    Vector2,
)

from .settings import ExportSettings


COMMAND_KEYWORDS: dict[CommandKind, str] = {
    CommandKind.MOVE: "M",
    CommandKind.MOVE_X: "MX",
    CommandKind.MOVE_Y: "MY",
    CommandKind.ROTATE: "R",
    CommandKind.SCALE: "S",
    CommandKind.SCALE_VEC: "V",
    CommandKind.FADE: "F",
    CommandKind.COLOR: "C",
    CommandKind.PARAMETER: "P",
    CommandKind.LOOP: "L",
    CommandKind.TRIGGER: "T",
}


class OsbSpriteWriter:
    """Writes sprites as a header line followed by command lines."""

    def __init__(
        self,
        stream: TextIO,
        settings: Optional[ExportSettings] = None,
        layer: OsbLayer = OsbLayer.FOREGROUND,
    ):
        """Initialize the writer.

        Args:
            stream: Text stream to write to.
            settings: Export settings.
            layer: Renderer layer written in sprite headers.
        """
        self.stream = stream
        self.settings = settings or ExportSettings()
        self.layer = layer

    def write(self, sprite: Sprite) -> int:
        """Fragment a sprite if needed and write every resulting sprite.

        Nothing is written for a sprite whose export fails.

        Args:
            sprite: The sprite to write.

        Returns:
            Number of sprites written.

        Raises:
            ExportError: If a command cannot be exported.
        """
        try:
            outputs = fragment_sprite(sprite) if self.settings.fragment else [sprite]
            lines = [line for output in outputs for line in self.sprite_lines(output)]
        except ExportError as e:
            raise ExportError(e.message, sprite=sprite, command=e.command) from e

        newline = self.settings.newline
        self.stream.write("".join(line + newline for line in lines))
        return len(outputs)

    def sprite_lines(self, sprite: Sprite) -> Iterator[str]:
        """Get the header and command lines for one output sprite."""
        yield self.header(sprite)
        yield from self.command_lines(sprite, sprite.commands, depth=1)

    def header(self, sprite: Sprite) -> str:
        """Get the header line of a sprite."""
        fmt = self.settings.format_number
        position = sprite.initial_position
        return (
            f"Sprite,{self.layer.value},{sprite.origin.value},"
            f"\"{sprite.texture_path.strip()}\",{fmt(position.x)},{fmt(position.y)}"
        )

    def command_lines(self, sprite: Sprite, commands: Iterable[Command], depth: int) -> Iterator[str]:
        """Get the lines for a command list, groups included."""
        indent = " " * depth
        for command in commands:
            yield indent + self.command_line(sprite, command)
            if command.is_compound:
                yield from self.command_lines(sprite, command.commands, depth + 1)

    def command_line(self, sprite: Sprite, command: Command) -> str:
        """Format a single command, without indentation.

        Raises:
            ExportError: If the command kind has no keyword.
        """
        keyword = COMMAND_KEYWORDS.get(getattr(command, "kind", None))
        if keyword is None:
            raise ExportError("Unrecognized command kind", sprite=sprite, command=command)

        if isinstance(command, LoopCommand):
            return f"{keyword},{command.start_time},{command.loop_count}"
        if isinstance(command, TriggerCommand):
            line = f"{keyword},{command.trigger_name},{command.start_time},{command.end_time}"
            if command.group != 0:
                line += f",{command.group}"
            return line

        end_time = "" if command.end_time == command.start_time else str(command.end_time)
        line = f"{keyword},{int(command.easing)},{command.start_time},{end_time}"
        if isinstance(command, ParameterCommand):
            return f"{line},{self.format_value(command.parameter)}"
        if isinstance(command, ValueCommand):
            values = self.format_value(command.start_value)
            if command.end_value != command.start_value:
                values += "," + self.format_value(command.end_value)
            return f"{line},{values}"
        raise ExportError("Unrecognized command kind", sprite=sprite, command=command)

    def format_value(self, value) -> str:
        """Format a command value."""
        fmt = self.settings.format_number
        if isinstance(value, Vector2):
            return f"{fmt(value.x)},{fmt(value.y)}"
        if isinstance(value, Color):
            return ",".join(str(channel) for channel in value.to_rgb())
        if isinstance(value, ParameterType):
            return value.value
        return fmt(value)


class OsbAnimationWriter(OsbSpriteWriter):
    """Writes frame animations; adds frame data to the header."""

    def header(self, sprite: Sprite) -> str:
        if not isinstance(sprite, Animation):
            # Fragments past a finished single loop are plain sprites
            return super().header(sprite)

        fmt = self.settings.format_number
        position = sprite.initial_position
        return (
            f"Animation,{self.layer.value},{sprite.origin.value},"
            f"\"{sprite.texture_path.strip()}\",{fmt(position.x)},{fmt(position.y)},"
            f"{sprite.frame_count},{fmt(sprite.frame_delay)},{sprite.loop_type.value}"
        )


def writer_for(
    sprite: Sprite,
    stream: TextIO,
    settings: Optional[ExportSettings] = None,
    layer: OsbLayer = OsbLayer.FOREGROUND,
) -> OsbSpriteWriter:
    """Get the writer matching a sprite's type."""
    if isinstance(sprite, Animation):
        return OsbAnimationWriter(stream, settings, layer)
    return OsbSpriteWriter(stream, settings, layer)


def write_sprite(
    sprite: Sprite,
    stream: TextIO,
    settings: Optional[ExportSettings] = None,
    layer: OsbLayer = OsbLayer.FOREGROUND,
) -> int:
    """Write a sprite, fragmenting it when needed.

    Args:
        sprite: The sprite or animation to write.
        stream: Text stream to write to.
        settings: Export settings.
        layer: Renderer layer.

    Returns:
        Number of sprites written.
    """
    return writer_for(sprite, stream, settings, layer).write(sprite)
