"""Storyboard layers and `.osb` file export."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Optional, TextIO, Union

from storyboard_composer.errors import ExportError, StoryboardError
from storyboard_composer.types import (
    DEFAULT_MAX_COMMAND_COUNT,
    Animation,
    LoopType,
    Origin,
    OsbLayer,
    Sprite,
    Vector2,
)
from storyboard_composer.types.sprites import DEFAULT_POSITION

from .osb_writer import write_sprite
from .settings import ExportSettings

logger = logging.getLogger(__name__)

OSU_FILENAME_PATTERN = re.compile(r"^(.+ - .+ \(.+\)) \[.+\]\.osu$")


class ExportCancelled(StoryboardError):
    """Raised when an export is cancelled between sprites."""


class StoryboardLayer:
    """A named group of sprites written to one renderer layer."""

    def __init__(self, name: str, osb_layer: OsbLayer = OsbLayer.FOREGROUND):
        """Initialize the layer.

        Args:
            name: Display name of the layer.
            osb_layer: Renderer layer the sprites are written to.
        """
        self.name = name
        self.osb_layer = osb_layer
        self.sprites: list[Sprite] = []

    def add(self, sprite: Sprite) -> Sprite:
        """Add an existing sprite to the layer."""
        self.sprites.append(sprite)
        return sprite

    def create_sprite(
        self,
        texture_path: str,
        origin: Origin = Origin.CENTRE,
        initial_position: Vector2 = DEFAULT_POSITION,
        max_command_count: int = DEFAULT_MAX_COMMAND_COUNT,
    ) -> Sprite:
        """Create a sprite on this layer."""
        return self.add(Sprite(texture_path, origin, initial_position, max_command_count))

    def create_animation(
        self,
        texture_path: str,
        frame_count: int,
        frame_delay: float,
        loop_type: LoopType = LoopType.LOOP_FOREVER,
        origin: Origin = Origin.CENTRE,
        initial_position: Vector2 = DEFAULT_POSITION,
        max_command_count: int = DEFAULT_MAX_COMMAND_COUNT,
    ) -> Animation:
        """Create a frame animation on this layer."""
        animation = Animation(
            texture_path,
            frame_count,
            frame_delay,
            loop_type=loop_type,
            origin=origin,
            initial_position=initial_position,
            max_command_count=max_command_count,
        )
        self.add(animation)
        return animation

    def copy(self) -> "StoryboardLayer":
        """Copy the layer with its own sprite list."""
        layer = StoryboardLayer(self.name, self.osb_layer)
        layer.sprites = list(self.sprites)
        return layer

    def write_osb_sprites(
        self,
        stream: TextIO,
        settings: ExportSettings,
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """Write every sprite of the layer.

        Args:
            stream: Text stream to write to.
            settings: Export settings.
            cancel_event: Checked before each sprite.

        Returns:
            Number of sprites written, after fragmentation.

        Raises:
            ExportCancelled: If the cancel event is set.
            ExportError: If a sprite cannot be exported.
        """
        written = 0
        for sprite in self.sprites:
            if cancel_event is not None and cancel_event.is_set():
                raise ExportCancelled(f"Export cancelled in layer {self.name!r}")
            written += write_sprite(sprite, stream, settings, self.osb_layer)
        return written


class Storyboard:
    """Ordered collection of storyboard layers."""

    def __init__(self, layers: Optional[list[StoryboardLayer]] = None):
        self.layers: list[StoryboardLayer] = list(layers or [])

    def create_layer(self, name: str, osb_layer: OsbLayer = OsbLayer.FOREGROUND) -> StoryboardLayer:
        """Add a new layer."""
        layer = StoryboardLayer(name, osb_layer)
        self.layers.append(layer)
        return layer

    def get_layer(self, name: str) -> StoryboardLayer:
        """Get a layer by name, creating it on the foreground if missing."""
        for layer in self.layers:
            if layer.name == name:
                return layer
        return self.create_layer(name)

    def snapshot(self) -> "Storyboard":
        """Copy the layer list so the export is isolated from later edits."""
        return Storyboard([layer.copy() for layer in self.layers])

    def write_osb(
        self,
        stream: TextIO,
        settings: Optional[ExportSettings] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """Write the [Events] section.

        Args:
            stream: Text stream to write to.
            settings: Export settings.
            cancel_event: Checked before each sprite.

        Returns:
            Number of sprites written, after fragmentation.
        """
        settings = settings or ExportSettings()
        newline = settings.newline
        written = 0

        stream.write("[Events]" + newline)
        stream.write("//Background and Video events" + newline)
        for osb_layer in OsbLayer:
            stream.write(f"//Storyboard Layer {osb_layer.index} ({osb_layer.value})" + newline)
            for layer in self.layers:
                if layer.osb_layer == osb_layer:
                    written += layer.write_osb_sprites(stream, settings, cancel_event)
        stream.write("//Storyboard Sound Samples" + newline)
        return written

    def export_osb(
        self,
        path: Union[str, Path],
        settings: Optional[ExportSettings] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Path:
        """Export to an .osb file, replacing it atomically.

        The file is written beside the target and only moved into place once
        complete; on failure the target is left untouched.

        Args:
            path: Destination file.
            settings: Export settings.
            cancel_event: Checked before each sprite.

        Returns:
            The destination path.
        """
        path = Path(path)
        logger.info("Exporting osb to %s", path)

        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as stream:
                written = self.write_osb(stream, settings, cancel_event)
            if cancel_event is not None and cancel_event.is_set():
                raise ExportCancelled(f"Export to {path} cancelled")
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

        logger.info("Exported %d sprites to %s", written, path)
        return path

    async def export_osb_async(
        self,
        path: Union[str, Path],
        settings: Optional[ExportSettings] = None,
    ) -> Path:
        """Export on a worker thread from a snapshot of the layers.

        Cancelling the awaiting task stops the export before the next sprite.

        Args:
            path: Destination file.
            settings: Export settings.

        Returns:
            The destination path.
        """
        snapshot = self.snapshot()
        cancel_event = threading.Event()
        try:
            return await asyncio.to_thread(snapshot.export_osb, path, settings, cancel_event)
        except asyncio.CancelledError:
            cancel_event.set()
            raise


def resolve_osb_path(mapset_dir: Union[str, Path]) -> Path:
    """Find the .osb file a mapset's difficulties share.

    The name is derived from the first "Artist - Title (Creator) [Diff].osu"
    file, else an existing .osb is reused, else "storyboard.osb".

    Args:
        mapset_dir: The mapset directory.

    Returns:
        Path of the .osb file.

    Raises:
        ExportError: If the directory does not exist.
    """
    mapset_dir = Path(mapset_dir)
    if not mapset_dir.is_dir():
        raise ExportError(f"Mapset directory doesn't exist: {mapset_dir}")

    for osu_path in sorted(mapset_dir.glob("*.osu")):
        match = OSU_FILENAME_PATTERN.match(osu_path.name)
        if match:
            return mapset_dir / f"{match.group(1)}.osb"

    for osb_path in sorted(mapset_dir.glob("*.osb")):
        return osb_path

    return mapset_dir / "storyboard.osb"
