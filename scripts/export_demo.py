#!/usr/bin/env python3
"""Build a demo storyboard and export it as an .osb file."""

import logging
import math
import sys
from pathlib import Path

# Add src to path for running directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from storyboard_composer.errors import StoryboardError
from storyboard_composer.export import ExportSettings, Storyboard, resolve_osb_path
from storyboard_composer.types import Color, LoopType, Origin, OsbEasing, OsbLayer, Vector2


def build_storyboard(max_commands: int) -> Storyboard:
    """Create a storyboard with a background, an orbiting dot and a spark."""
    storyboard = Storyboard()

    background = storyboard.create_layer("background", OsbLayer.BACKGROUND)
    bg = background.create_sprite("sb/bg.jpg", origin=Origin.CENTRE)
    bg.fade(0, 1000, 0.0, 1.0)
    bg.color(0, 60000, Color(0.2, 0.2, 0.4), Color(0.6, 0.3, 0.2))
    bg.fade(59000, 60000, 1.0, 0.0)

    # An orbit made of many short moves; long enough to need splitting
    dots = storyboard.create_layer("dots", OsbLayer.FOREGROUND)
    dot = dots.create_sprite("sb/dot.png", max_command_count=max_commands)
    dot.fade(0, 500, 0.0, 1.0)
    dot.additive(0, 60000)
    steps = 1200
    radius = 120
    for i in range(steps):
        a = 2 * math.pi * i / 200
        b = 2 * math.pi * (i + 1) / 200
        dot.move(
            i * 50,
            (i + 1) * 50,
            Vector2(320 + radius * math.cos(a), 240 + radius * math.sin(a)),
            Vector2(320 + radius * math.cos(b), 240 + radius * math.sin(b)),
        )
    dot.scale(0, 60000, 0.5, 1.0, easing=OsbEasing.IN_OUT_SINE)

    spark = dots.create_animation(
        "sb/spark.png",
        frame_count=8,
        frame_delay=60,
        loop_type=LoopType.LOOP_ONCE,
        max_command_count=max_commands,
    )
    spark.start_loop_group(2000, 10)
    spark.fade(0, 240, 1.0, 0.0)
    spark.end_group()

    return storyboard


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Export a demo storyboard")
    parser.add_argument(
        "mapset",
        nargs="?",
        default=".",
        help="Mapset directory the .osb file is written to (default: .)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Explicit .osb path, overriding the mapset lookup",
    )
    parser.add_argument(
        "--max-commands",
        type=int,
        default=300,
        help="Command limit per sprite (default: 300)",
    )
    parser.add_argument(
        "--no-fragment",
        action="store_true",
        help="Write sprites whole even when over the limit",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    storyboard = build_storyboard(args.max_commands)
    settings = ExportSettings(fragment=not args.no_fragment)

    try:
        path = args.output or resolve_osb_path(args.mapset)
        storyboard.export_osb(path, settings)
    except StoryboardError as e:
        print(f"Export failed: {e}")
        sys.exit(1)

    print(f"Wrote {path}")


if __name__ == "__main__":
    main()
