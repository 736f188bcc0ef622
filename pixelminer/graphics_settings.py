"""Graphics settings stored as JSON."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from .jsonfmt import JSONError, get_as, parse_file, stringify

_UINT32_MASK = 2**32 - 1


@dataclass
class GraphicsSettings:
    """Screen resolution, frame limit and display flags."""

    screen_width: int = 0
    screen_height: int = 0
    framerate_limit: int = 0
    fullscreen: bool = False
    vsync: bool = False

    def load_from_file(self, path: str | os.PathLike, desktop_size: tuple[int, int]) -> bool:
        """Load settings from ``path``; return whether it succeeded.

        Unless the resolution object has exactly two entries, the resolution
        is taken from ``desktop_size``.
        """
        try:
            obj = get_as(parse_file(path), dict)
            resolution = get_as(obj["resolution"], dict)
            if len(resolution) == 2:
                width = get_as(resolution["width"], int)
                height = get_as(resolution["height"], int)
            else:
                width, height = desktop_size
            framerate = get_as(obj["framerateLimit"], int)
            fullscreen = get_as(obj["fullscreen"], bool)
            vsync = get_as(obj["vsync"], bool)
        except JSONError as exc:
            print(
                f"[ GraphicsSettings ] -> Could not load settings from file "
                f"{os.fspath(path)} :\n      {exc}",
                file=sys.stderr,
            )
            return False

        self.screen_width = width & _UINT32_MASK
        self.screen_height = height & _UINT32_MASK
        self.framerate_limit = framerate & _UINT32_MASK
        self.fullscreen = fullscreen
        self.vsync = vsync
        print(f"[ GraphicsSettings ] -> Loaded settings from file: {os.fspath(path)}")
        return True

    def save_to_file(self, path: str | os.PathLike) -> bool:
        """Write settings to ``path``; return whether it succeeded."""
        obj = {
            "resolution": {"width": self.screen_width, "height": self.screen_height},
            "framerateLimit": self.framerate_limit,
            "fullscreen": self.fullscreen,
            "vsync": self.vsync,
        }
        try:
            with open(path, "w", encoding="utf-8") as handle:
                handle.write(stringify(obj))
        except OSError:
            print(f"[ GraphicsSettings ] -> Could not save settings to file {os.fspath(path)}")
            return False

        print(f"[ GraphicsSettings ] -> Saved settings to file: {os.fspath(path)}")
        return True