"""Sprite-sheet animations and a named collection of them."""

from __future__ import annotations

import sys
import time
from enum import Enum
from typing import Callable, Optional

from .tiles import Rect, Sprite

TimeSource = Callable[[], float]


class AnimationDirection(Enum):
    FORWARDS = 0
    BACKWARDS = 1


class _Clock:
    """A stopwatch that can be paused and resumed."""

    def __init__(self, time_source: TimeSource) -> None:
        self._time = time_source
        self._start = time_source()
        self._paused_at: Optional[float] = None

    def elapsed(self) -> float:
        if self._paused_at is not None:
            return self._paused_at
        return self._time() - self._start

    def elapsed_ms(self) -> int:
        return int(self.elapsed() * 1000)

    def restart(self) -> None:
        self._start = self._time()
        self._paused_at = None

    def stop(self) -> None:
        if self._paused_at is None:
            self._paused_at = self.elapsed()

    def start(self) -> None:
        if self._paused_at is not None:
            self._start = self._time() - self._paused_at
            self._paused_at = None

    @property
    def running(self) -> bool:
        return self._paused_at is None


class Animation:
    """Steps a sprite's texture rectangle through a range of frames on a sheet."""

    def __init__(
        self,
        sprite: Sprite,
        frametime_ms: int,
        frame_size: tuple[int, int],
        start_frame: tuple[int, int],
        end_frame: tuple[int, int],
        boomerang: bool = False,
        time_source: TimeSource = time.monotonic,
    ) -> None:
        self.sprite = sprite
        self.frametime_ms = frametime_ms
        self.frame_size = (int(frame_size[0]), int(frame_size[1]))
        self.boomerang = boomerang
        self.direction = AnimationDirection.FORWARDS

        fw, fh = self.frame_size
        self.start_position = (start_frame[0] * fw, start_frame[1] * fh)
        self.end_position = (end_frame[0] * fw, end_frame[1] * fh)
        self.current_position = self.start_position

        self._clock = _Clock(time_source)
        self.sprite.texture_rect = self.current_frame

    @property
    def current_frame(self) -> Rect:
        """The rectangle of the sheet currently shown."""
        x, y = self.current_position
        return Rect(x, y, self.frame_size[0], self.frame_size[1])

    def _step_forwards(self) -> None:
        fw, fh = self.frame_size
        x, y = self.current_position
        end_x, end_y = self.end_position
        x += fw
        if x > end_x:
            x = 0
            y += fh
            if y > end_y:
                if self.boomerang:
                    self.direction = AnimationDirection.BACKWARDS
                    x, y = end_x - fw, end_y - fh
                else:
                    x, y = self.start_position
        self.current_position = (x, y)

    def _step_backwards(self) -> None:
        fw, fh = self.frame_size
        x, y = self.current_position
        x -= fw
        if x < 0:
            x = self.end_position[0] - fw
            y -= fh
            if y < 0:
                if self.boomerang:
                    self.direction = AnimationDirection.FORWARDS
                    x = self.start_position[0] + fw
                    y = self.start_position[1] + fh
                else:
                    x, y = self.end_position
        self.current_position = (x, y)

    def play(self) -> None:
        """Advance one frame once the frame time has passed, then show the current frame."""
        if self._clock.elapsed_ms() >= self.frametime_ms:
            self._clock.restart()
            if self.direction is AnimationDirection.FORWARDS:
                self._step_forwards()
            else:
                self._step_backwards()
        self.sprite.texture_rect = self.current_frame

    def pause(self) -> None:
        """Stop the frame timer."""
        self._clock.stop()

    def resume(self) -> None:
        """Restart the frame timer from where it was paused."""
        self._clock.start()

    def is_running(self) -> bool:
        """Whether the frame timer is running."""
        return self._clock.running

    def reset(self) -> None:
        """Return to the first frame, playing forwards."""
        self.direction = AnimationDirection.FORWARDS
        self.current_position = self.start_position


class Animations:
    """Named animations of one entity, all driving the same sprite."""

    def __init__(
        self,
        entity_name: str,
        entity_id: int,
        sprite: Sprite,
        time_source: TimeSource = time.monotonic,
    ) -> None:
        self.entity_name = entity_name
        self.entity_id = entity_id
        self.sprite = sprite
        self._time_source = time_source
        self.animations: dict[str, Animation] = {}

    def add(
        self,
        name: str,
        frametime_ms: int,
        frame_size: tuple[int, int],
        start_frame: tuple[int, int],
        end_frame: tuple[int, int],
        boomerang: bool = False,
    ) -> Animation:
        """Create an animation under ``name``, replacing any of that name."""
        animation = Animation(
            self.sprite,
            frametime_ms,
            frame_size,
            start_frame,
            end_frame,
            boomerang,
            self._time_source,
        )
        self.animations[name] = animation
        return animation

    def play(self, name: str, reset_others: bool = False) -> bool:
        """Play the named animation; return False and report if it does not exist."""
        if reset_others:
            for other_name, animation in self.animations.items():
                if other_name != name:
                    animation.reset()
        animation = self.animations.get(name)
        if animation is None:
            print(
                f'[ AnimationFunctionality::play ] -> Invalid animation "{name}" for entity '
                f"{self.entity_name} (ID: {self.entity_id})",
                file=sys.stderr,
            )
            return False
        animation.play()
        return True

    def reset(self, name: str) -> bool:
        """Reset the named animation; return False and report if it does not exist."""
        animation = self.animations.get(name)
        if animation is None:
            print(
                f'[ AnimationFunctionality::reset ] -> Invalid animation "{name}" for entity '
                f"{self.entity_name} (ID: {self.entity_id})",
                file=sys.stderr,
            )
            return False
        animation.reset()
        return True