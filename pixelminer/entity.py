"""Entities in the world and the playable character."""

from __future__ import annotations

import time
from typing import Collection, Optional

from .animation import Animations, TimeSource
from .movement import Movement, MovementComponent, MovementDirection, MovementState
from .tiles import GRID_SIZE, Rect, Sprite


class Entity:
    """A sprite in the world that may move and animate."""

    def __init__(
        self,
        name: str,
        spawn_position: tuple[float, float],
        texture_size: tuple[int, int],
        scale: float,
        time_source: TimeSource = time.monotonic,
    ) -> None:
        self.name = name
        self.id = id(self)
        self.spawn_position = (float(spawn_position[0]), float(spawn_position[1]))
        self.sprite = Sprite(
            texture_rect=Rect(0, 0, texture_size[0], texture_size[1]),
            position=self.spawn_position,
            scale=(scale, scale),
        )
        self._time_source = time_source
        self.movement: Optional[MovementComponent] = None
        self.animations: Optional[Animations] = None

    def _create_movement(self, max_velocity: float, flags: int) -> None:
        self.movement = MovementComponent(self.sprite, max_velocity, flags)

    def _create_animations(self) -> None:
        self.animations = Animations(self.name, self.id, self.sprite, self._time_source)

    @property
    def position(self) -> tuple[float, float]:
        return self.sprite.position

    @position.setter
    def position(self, value: tuple[float, float]) -> None:
        self.sprite.position = (float(value[0]), float(value[1]))

    def update(self, dt: float) -> None:
        """Advance the entity by one frame; nothing happens for a plain entity."""

    def move(self, dt: float, direction: MovementDirection) -> None:
        """Move in a direction, or report that the entity cannot move."""
        if self.movement is None:
            print(
                f'[ Entity: "{self.name}" ID: {self.id:x} ]: '
                "Tried to move without an initialized movement component."
            )
            return
        self.movement.move(dt, direction)

    def play_animation(self, name: str) -> None:
        """Play a named animation, or report that the entity has none."""
        if self.animations is None:
            print(
                f'[ Entity: "{name}" ID: {self.id:x} ]: '
                "Tried to play animation without an initialized animation component."
            )
            return
        self.animations.play(name)

    def _to_grid(self, x: float, y: float) -> tuple[int, int]:
        sx, sy = self.sprite.scale
        return (int(x / (GRID_SIZE * sx)), int(y / (GRID_SIZE * sy)))

    def grid_position(self) -> tuple[int, int]:
        """Grid cell of the sprite's top-left corner."""
        return self._to_grid(*self.sprite.position)

    def center(self) -> tuple[float, float]:
        """Centre of the sprite in world coordinates."""
        bounds = self.sprite.global_bounds()
        x, y = self.sprite.position
        return (x + bounds.width / 2.0, y + bounds.height / 2.0)

    def center_grid_position(self) -> tuple[int, int]:
        """Grid cell of the sprite's centre."""
        return self._to_grid(*self.center())


_PLAYER_FRAME = (16, 24)
_PLAYER_ANIMATIONS = (
    ("IdleDown", 10000, (0, 0), (0, 0)),
    ("IdleUp", 10000, (0, 1), (0, 1)),
    ("IdleLeft", 10000, (0, 2), (0, 2)),
    ("IdleRight", 10000, (0, 3), (0, 3)),
    ("WalkDown", 150, (0, 0), (3, 0)),
    ("WalkUp", 150, (0, 1), (3, 1)),
    ("WalkLeft", 150, (0, 2), (3, 2)),
    ("WalkRight", 150, (0, 3), (3, 3)),
)

_KEY_DIRECTIONS = (
    ("w", MovementDirection.UP),
    ("s", MovementDirection.DOWN),
    ("a", MovementDirection.LEFT),
    ("d", MovementDirection.RIGHT),
)


class Player(Entity):
    """The playable character, steered with the W, A, S and D keys."""

    def __init__(
        self,
        spawn_position: tuple[float, float],
        texture_size: tuple[int, int],
        scale: float,
        time_source: TimeSource = time.monotonic,
    ) -> None:
        super().__init__("Player 1", spawn_position, texture_size, scale, time_source)
        self._create_movement(100.0, Movement.ALLOW_ALL)
        self._create_animations()
        for name, frametime, start, end in _PLAYER_ANIMATIONS:
            self.animations.add(name, frametime, _PLAYER_FRAME, start, end)

        x, y = self.spawn_position
        print(
            f'[ Player ] -> Player "{self.name}" with id {self.id:x} '
            f"spawned at x: {x:g}, y: {y:g}"
        )

    def update(
        self,
        dt: float,
        pressed_keys: Collection[str] = (),
        update_movement: bool = True,
    ) -> None:
        """Move according to the pressed keys, then play the matching animation.

        ``pressed_keys`` holds lower-case key names; only the first of
        w, s, a, d that is pressed takes effect.
        """
        if update_movement:
            self.movement.update()
            keys = {key.lower() for key in pressed_keys}
            for key, direction in _KEY_DIRECTIONS:
                if key in keys:
                    self.move(dt, direction)
                    break

        state = self.movement.state
        facing = self.movement.direction_name
        if state is MovementState.IDLE:
            self.animations.play("Idle" + facing, True)
        elif state is MovementState.WALKING:
            self.animations.play("Walk" + facing, True)