"""Directional movement of a sprite."""

from __future__ import annotations

from enum import IntEnum, IntFlag

from .tiles import Sprite


class Movement(IntFlag):
    ALLOW_UP = 0b0001
    ALLOW_DOWN = 0b0010
    ALLOW_LEFT = 0b0100
    ALLOW_RIGHT = 0b1000
    ALLOW_ALL = 0b1111


class MovementState(IntEnum):
    IDLE = 0
    WALKING = 1
    SPRINTING = 2
    JUMPING = 3
    CROUCHING = 4


class MovementDirection(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


_REQUIRED_FLAG = {
    MovementDirection.UP: Movement.ALLOW_UP,
    MovementDirection.DOWN: Movement.ALLOW_DOWN,
    MovementDirection.LEFT: Movement.ALLOW_LEFT,
    MovementDirection.RIGHT: Movement.ALLOW_RIGHT,
}

_UNIT_STEP = {
    MovementDirection.UP: (0.0, -1.0),
    MovementDirection.DOWN: (0.0, 1.0),
    MovementDirection.LEFT: (-1.0, 0.0),
    MovementDirection.RIGHT: (1.0, 0.0),
}


class MovementComponent:
    """Moves a sprite in the allowed directions and tracks its state and facing."""

    def __init__(self, sprite: Sprite, max_velocity: float, flags: int = Movement.ALLOW_ALL) -> None:
        self.sprite = sprite
        self.max_velocity = max_velocity
        self.flags = Movement(flags)
        self.state = MovementState.IDLE
        self.direction = MovementDirection.DOWN

    @property
    def direction_name(self) -> str:
        """The facing direction as a word: Up, Down, Left or Right."""
        return self.direction.label

    def update(self) -> None:
        """Return to idle; a move during the frame sets walking again."""
        self.state = MovementState.IDLE

    def move(self, dt: float, direction: MovementDirection) -> None:
        """Move the sprite if the direction is allowed; otherwise do nothing."""
        direction = MovementDirection(direction)
        if not self.flags & _REQUIRED_FLAG[direction]:
            return
        self.direction = direction
        self.state = MovementState.WALKING
        distance = self.max_velocity * self.sprite.scale[0] * dt
        ux, uy = _UNIT_STEP[direction]
        self.sprite.move(ux * distance, uy * distance)