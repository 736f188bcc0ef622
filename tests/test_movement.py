import pytest

from pixelminer.movement import Movement, MovementComponent, MovementDirection, MovementState
from pixelminer.tiles import Rect, Sprite


def make_sprite(scale=2.0):
    return Sprite(texture_rect=Rect(0, 0, 16, 24), position=(10.0, 10.0), scale=(scale, scale))


def test_initial_state():
    mover = MovementComponent(make_sprite(), 100.0, Movement.ALLOW_ALL)
    assert mover.state is MovementState.IDLE
    assert mover.direction is MovementDirection.DOWN
    assert mover.direction_name == "Down"


@pytest.mark.parametrize(
    "direction, sign_x, sign_y",
    [
        (MovementDirection.UP, 0, -1),
        (MovementDirection.DOWN, 0, 1),
        (MovementDirection.LEFT, -1, 0),
        (MovementDirection.RIGHT, 1, 0),
    ],
)
def test_move_in_each_direction(direction, sign_x, sign_y):
    sprite = make_sprite(scale=2.0)
    mover = MovementComponent(sprite, 100.0, Movement.ALLOW_ALL)
    mover.move(0.5, direction)
    dx = sprite.position[0] - 10.0
    dy = sprite.position[1] - 10.0
    assert (dx, dy) == pytest.approx((sign_x * 100.0, sign_y * 100.0))
    assert mover.state is MovementState.WALKING
    assert mover.direction is direction


def test_disallowed_direction_is_ignored():
    sprite = make_sprite()
    mover = MovementComponent(sprite, 100.0, Movement.ALLOW_UP)
    mover.move(1.0, MovementDirection.LEFT)
    assert sprite.position == (10.0, 10.0)
    assert mover.state is MovementState.IDLE
    assert mover.direction is MovementDirection.DOWN


def test_update_returns_to_idle():
    mover = MovementComponent(make_sprite(), 50.0)
    mover.move(0.1, MovementDirection.RIGHT)
    mover.update()
    assert mover.state is MovementState.IDLE
    assert mover.direction is MovementDirection.RIGHT


@pytest.mark.parametrize(
    "direction, name",
    [
        (MovementDirection.UP, "Up"),
        (MovementDirection.DOWN, "Down"),
        (MovementDirection.LEFT, "Left"),
        (MovementDirection.RIGHT, "Right"),
    ],
)
def test_direction_names(direction, name):
    mover = MovementComponent(make_sprite(), 10.0)
    mover.move(0.0, direction)
    assert mover.direction_name == name


def test_allow_all_combines_flags():
    combined = Movement.ALLOW_UP | Movement.ALLOW_DOWN | Movement.ALLOW_LEFT | Movement.ALLOW_RIGHT
    sprite = make_sprite(scale=1.0)
    mover = MovementComponent(sprite, 10.0, combined)
    mover.move(1.0, MovementDirection.UP)
    mover.move(1.0, MovementDirection.LEFT)
    assert sprite.position == pytest.approx((0.0, 0.0))
    mover.move(1.0, MovementDirection.DOWN)
    mover.move(1.0, MovementDirection.RIGHT)
    assert sprite.position == pytest.approx((10.0, 10.0))
    assert mover.direction is MovementDirection.RIGHT