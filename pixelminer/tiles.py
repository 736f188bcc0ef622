"""Tile definitions, the default tile table and the sprite geometry tiles use."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

GAME_VERSION = "alpha 0.0.1"
DATA_VERSION = "1.0.0"
GENERATOR_VERSION = "1.0.0"
MAPS_FOLDER = "Assets/Maps/"
GRID_SIZE = 16


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit components."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for component in (self.r, self.g, self.b, self.a):
            if not 0 <= component <= 255:
                raise ValueError(f"Colour component out of range: {component}")


TRANSPARENT = Color(0, 0, 0, 0)
WHITE = Color(255, 255, 255, 255)
Color.TRANSPARENT = TRANSPARENT
Color.WHITE = WHITE


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, px: float, py: float) -> bool:
        """Whether the point lies inside; the right and bottom edges are excluded."""
        return self.x <= px < self.x + self.width and self.y <= py < self.y + self.height


@dataclass
class Sprite:
    """Placement, scale and tint of a rectangle taken from a texture."""

    texture_rect: Rect
    position: tuple[float, float] = (0.0, 0.0)
    scale: tuple[float, float] = (1.0, 1.0)
    color: Color = field(default=WHITE)

    def move(self, dx: float, dy: float) -> None:
        """Shift the sprite by the given offset."""
        x, y = self.position
        self.position = (x + dx, y + dy)

    def global_bounds(self) -> Rect:
        """Bounds of the scaled sprite in world coordinates."""
        x, y = self.position
        sx, sy = self.scale
        width = self.texture_rect.width * sx
        height = self.texture_rect.height * sy
        return Rect(x + min(0.0, width), y + min(0.0, height), abs(width), abs(height))


class TileId(IntEnum):
    UNKNOWN = 0
    DIRT = 1
    STONE = 2
    GRASS_TILE = 3
    GRASS1 = 4
    GRASS2 = 5
    GRASS_SIDE = 6
    COBBLESTONE = 7
    SAND = 8
    SNOW = 9
    WATER = 10
    GRASS_TOP_FRONT = 11
    GRASS_BOTTOM_FRONT = 12
    GRASS_BOTTOM_BACK = 13
    GRASS_CURVE_TOP_FRONT = 14
    GRASS_CURVE_BOTTOM_FRONT = 15
    GRASS_CURVE_BOTTOM_BACK = 16
    GRASS_TOP = 17
    GRASS_BOTTOM = 18
    GRASS_FRONT = 19


@dataclass(frozen=True)
class TileData:
    """Name, identifier and texture-pack region of a kind of tile."""

    name: str
    id: int
    texture_rect: Rect


_DEFAULT_TILES = (
    ("Unknown", TileId.UNKNOWN, 240, 240),
    ("Dirt", TileId.DIRT, 0, 0),
    ("Stone", TileId.STONE, 16, 0),
    ("Grass Side", TileId.GRASS_SIDE, 32, 0),
    ("Cobblestone", TileId.COBBLESTONE, 48, 0),
    ("Grass", TileId.GRASS_TILE, 0, 16),
    ("Grass", TileId.GRASS1, 0, 48),
    ("Grass", TileId.GRASS2, 0, 32),
    ("Sand", TileId.SAND, 80, 0),
    ("Snow", TileId.SNOW, 96, 0),
    ("Water", TileId.WATER, 112, 0),
    ("Grass", TileId.GRASS_TOP_FRONT, 48, 16),
    ("Grass", TileId.GRASS_BOTTOM_FRONT, 48, 48),
    ("Grass", TileId.GRASS_BOTTOM_BACK, 16, 64),
    ("Grass", TileId.GRASS_CURVE_TOP_FRONT, 64, 32),
    ("Grass", TileId.GRASS_CURVE_BOTTOM_FRONT, 64, 16),
    ("Grass", TileId.GRASS_CURVE_BOTTOM_BACK, 80, 16),
    ("Grass", TileId.GRASS_TOP, 32, 16),
    ("Grass", TileId.GRASS_BOTTOM, 32, 48),
    ("Grass", TileId.GRASS_FRONT, 48, 32),
)


def default_tile_data() -> dict[int, TileData]:
    """Return the built-in tile table keyed by tile identifier."""
    return {
        int(tile_id): TileData(name, int(tile_id), Rect(x, y, GRID_SIZE, GRID_SIZE))
        for name, tile_id, x, y in _DEFAULT_TILES
    }


class Tile:
    """A single tile placed on the world grid."""

    def __init__(
        self,
        name: str,
        tile_id: int,
        texture_rect: Rect,
        grid_size: int = GRID_SIZE,
        grid_position: tuple[int, int] = (0, 0),
        scale: float = 1.0,
        color: Color = TRANSPARENT,
    ) -> None:
        self.name = name
        self.id = int(tile_id)
        self.texture_rect = texture_rect
        grid_x, grid_y = grid_position
        self.sprite = Sprite(
            texture_rect=texture_rect,
            position=(grid_x * grid_size * scale, grid_y * grid_size * scale),
            scale=(scale, scale),
            color=color,
        )

    @classmethod
    def from_data(
        cls,
        data: TileData,
        grid_size: int = GRID_SIZE,
        grid_position: tuple[int, int] = (0, 0),
        scale: float = 1.0,
        color: Color = TRANSPARENT,
    ) -> "Tile":
        """Create a tile of the kind described by ``data``."""
        return cls(data.name, data.id, data.texture_rect, grid_size, grid_position, scale, color)

    def __repr__(self) -> str:
        return f"Tile(name={self.name!r}, id={self.id}, position={self.position})"

    @property
    def position(self) -> tuple[float, float]:
        return self.sprite.position

    @position.setter
    def position(self, value: tuple[float, float]) -> None:
        self.sprite.position = (float(value[0]), float(value[1]))

    @property
    def color(self) -> Color:
        return self.sprite.color

    @color.setter
    def color(self, value: Color) -> None:
        self.sprite.color = value

    def grid_position(self) -> tuple[int, int]:
        """Grid cell the tile's top-left corner lies in."""
        x, y = self.sprite.position
        sx, sy = self.sprite.scale
        return (int(x / (GRID_SIZE * sx)), int(y / (GRID_SIZE * sy)))

    def place(self, grid_x: int, grid_y: int) -> None:
        """Move the tile to the given grid cell."""
        sx, sy = self.sprite.scale
        self.sprite.position = (grid_x * GRID_SIZE * sx, grid_y * GRID_SIZE * sy)

    def global_bounds(self) -> Rect:
        """Bounds of the tile in world coordinates."""
        return self.sprite.global_bounds()

    def center(self) -> tuple[float, float]:
        """Centre of the tile in world coordinates."""
        return self.sprite.global_bounds().center