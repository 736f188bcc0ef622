"""Chunks: fixed-size blocks of tiles that make up the world."""

from __future__ import annotations

from typing import Iterator, Optional

from .tiles import Rect, Tile

REGION_SIZE_IN_CHUNKS = (4, 4)
CHUNK_SIZE_IN_TILES = (16, 16, 5)


class Chunk:
    """A 16 by 16 area of tiles, five layers deep."""

    def __init__(self, chunk_index: tuple[int, int], grid_size: int, scale: float) -> None:
        self.chunk_index = (int(chunk_index[0]), int(chunk_index[1]))
        self.grid_size = grid_size
        self.scale = scale
        size_x, size_y, size_z = CHUNK_SIZE_IN_TILES
        self._tiles: list[list[list[Optional[Tile]]]] = [
            [[None] * size_z for _ in range(size_y)] for _ in range(size_x)
        ]

    def __repr__(self) -> str:
        return f"Chunk(index={self.chunk_index}, tiles={self.tile_count()})"

    def borders(self) -> Rect:
        """The chunk's area in world coordinates."""
        span_x = CHUNK_SIZE_IN_TILES[0] * self.grid_size * self.scale
        span_y = CHUNK_SIZE_IN_TILES[1] * self.grid_size * self.scale
        return Rect(self.chunk_index[0] * span_x, self.chunk_index[1] * span_y, span_x, span_y)

    def _check(self, x: int, y: int, z: int) -> None:
        for value, limit in zip((x, y, z), CHUNK_SIZE_IN_TILES):
            if not 0 <= value < limit:
                raise IndexError(f"Tile position out of chunk: ({x}, {y}, {z})")

    def get(self, x: int, y: int, z: int) -> Optional[Tile]:
        """Tile at a position inside the chunk, or ``None`` if empty."""
        self._check(x, y, z)
        return self._tiles[x][y][z]

    def set(self, x: int, y: int, z: int, tile: Optional[Tile]) -> None:
        """Store a tile at a position inside the chunk; ``None`` clears it."""
        self._check(x, y, z)
        self._tiles[x][y][z] = tile

    def iter_tiles(self) -> Iterator[tuple[int, int, int, Tile]]:
        """Yield ``(x, y, z, tile)`` for every tile, ordered by x, then y, then z."""
        for x, plane in enumerate(self._tiles):
            for y, column in enumerate(plane):
                for z, tile in enumerate(column):
                    if tile is not None:
                        yield x, y, z, tile

    def tile_count(self) -> int:
        """Number of tiles present in the chunk."""
        return sum(1 for _ in self.iter_tiles())