"""The game world: a grid of chunks, terrain generation and region files."""

from __future__ import annotations

import io
import os
import random
import struct
from typing import Mapping, Optional

from .biome import Biome, BiomeData, BiomeType, default_biomes
from .chunk import CHUNK_SIZE_IN_TILES, REGION_SIZE_IN_CHUNKS, Chunk
from .jsonfmt import get_as, parse, stringify
from .metadata import Metadata
from .perlin import PerlinNoise, Wave
from .random_lcg import Random
from .tiles import GRID_SIZE, MAPS_FOLDER, Color, Tile, TileData, TileId, default_tile_data

MAX_REGIONS = (4, 4)

_CHUNK_HEADER = struct.Struct("<HHI")
_TILE_RECORD = struct.Struct("<HHHI")
_GRASS_COLOR = struct.Struct("<BBB")

_HEIGHT_WAVES = (Wave(120.0, 0.009, 4.0), Wave(300.0, 0.2, 1.5), Wave(500.0, 0.018, 8.0))
_MOISTURE_WAVES = (Wave(622.0, 0.04, 5.0), Wave(200.0, 0.08, 2.0), Wave(400.0, 0.2, 0.8))
_HEAT_WAVES = (Wave(318.6, 0.05, 5.0), Wave(329.7, 0.5, 1.0))

_BLUR_KERNEL = (
    (1 / 16, 1 / 8, 1 / 16),
    (1 / 8, 1 / 4, 1 / 8),
    (1 / 16, 1 / 8, 1 / 16),
)
_BLUR_PASSES = 5


class WorldError(RuntimeError):
    """Raised when a world cannot be read or written."""


def _u8(value: float) -> int:
    return int(value) & 0xFF


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // b
    return quotient if a >= 0 else -quotient


def _world_dir(folder: str, name: str) -> str:
    path = folder + name
    if not path.endswith("/"):
        path += "/"
    return path


class GameMap:
    """A world made of regions of chunks, each chunk a block of tiles."""

    def __init__(
        self,
        tile_data: Optional[Mapping[int, TileData]] = None,
        grid_size: int = GRID_SIZE,
        scale: float = 1.0,
        seed: int = 0,
        maps_folder: str = MAPS_FOLDER,
        max_regions: tuple[int, int] = MAX_REGIONS,
    ) -> None:
        self.tile_data: Mapping[int, TileData] = (
            tile_data if tile_data is not None else default_tile_data()
        )
        self.grid_size = grid_size
        self.scale = scale
        self.maps_folder = maps_folder
        self.max_regions = (int(max_regions[0]), int(max_regions[1]))
        self.max_chunks = (
            self.max_regions[0] * REGION_SIZE_IN_CHUNKS[0],
            self.max_regions[1] * REGION_SIZE_IN_CHUNKS[1],
        )
        self.world_size = (
            self.max_chunks[0] * CHUNK_SIZE_IN_TILES[0],
            self.max_chunks[1] * CHUNK_SIZE_IN_TILES[1],
        )

        self.metadata = Metadata(seed=seed)
        self.noise = PerlinNoise(seed)
        self.rng = Random(seed)
        self.biomes: list[Biome] = default_biomes()
        self.biome_map: list[list[Optional[BiomeData]]] = [
            [None] * self.world_size[1] for _ in range(self.world_size[0])
        ]
        self._chunks: list[list[Optional[Chunk]]] = [
            [None] * self.max_chunks[1] for _ in range(self.max_chunks[0])
        ]

    # ------------------------------------------------------------------ geometry

    def real_dimensions(self) -> tuple[float, float]:
        """Size of the whole world in world coordinates."""
        return (
            self.world_size[0] * self.grid_size * self.scale,
            self.world_size[1] * self.grid_size * self.scale,
        )

    def spawn_point(self) -> tuple[float, float]:
        """Spawn position stored in the metadata."""
        return (float(self.metadata.spawn_x), float(self.metadata.spawn_y))

    def randomize_spawn_point(self) -> None:
        """Pick a random grid cell as the spawn point."""
        self.metadata.spawn_x = random.randrange(self.world_size[0]) * self.grid_size
        self.metadata.spawn_y = random.randrange(self.world_size[1]) * self.grid_size

    def chunk(self, chunk_x: int, chunk_y: int) -> Optional[Chunk]:
        """Chunk at the given chunk index, or ``None`` if none exists."""
        if not (0 <= chunk_x < self.max_chunks[0] and 0 <= chunk_y < self.max_chunks[1]):
            return None
        return self._chunks[chunk_x][chunk_y]

    def visible_chunks(self, entity_grid_x: int, entity_grid_y: int) -> list[Chunk]:
        """Existing chunks in the 3 by 3 block around the entity's chunk."""
        centre_x = _trunc_div(entity_grid_x, CHUNK_SIZE_IN_TILES[0])
        centre_y = _trunc_div(entity_grid_y, CHUNK_SIZE_IN_TILES[1])
        visible = []
        for i in (-1, 0, 1):
            for j in (-1, 0, 1):
                found = self.chunk(centre_x + i, centre_y + j)
                if found is not None:
                    visible.append(found)
        return visible

    # ------------------------------------------------------------------ tiles

    def _in_world(self, grid_x: int, grid_y: int, grid_z: int) -> bool:
        return (
            0 <= grid_x < self.world_size[0]
            and 0 <= grid_y < self.world_size[1]
            and 0 <= grid_z < CHUNK_SIZE_IN_TILES[2]
        )

    def put_tile(self, tile: Tile, grid_x: int, grid_y: int, grid_z: int) -> None:
        """Place a tile unless the cell is outside the world or already taken."""
        if not self._in_world(grid_x, grid_y, grid_z):
            return
        chunk_x, tile_x = divmod(grid_x, CHUNK_SIZE_IN_TILES[0])
        chunk_y, tile_y = divmod(grid_y, CHUNK_SIZE_IN_TILES[1])

        tile.place(grid_x, grid_y)

        target = self._chunks[chunk_x][chunk_y]
        if target is None:
            target = Chunk((chunk_x, chunk_y), self.grid_size, self.scale)
            self._chunks[chunk_x][chunk_y] = target
        if target.get(tile_x, tile_y, grid_z) is None:
            target.set(tile_x, tile_y, grid_z, tile)

    def get_tile(self, grid_x: int, grid_y: int, grid_z: int) -> Optional[Tile]:
        """Tile at a grid cell, or ``None`` if empty or outside the world."""
        if not self._in_world(grid_x, grid_y, grid_z):
            return None
        chunk_x, tile_x = divmod(grid_x, CHUNK_SIZE_IN_TILES[0])
        chunk_y, tile_y = divmod(grid_y, CHUNK_SIZE_IN_TILES[1])
        target = self._chunks[chunk_x][chunk_y]
        if target is None:
            return None
        return target.get(tile_x, tile_y, grid_z)

    def _new_tile(self, tile_id: int, color: Color = Color.TRANSPARENT) -> Tile:
        return Tile.from_data(
            self.tile_data[tile_id], self.grid_size, (0, 0), self.scale, color
        )

    # ------------------------------------------------------------------ generation

    def _pick_biome(self, height: float, moisture: float, heat: float) -> BiomeType:
        best_weight = -1.0
        best = BiomeType.UNKNOWN
        for biome in self.biomes:
            weight = biome.weight(height, moisture, heat)
            if weight > best_weight:
                best_weight = weight
                best = biome.type
        return best

    @staticmethod
    def _biome_look(biome: BiomeType, moisture: float, heat: float) -> tuple[Optional[int], Color]:
        warmth = 1.0 - moisture + heat
        if biome == BiomeType.DESERT:
            return TileId.SAND, Color(194, 178, 128, 255)
        if biome == BiomeType.FOREST:
            return TileId.GRASS_TILE, Color(_u8(24 * 3.0**warmth), 110, 20, 255)
        if biome == BiomeType.GRASSLAND:
            return TileId.GRASS_TILE, Color(_u8(26 * 3.2**warmth), 148, 24, 255)
        if biome == BiomeType.JUNGLE:
            return TileId.GRASS_TILE, Color(_u8(25 * 3.2**warmth), 130, 20, 255)
        if biome == BiomeType.MOUNTAINS:
            return TileId.STONE, Color(150, 150, 150, 255)
        if biome == BiomeType.OCEAN:
            return TileId.WATER, Color(16, 51, 163, 255)
        if biome == BiomeType.TUNDRA:
            return TileId.SNOW, Color(216, 242, 230, 255)
        return None, Color(0, 0, 0, 255)

    def generate(self) -> None:
        """Fill the world with terrain chosen from noise-driven biomes."""
        width, height = self.world_size
        heights = self.noise.noise_map(width, height, 0.08, _HEIGHT_WAVES, (0.0, 0.0))
        moistures = self.noise.noise_map(width, height, 0.18, _MOISTURE_WAVES, (10.0, 10.0))
        heats = self.noise.noise_map(width, height, 0.08, _HEAT_WAVES, (5.0, 5.0))

        for x in range(width):
            for y in range(height):
                moisture = moistures[x][y]
                heat = heats[x][y]
                biome = self._pick_biome(heights[x][y], moisture, heat)
                tile_id, color = self._biome_look(biome, moisture, heat)
                self.biome_map[x][y] = BiomeData(biome, color)

                if tile_id == TileId.GRASS_TILE:
                    self.put_tile(self._new_tile(TileId.GRASS_TILE, color), x, y, 0)
                    if not self.rng.next_int(0, 100):
                        self.put_tile(self._new_tile(TileId.GRASS1, color), x, y, 1)
                    elif not self.rng.next_int(0, 3):
                        self.put_tile(self._new_tile(TileId.GRASS2, color), x, y, 1)
                elif tile_id is not None:
                    self.put_tile(self._new_tile(tile_id), x, y, 0)

        self._blur_grass()

    def _blur_grass(self) -> None:
        width, height = self.world_size
        for _ in range(_BLUR_PASSES):
            for x in range(width):
                for y in range(height):
                    tile = self.get_tile(x, y, 0)
                    if tile is None or tile.id != TileId.GRASS_TILE:
                        continue
                    r = g = b = 0.0
                    for i, kernel_row in zip((-1, 0, 1), _BLUR_KERNEL):
                        for j, weight in zip((-1, 0, 1), kernel_row):
                            source = self.get_tile(x + i, y + j, 0) or tile
                            color = source.color
                            r += color.r * weight
                            g += color.g * weight
                            b += color.b * weight
                    tile.color = Color(_u8(r), _u8(g), _u8(b), 255)

    # ------------------------------------------------------------------ persistence

    def save(self, name: Optional[str] = None) -> None:
        """Write metadata and region files under the maps folder.

        Without a name, the metadata name is used, or a random one is chosen
        and recorded if the world has none.
        """
        if name is None:
            if not self.metadata.name:
                self.metadata.name = str(random.randrange(2**31))
            name = self.metadata.name

        path = _world_dir(self.maps_folder, name)
        regions_dir = path + "regions/"
        try:
            os.makedirs(regions_dir, exist_ok=True)
            with open(path + "metadata.json", "w", encoding="utf-8") as handle:
                handle.write(stringify(self.metadata.to_json()))
        except OSError as exc:
            raise WorldError(f"Could not write world files: {path}") from exc

        for region_x in range(self.max_regions[0]):
            for region_y in range(self.max_regions[1]):
                file_name = f"{regions_dir}r.{region_x}.{region_y}.region"
                try:
                    with open(file_name, "wb") as handle:
                        handle.write(self._encode_region(region_x, region_y))
                except OSError as exc:
                    raise WorldError(f"Could not write region file: {file_name}") from exc

        print(f"[ Map::saveToFile ] -> Map saved to: {path}")

    def _encode_region(self, region_x: int, region_y: int) -> bytes:
        out = bytearray()
        size_x, size_y = REGION_SIZE_IN_CHUNKS
        for chunk_x in range(region_x * size_x, region_x * size_x + size_x):
            for chunk_y in range(region_y * size_y, region_y * size_y + size_y):
                current = self._chunks[chunk_x][chunk_y]
                if current is None:
                    continue
                tiles = list(current.iter_tiles())
                out += _CHUNK_HEADER.pack(chunk_x, chunk_y, len(tiles))
                for x, y, z, tile in tiles:
                    out += _TILE_RECORD.pack(x, y, z, tile.id)
                    if tile.id == TileId.GRASS_TILE:
                        color = tile.color
                        out += _GRASS_COLOR.pack(color.r, color.g, color.b)
        return bytes(out)

    def load(self, name: str) -> None:
        """Read a saved world from the maps folder into this map."""
        path = _world_dir(self.maps_folder, name)
        if not os.path.exists(path):
            raise WorldError(f"Inexistent world: {path}")

        metadata_file = path + "metadata.json"
        if not os.path.exists(metadata_file):
            raise WorldError(f"No world metadata found: {path}")
        try:
            with open(metadata_file, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            raise WorldError(f"Failed to open file: {metadata_file}") from exc
        self.metadata = Metadata.from_json(get_as(parse(text), dict))

        regions_dir = path + "regions/"
        if not os.path.exists(regions_dir):
            raise WorldError(f"Invalid world: {path}")

        for region_x in range(self.max_regions[0]):
            for region_y in range(self.max_regions[1]):
                file_name = f"{regions_dir}r.{region_x}.{region_y}.region"
                if not os.path.exists(file_name):
                    continue
                try:
                    with open(file_name, "rb") as handle:
                        data = handle.read()
                except OSError as exc:
                    raise WorldError(f"Could not read region file: {file_name}") from exc
                self._decode_region(io.BytesIO(data), file_name)

        print(f"[ Map::loadFromFile ] -> Map loaded from: {path}")

    @staticmethod
    def _read(stream: io.BytesIO, record: struct.Struct, file_name: str) -> tuple:
        raw = stream.read(record.size)
        if len(raw) < record.size:
            raise WorldError(f"Truncated region file: {file_name}")
        return record.unpack(raw)

    def _decode_region(self, stream: io.BytesIO, file_name: str) -> None:
        while True:
            header = stream.read(_CHUNK_HEADER.size)
            if len(header) < _CHUNK_HEADER.size:
                return
            chunk_x, chunk_y, tile_amount = _CHUNK_HEADER.unpack(header)
            if not (chunk_x < self.max_chunks[0] and chunk_y < self.max_chunks[1]):
                raise WorldError(f"Chunk ({chunk_x}, {chunk_y}) outside the world: {file_name}")

            new_chunk = Chunk((chunk_x, chunk_y), self.grid_size, self.scale)
            self._chunks[chunk_x][chunk_y] = new_chunk

            for _ in range(tile_amount):
                x, y, z, tile_id = self._read(stream, _TILE_RECORD, file_name)
                if not (
                    x < CHUNK_SIZE_IN_TILES[0]
                    and y < CHUNK_SIZE_IN_TILES[1]
                    and z < CHUNK_SIZE_IN_TILES[2]
                ):
                    raise WorldError(f"Tile ({x}, {y}, {z}) outside its chunk: {file_name}")
                data = self.tile_data.get(tile_id, self.tile_data[TileId.UNKNOWN])
                grid_pos = (
                    x + chunk_x * CHUNK_SIZE_IN_TILES[0],
                    y + chunk_y * CHUNK_SIZE_IN_TILES[1],
                )
                tile = Tile.from_data(data, self.grid_size, grid_pos, self.scale)
                if tile_id == TileId.GRASS_TILE:
                    r, g, b = self._read(stream, _GRASS_COLOR, file_name)
                    tile.color = Color(r, g, b, 255)
                new_chunk.set(x, y, z, tile)