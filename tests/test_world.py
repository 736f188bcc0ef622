import os
import struct

import pytest

from pixelminer.biome import BiomeData
from pixelminer.chunk import CHUNK_SIZE_IN_TILES
from pixelminer.tiles import Color, Tile, TileId, default_tile_data
from pixelminer.world import GameMap, WorldError


@pytest.fixture
def tile_data():
    return default_tile_data()


def make_map(tmp_path, **kwargs):
    folder = str(tmp_path) + "/"
    kwargs.setdefault("max_regions", (1, 1))
    return GameMap(default_tile_data(), maps_folder=folder, **kwargs)


def tile_of(tile_data, tile_id, color=Color.TRANSPARENT):
    return Tile.from_data(tile_data[tile_id], color=color)


def test_real_dimensions_scale_linearly(tmp_path):
    small = make_map(tmp_path, scale=1.0)
    large = make_map(tmp_path, scale=2.0)
    assert large.real_dimensions() == (
        small.real_dimensions()[0] * 2,
        small.real_dimensions()[1] * 2,
    )


def test_world_size_of_one_region(tmp_path):
    world = make_map(tmp_path)
    assert world.world_size == (64, 64)


def test_put_and_get_tile(tmp_path, tile_data):
    world = make_map(tmp_path)
    stone = tile_of(tile_data, TileId.STONE)
    world.put_tile(stone, 20, 5, 0)
    assert world.get_tile(20, 5, 0) is stone
    assert stone.grid_position() == (20, 5)
    assert world.get_tile(20, 5, 1) is None
    assert world.get_tile(0, 0, 0) is None


def test_put_tile_does_not_overwrite(tmp_path, tile_data):
    world = make_map(tmp_path)
    first = tile_of(tile_data, TileId.STONE)
    second = tile_of(tile_data, TileId.SAND)
    world.put_tile(first, 3, 3, 0)
    world.put_tile(second, 3, 3, 0)
    assert world.get_tile(3, 3, 0) is first


@pytest.mark.parametrize("cell", [(-1, 0, 0), (0, -1, 0), (64, 0, 0), (0, 64, 0), (0, 0, 5)])
def test_put_tile_outside_world_ignored(tmp_path, tile_data, cell):
    world = make_map(tmp_path)
    world.put_tile(tile_of(tile_data, TileId.DIRT), *cell)
    assert world.get_tile(*cell) is None
    assert world.visible_chunks(0, 0) == []


def test_visible_chunks(tmp_path, tile_data):
    world = make_map(tmp_path)
    for chunk_x in range(4):
        for chunk_y in range(4):
            world.put_tile(tile_of(tile_data, TileId.DIRT), chunk_x * 16, chunk_y * 16, 0)
    indexes = {c.chunk_index for c in world.visible_chunks(0, 0)}
    assert indexes == {(0, 0), (0, 1), (1, 0), (1, 1)}
    middle = {c.chunk_index for c in world.visible_chunks(20, 20)}
    assert middle == {(x, y) for x in range(3) for y in range(3)}


def test_spawn_point_randomized_within_world(tmp_path):
    world = make_map(tmp_path)
    world.randomize_spawn_point()
    x, y = world.spawn_point()
    assert 0 <= x < world.world_size[0] * world.grid_size
    assert 0 <= y < world.world_size[1] * world.grid_size
    assert x % world.grid_size == 0 and y % world.grid_size == 0


def test_region_file_layout(tmp_path, tile_data):
    world = make_map(tmp_path)
    world.put_tile(tile_of(tile_data, TileId.STONE), 0, 0, 0)
    world.save("layout")
    with open(tmp_path / "layout" / "regions" / "r.0.0.region", "rb") as handle:
        data = handle.read()
    assert data == struct.pack("<HHI", 0, 0, 1) + struct.pack("<HHHI", 0, 0, 0, TileId.STONE)


def test_grass_color_written(tmp_path, tile_data):
    world = make_map(tmp_path)
    world.put_tile(tile_of(tile_data, TileId.GRASS_TILE, Color(10, 20, 30, 255)), 1, 2, 0)
    world.save("grass")
    with open(tmp_path / "grass" / "regions" / "r.0.0.region", "rb") as handle:
        data = handle.read()
    assert data.endswith(bytes([10, 20, 30]))


def test_save_load_round_trip(tmp_path, tile_data):
    world = make_map(tmp_path, seed=42)
    world.metadata.name = "round"
    world.metadata.spawn_x = 32
    world.put_tile(tile_of(tile_data, TileId.STONE), 17, 40, 0)
    world.put_tile(tile_of(tile_data, TileId.GRASS_TILE, Color(1, 2, 3, 255)), 63, 63, 2)
    world.save("round")

    loaded = make_map(tmp_path)
    loaded.load("round")
    assert loaded.metadata.seed == 42
    assert loaded.metadata.name == "round"
    assert loaded.spawn_point()[0] == 32.0
    assert loaded.get_tile(17, 40, 0).id == TileId.STONE
    assert loaded.get_tile(17, 40, 0).grid_position() == (17, 40)
    grass = loaded.get_tile(63, 63, 2)
    assert grass.id == TileId.GRASS_TILE
    assert grass.color == Color(1, 2, 3, 255)


def test_unknown_tile_id_loads_as_unknown(tmp_path, tile_data):
    world = make_map(tmp_path)
    world.put_tile(Tile("Odd", 999, tile_data[TileId.DIRT].texture_rect), 4, 4, 0)
    world.save("odd")
    loaded = make_map(tmp_path)
    loaded.load("odd")
    assert loaded.get_tile(4, 4, 0).id == TileId.UNKNOWN


def test_save_without_name_records_one(tmp_path):
    world = make_map(tmp_path)
    world.save()
    assert world.metadata.name
    assert os.path.isdir(tmp_path / world.metadata.name / "regions")


def test_load_missing_world(tmp_path):
    with pytest.raises(WorldError):
        make_map(tmp_path).load("nothing")


def test_load_without_metadata(tmp_path):
    (tmp_path / "empty").mkdir()
    with pytest.raises(WorldError):
        make_map(tmp_path).load("empty")


def test_load_without_regions(tmp_path):
    world = make_map(tmp_path)
    world.save("noregions")
    for entry in (tmp_path / "noregions" / "regions").iterdir():
        entry.unlink()
    (tmp_path / "noregions" / "regions").rmdir()
    with pytest.raises(WorldError):
        make_map(tmp_path).load("noregions")


def test_truncated_region_file(tmp_path):
    world = make_map(tmp_path)
    world.save("broken")
    with open(tmp_path / "broken" / "regions" / "r.0.0.region", "wb") as handle:
        handle.write(struct.pack("<HHI", 0, 0, 3) + b"\x00\x00")
    with pytest.raises(WorldError):
        make_map(tmp_path).load("broken")


def test_generate_fills_ground_layer(tmp_path):
    world = make_map(tmp_path, seed=7)
    world.generate()
    width, height = world.world_size
    allowed = {TileId.SAND, TileId.GRASS_TILE, TileId.STONE, TileId.WATER, TileId.SNOW}
    for x in range(width):
        for y in range(height):
            tile = world.get_tile(x, y, 0)
            assert tile.id in allowed
            assert isinstance(world.biome_map[x][y], BiomeData)
            if tile.id == TileId.GRASS_TILE:
                assert tile.color.a == 255
    total = sum(c.tile_count() for c in world.visible_chunks(20, 20))
    assert total >= 9 * CHUNK_SIZE_IN_TILES[0] * CHUNK_SIZE_IN_TILES[1]


def test_generate_is_deterministic(tmp_path):
    first = make_map(tmp_path, seed=123)
    second = make_map(tmp_path, seed=123)
    first.generate()
    second.generate()
    for x in range(0, 64, 7):
        for y in range(0, 64, 5):
            for z in (0, 1):
                a = first.get_tile(x, y, z)
                b = second.get_tile(x, y, z)
                assert (a is None) == (b is None)
                if a is not None:
                    assert a.id == b.id
                    assert a.color == b.color
    assert first.biome_map == second.biome_map