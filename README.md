# pixelminer

The engine-side core of a 2D tile-based mining game. It holds the game's
logic and data: world generation, tiles and chunks, entities, widget state,
networking and small tools. It does no drawing of its own.

## What it contains

- **World generation and storage** (`pixelminer.world`): `GameMap` is a grid
  of chunks. `GameMap.generate()` picks a biome for every cell from seeded
  Perlin noise (`pixelminer.perlin.PerlinNoise`, `Wave`) and biome weights
  (`pixelminer.biome.Biome`, `default_biomes()`). It places sand, grass,
  stone, water or snow tiles, scatters grass decorations, and blurs the grass
  colours. `GameMap.save(name)` and `GameMap.load(name)` write and read a
  world as a `metadata.json` file (`pixelminer.metadata.Metadata`) plus
  binary region files. Failures raise `WorldError`.
- **Tiles and chunks** (`pixelminer.tiles`, `pixelminer.chunk`): `Tile`,
  `TileId`, `TileData`, the built-in table from `default_tile_data()`, and
  `Chunk`, a 16 × 16 block of tiles five layers deep.
- **Entities** (`pixelminer.animation`, `pixelminer.movement`,
  `pixelminer.entity`):
  - `Animation` and `Animations` step a sprite through frames of a sheet.
  - `MovementComponent` moves a sprite in the directions its `Movement`
    flags allow.
  - `Player` is moved by a set of pressed key names (`w`, `a`, `s`, `d`).
- **Networking** (`pixelminer.packet`, `pixelminer.server`,
  `pixelminer.client`):
  - `Packet` is a byte buffer in network byte order, and `FileDescriptor`
    describes a file carried in a packet.
  - `Server` listens on a UDP port. It accepts or refuses clients by
    identifier (`ACK` / `RFS`), times them out, sends `KIL` to disconnect
    them, and receives files.
  - `Client` connects in a background thread, disconnects, and sends and
    receives files.
  - Both can be used as context managers.
- **Widget logic** (`pixelminer.widgets`):
  - `Button` and `TextButton` set their state and colours from the mouse
    position and button.
  - `TextInput` builds a string from held keys. It handles shift, backspace,
    tab, key repeat after half a second, and a blinking cursor flag.
  - `percent()` and `char_size()` are layout helpers.
- **Tools**:
  - `pixelminer.jsonfmt`: `parse`, `parse_file`, `stringify`, `get_as`,
    `JSONError`.
  - `pixelminer.random_lcg.Random`: a linear congruential generator.
  - `pixelminer.logger`: `Logger` and `LoggedError`.
  - `pixelminer.uuidgen`: `generate_uuid`, `load_or_create_uuid`.
  - `pixelminer.graphics_settings.GraphicsSettings`: JSON-stored resolution,
    frame limit, fullscreen and vsync.

It has no dependencies outside the standard library.

## Install

```
pip install .
```

To also install the test tools:

```
pip install ".[test]"
```

## Examples

```python
from pixelminer.random_lcg import Random
from pixelminer.perlin import PerlinNoise, Wave
from pixelminer import jsonfmt

rng = Random(42)
print(rng.next_int(0, 100))

noise = PerlinNoise(42)
heights = noise.noise_map(64, 64, 0.08, [Wave(120.0, 0.009, 4.0)], (0.0, 0.0))

text = jsonfmt.stringify({"seed": 42, "name": "world"})
assert jsonfmt.parse(text) == {"seed": 42, "name": "world"}
```

Generating, saving and loading a small world:

```python
from pixelminer.world import GameMap

world = GameMap(seed=1234, maps_folder="worlds/", max_regions=(1, 1))
world.generate()
world.save("demo")

copy = GameMap(maps_folder="worlds/", max_regions=(1, 1))
copy.load("demo")
print(copy.get_tile(3, 5, 0))
```

The world's name is appended directly to `maps_folder`, so the folder should
end with `/`. The default folder is `Assets/Maps/`. Each world is stored in
`<maps_folder><name>/`, which holds `metadata.json` and a `regions/`
directory of `r.<x>.<y>.region` files.

## What it does not do

- There is no window, rendering, sound or input handling. Sprites, tiles and
  widgets only keep positions, rectangles and colours for a front end to
  draw.
- Widgets and players take mouse and key state as arguments.
- There are no menus or screens, no game loop and no command to start a game.
- `Server` and `Client` only exchange connection control messages and files.
  They do not synchronise players or world state.

## Tests

```
pytest
```