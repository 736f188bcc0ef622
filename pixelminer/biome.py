"""Biome kinds and their climate preferences."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .tiles import Color


class BiomeType(IntEnum):
    UNKNOWN = 0
    DESERT = 1
    FOREST = 2
    GRASSLAND = 3
    JUNGLE = 4
    MOUNTAINS = 5
    OCEAN = 6
    TUNDRA = 7


_NAMES = {
    BiomeType.DESERT: "Desert",
    BiomeType.FOREST: "Forest",
    BiomeType.GRASSLAND: "Grassland",
    BiomeType.JUNGLE: "Jungle",
    BiomeType.MOUNTAINS: "Mountains",
    BiomeType.OCEAN: "Ocean",
    BiomeType.TUNDRA: "Tundra",
}


@dataclass(frozen=True)
class BiomeData:
    """The biome chosen for a grid cell and the colour it was given."""

    type: BiomeType
    color: Color


@dataclass(frozen=True)
class Biome:
    """A biome with the height, moisture and heat it suits best."""

    type: BiomeType
    ideal_height: float
    ideal_moisture: float
    ideal_heat: float

    @property
    def name(self) -> str:
        return _NAMES.get(self.type, "")

    def weight(self, height: float, moisture: float, heat: float) -> float:
        """Closeness of the given climate to the ideal; 1.0 at the ideal."""
        distance = (
            abs(height - self.ideal_height)
            + abs(moisture - self.ideal_moisture)
            + abs(heat - self.ideal_heat)
        )
        return 1.0 / (1.0 + distance)


def default_biomes() -> list[Biome]:
    """Return the biomes used by the world generator, in selection order."""
    return [
        Biome(BiomeType.DESERT, 0.35, 0.1, 0.8),
        Biome(BiomeType.FOREST, 0.4, 0.6, 0.4),
        Biome(BiomeType.GRASSLAND, 0.3, 0.5, 0.5),
        Biome(BiomeType.JUNGLE, 0.45, 0.8, 0.7),
        Biome(BiomeType.MOUNTAINS, 0.9, 0.3, 0.3),
        Biome(BiomeType.OCEAN, 0.35, 0.7, 0.4),
        Biome(BiomeType.TUNDRA, 0.8, 0.3, 0.1),
    ]