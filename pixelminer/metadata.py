"""World metadata and its JSON form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .jsonfmt import get_as


@dataclass
class DataPacks:
    """Names of the enabled and disabled data packs."""

    enabled: list = field(default_factory=list)
    disabled: list = field(default_factory=list)


@dataclass
class Metadata:
    """Descriptive information stored alongside a saved world."""

    data_version: str = ""
    game_version: str = ""
    creation_time: int = 0
    data_packs: DataPacks = field(default_factory=DataPacks)
    day_time: int = 0
    difficulty: str = ""
    generator_name: str = ""
    last_played: int = 0
    name: str = ""
    seed: int = 0
    spawn_x: int = 0
    spawn_y: int = 0
    time_played: int = 0

    def to_json(self) -> dict:
        """Return the JSON object written to ``metadata.json``."""
        return {
            "dataVersion": self.data_version,
            "gameVersion": self.game_version,
            "dataPacks": {
                "enabled": list(self.data_packs.enabled),
                "disabled": list(self.data_packs.disabled),
            },
            "dayTime": self.day_time,
            "name": self.name,
            "difficulty": self.difficulty,
            "seed": self.seed,
            "generatorName": self.generator_name,
            "creationTime": self.creation_time,
            "lastPlayed": self.last_played,
            "spawnX": self.spawn_x,
            "spawnY": self.spawn_y,
            "timePlayed": self.time_played,
        }

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> "Metadata":
        """Build metadata from its JSON object.

        A missing key raises ``KeyError`` and a value of the wrong kind
        raises ``JSONError``. The play time is not read back.
        """
        packs = get_as(obj["dataPacks"], dict)
        return cls(
            data_version=get_as(obj["dataVersion"], str),
            game_version=get_as(obj["gameVersion"], str),
            creation_time=get_as(obj["creationTime"], int),
            data_packs=DataPacks(
                enabled=list(get_as(packs["enabled"], list)),
                disabled=list(get_as(packs["disabled"], list)),
            ),
            day_time=get_as(obj["dayTime"], int),
            difficulty=get_as(obj["difficulty"], str),
            generator_name=get_as(obj["generatorName"], str),
            last_played=get_as(obj["lastPlayed"], int),
            name=get_as(obj["name"], str),
            seed=get_as(obj["seed"], int),
            spawn_x=get_as(obj["spawnX"], int),
            spawn_y=get_as(obj["spawnY"], int),
        )