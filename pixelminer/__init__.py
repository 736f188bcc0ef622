"""Core of a 2D tile-based mining game: world generation, tiles, entities, widget logic, UDP networking and tools."""

__version__ = "0.1.0"