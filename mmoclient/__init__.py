"""Client for a tile-based online role-playing game: protocol, framing, maps and pygame scenes."""

__version__ = "0.1.0"